"""Tests for the injectable clocks."""

from datetime import date, datetime, timezone

from jewel_kernel.domain.clock import DeterministicClock, SystemClock


class TestDeterministicClock:
    def test_default_time(self):
        clock = DeterministicClock()
        assert clock.now() == datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert clock.today() == date(2025, 6, 1)

    def test_repeated_calls_stable(self):
        clock = DeterministicClock()
        assert clock.now() == clock.now()

    def test_advance_and_set_time(self):
        clock = DeterministicClock()
        clock.advance(86400)
        assert clock.today() == date(2025, 6, 2)

        clock.set_time(datetime(2024, 1, 15, tzinfo=timezone.utc))
        assert clock.today() == date(2024, 1, 15)


class TestSystemClock:
    def test_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
