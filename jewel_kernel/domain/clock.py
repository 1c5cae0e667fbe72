"""
Clock -- Deterministic time abstraction.

Responsibility:
    Provides an injectable clock interface so that engine and service code
    never call ``datetime.now()`` or ``date.today()`` directly.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Failure modes:
    None.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        All services that need the current time receive a Clock instance
        via constructor injection.

    Guarantees:
        - ``now()`` returns a timezone-aware ``datetime``.
        - ``today()`` returns the calendar date of ``now()``.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...

    def today(self) -> date:
        """Get the current calendar date."""
        return self.now().date()


class SystemClock(Clock):
    """
    Production clock that returns actual system time.

    Non-goals:
        Not suitable for deterministic tests.
    """

    def now(self) -> datetime:
        """Get current system time with timezone."""
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    Guarantees:
        - ``now()`` returns the same value on repeated calls until ``advance()``
          or ``set_time()`` is called.
    """

    def __init__(self, fixed_time: datetime | None = None):
        """
        Initialize with optional fixed time.

        Args:
            fixed_time: If provided, clock always returns this time.
                       If None, uses a default epoch time.
        """
        self._fixed_time = fixed_time or datetime(
            2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc
        )
        self._advance_seconds = 0

    def now(self) -> datetime:
        """Get the fixed/controlled time."""
        return self._fixed_time + timedelta(seconds=self._advance_seconds)

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._fixed_time = time
        self._advance_seconds = 0

    def advance(self, seconds: int = 1) -> None:
        """Advance the clock by the specified seconds."""
        self._advance_seconds += seconds
