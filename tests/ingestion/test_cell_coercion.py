"""Tests for boundary coercion of spreadsheet cells."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from jewel_ingestion.mapping.coercion import (
    coerce_bool,
    coerce_decimal,
    coerce_int,
    normalize_purchase_date,
)

TODAY = date(2025, 6, 1)


class TestCoerceDecimal:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("3.62", Decimal("3.62")),
            (" 800000 ", Decimal("800000")),
            (3.62, Decimal("3.62")),
            (70000, Decimal("70000")),
            (Decimal("1.5"), Decimal("1.5")),
        ],
    )
    def test_numbers(self, value, expected):
        result = coerce_decimal(value)
        assert result.success
        assert result.value == expected

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", "1E+40", True, None, [1]])
    def test_non_numbers(self, value):
        result = coerce_decimal(value)
        assert not result.success
        assert result.reason


class TestCoerceInt:
    @pytest.mark.parametrize("value", ["3", 3, 3.0, "3.00"])
    def test_whole_numbers(self, value):
        result = coerce_int(value)
        assert result.success
        assert result.value == 3

    @pytest.mark.parametrize("value", ["2.5", 2.5, "two"])
    def test_not_whole(self, value):
        assert not coerce_int(value).success


class TestCoerceBool:
    TRUE = ("true", "1", "yes", "ha", "x")
    FALSE = ("false", "0", "no", "yo'q", "yoq")

    @pytest.mark.parametrize("value", [True, 1, "TRUE", "Ha", " x "])
    def test_true(self, value):
        result = coerce_bool(value, self.TRUE, self.FALSE)
        assert result.success and result.value is True

    @pytest.mark.parametrize("value", [False, 0, "false", "Yo'q", "NO"])
    def test_false(self, value):
        result = coerce_bool(value, self.TRUE, self.FALSE)
        assert result.success and result.value is False

    @pytest.mark.parametrize("value", ["maybe", 2, ""])
    def test_unrecognized(self, value):
        assert not coerce_bool(value, self.TRUE, self.FALSE).success


class TestNormalizePurchaseDate:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("05/19/25", date(2025, 5, 19)),
            ("5/9/25", date(2025, 5, 9)),
            ("05/19/2025", date(2025, 5, 19)),
            ("12/31/99", date(1999, 12, 31)),
            ("01/01/30", date(2030, 1, 1)),
            ("01/01/31", date(1931, 1, 1)),
            ("2024-01-15", date(2024, 1, 15)),
            ("2024-1-5", date(2024, 1, 5)),
        ],
    )
    def test_accepted_formats(self, value, expected):
        result = normalize_purchase_date(value, TODAY)
        assert result.success
        assert result.value == expected

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_defaults_to_today(self, value):
        result = normalize_purchase_date(value, TODAY)
        assert result.success
        assert result.value == TODAY

    def test_typed_date_cells(self):
        assert normalize_purchase_date(date(2024, 3, 1), TODAY).value == date(2024, 3, 1)
        assert normalize_purchase_date(datetime(2024, 3, 1, 10, 30), TODAY).value == date(2024, 3, 1)

    @pytest.mark.parametrize(
        "value",
        ["19-05-2025", "13/45/25", "05/19/025", "2025/05", "02/30/2025", "1/99999999999999/25", "yesterday", 45432],
    )
    def test_malformed_falls_back_to_today(self, value):
        result = normalize_purchase_date(value, TODAY)
        assert not result.success
        assert result.value == TODAY
        assert "MM/DD/YY" in result.reason

    def test_custom_pivot(self):
        result = normalize_purchase_date("01/01/35", TODAY, pivot=40)
        assert result.value == date(2035, 1, 1)
