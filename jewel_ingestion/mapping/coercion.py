"""
Boundary coercion: spreadsheet cell -> typed value.

Each cell is coerced exactly once, into a CoercionResult; the row rules
then work on typed values only.  Pure, ZERO I/O.

Dates follow the spreadsheet template's conventions: ``MM/DD/YY``,
``MM/DD/YYYY`` and ``YYYY-MM-DD``.  Two-digit years at or below the pivot
belong to the current century of ``today``, the rest to the previous one.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

# Numeric(38, 9) columns hold at most 29 integer digits
_MAX_INTEGER_DIGITS = 29


@dataclass(frozen=True)
class CoercionResult:
    """Result of coercing one cell. ``value`` may be a fallback on failure."""

    success: bool
    value: Any = None
    reason: str | None = None


def _failed(reason: str, value: Any = None) -> CoercionResult:
    return CoercionResult(success=False, value=value, reason=reason)


def coerce_decimal(value: Any) -> CoercionResult:
    """int, float, Decimal or numeric string -> finite Decimal."""
    if isinstance(value, bool):
        return _failed(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, (int, float)):
        d = Decimal(str(value))
    elif isinstance(value, str):
        try:
            d = Decimal(value.strip())
        except InvalidOperation:
            return _failed(f"not a number: {value!r}")
    else:
        return _failed(f"not a number: {value!r}")
    if not d.is_finite():
        return _failed(f"not a finite number: {value!r}")
    if d.adjusted() >= _MAX_INTEGER_DIGITS:
        return _failed(f"number too large: {value!r}")
    return CoercionResult(success=True, value=d)


def coerce_int(value: Any) -> CoercionResult:
    """Whole number (``3``, ``"3"``, ``3.0``) -> int."""
    result = coerce_decimal(value)
    if not result.success:
        return result
    d: Decimal = result.value
    if d != d.to_integral_value():
        return _failed(f"not a whole number: {value!r}")
    return CoercionResult(success=True, value=int(d))


def coerce_bool(
    value: Any,
    true_values: Iterable[str] = ("true", "1", "yes"),
    false_values: Iterable[str] = ("false", "0", "no"),
) -> CoercionResult:
    """bool, 0/1 or a recognized word -> bool.  Matching ignores case."""
    if isinstance(value, bool):
        return CoercionResult(success=True, value=value)
    if isinstance(value, (int, float, Decimal)) and value in (0, 1):
        return CoercionResult(success=True, value=bool(value))
    text = str(value).strip().lower()
    if text in {t.lower() for t in true_values}:
        return CoercionResult(success=True, value=True)
    if text in {f.lower() for f in false_values}:
        return CoercionResult(success=True, value=False)
    return _failed(f"not a yes/no value: {value!r}")


def _expand_two_digit_year(year: int, today: date, pivot: int) -> int:
    century = today.year // 100 * 100
    return century + year if year <= pivot else century + year - 100


def _build_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def normalize_purchase_date(value: Any, today: date, pivot: int = 30) -> CoercionResult:
    """
    Normalize a purchase date cell.

    Blank -> ``today`` (success).  Anything unparseable -> ``today`` as the
    fallback value with success False, so the caller can warn.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return CoercionResult(success=True, value=today)
    if isinstance(value, datetime):
        return CoercionResult(success=True, value=value.date())
    if isinstance(value, date):
        return CoercionResult(success=True, value=value)

    text = str(value).strip()
    invalid = _failed(f"unrecognized date {text!r}; use MM/DD/YY or YYYY-MM-DD", today)

    if "/" in text:
        parts = [p.strip() for p in text.split("/")]
        if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
            return invalid
        month, day, year_text = parts
        year = int(year_text)
        if len(year_text) == 2:
            year = _expand_two_digit_year(year, today, pivot)
        elif len(year_text) != 4:
            return invalid
        parsed = _build_date(year, int(month), int(day))
        return CoercionResult(success=True, value=parsed) if parsed else invalid

    match = _ISO_DATE.match(text)
    if match:
        parsed = _build_date(*(int(g) for g in match.groups()))
        return CoercionResult(success=True, value=parsed) if parsed else invalid

    return invalid
