"""
Values -- numeric helpers shared by every engine.

Responsibility:
    Converts loosely-typed numbers to Decimal at the domain boundary so that
    all downstream arithmetic is Decimal-only (never float).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - TypeError for booleans and non-numeric types.
    - ValueError for strings that do not parse as a number.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """
    Convert an int, str, float or Decimal to Decimal.

    Floats go through ``str`` so that 3.62 becomes Decimal("3.62") rather
    than its binary expansion.

    Raises:
        TypeError: If value is a bool or an unsupported type.
        ValueError: If value is a string that is not a number.
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not numeric values")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"Not a number: {value!r}") from e
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


def is_finite_non_negative(value: Decimal) -> bool:
    """True when value is a finite Decimal >= 0."""
    return value.is_finite() and value >= ZERO
