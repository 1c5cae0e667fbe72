"""
jewel_kernel.domain -- Pure domain types. ZERO I/O.
"""

from jewel_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from jewel_kernel.domain.inventory import (
    OUTSTANDING_PAYMENT_STATUSES,
    InventoryItem,
    ItemStatus,
    PaymentStatus,
)
from jewel_kernel.domain.values import HUNDRED, ONE, ZERO, to_decimal

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "InventoryItem",
    "ItemStatus",
    "PaymentStatus",
    "OUTSTANDING_PAYMENT_STATUSES",
    "HUNDRED",
    "ONE",
    "ZERO",
    "to_decimal",
]
