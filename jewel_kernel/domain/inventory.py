"""
Inventory domain types.

Pure frozen dataclasses and enums describing a physical lot of stock as the
engines see it. ZERO I/O; ORM persistence lives in jewel_kernel.models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from jewel_kernel.domain.values import ZERO, to_decimal


class PaymentStatus(str, Enum):
    """Supplier payment state of an item."""

    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


OUTSTANDING_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.UNPAID, PaymentStatus.PARTIALLY_PAID}
)


class ItemStatus(str, Enum):
    """Physical lifecycle state of an item."""

    AVAILABLE = "available"
    SOLD = "sold"
    RETURNED = "returned"
    TRANSFERRED = "transferred"
    RESERVED = "reserved"
    RETURNED_TO_SUPPLIER = "returned_to_supplier"


_DECIMAL_FIELDS = (
    "weight",
    "raw_material_price",
    "incoming_raw_material_price",
    "labor_cost_per_gram",
    "profit_percentage",
    "selling_price",
)


@dataclass(frozen=True)
class InventoryItem:
    """
    A physical lot of stock.

    Contract:
        Numeric fields are normalized to Decimal on construction. Range
        checks (weight > 0, prices >= 0) are NOT done here; the engines
        enforce their own preconditions.
    """

    id: str
    model: str
    category: str
    weight: Decimal
    raw_material_price: Decimal
    incoming_raw_material_price: Decimal
    labor_cost_per_gram: Decimal = ZERO
    profit_percentage: Decimal = Decimal("20")
    is_central_inventory: bool = False
    quantity: int = 1
    branch_id: str | None = None
    supplier_name: str | None = None
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    status: ItemStatus = ItemStatus.AVAILABLE
    purchase_date: date | None = None
    created_at: datetime | None = None
    selling_price: Decimal = ZERO
    size: str | None = None
    color: str | None = None
    purity: str | None = None
    stone_type: str | None = None
    stone_weight: Decimal | None = None
    manufacturer: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        for name in _DECIMAL_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        if self.stone_weight is not None:
            object.__setattr__(self, "stone_weight", to_decimal(self.stone_weight))
        object.__setattr__(self, "payment_status", PaymentStatus(self.payment_status))
        object.__setattr__(self, "status", ItemStatus(self.status))

    @property
    def is_outstanding(self) -> bool:
        """True while the supplier has not been fully paid for this item."""
        return self.payment_status in OUTSTANDING_PAYMENT_STATUSES
