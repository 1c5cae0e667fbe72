"""
Module: jewel_kernel.models.inventory_item
Responsibility: ORM persistence for physical inventory lots.
Architecture position: Kernel > Models.  May import from db/base.py and the
    pure domain types it converts to.

Invariants enforced:
    - selling_price is written only by services that computed it through
      jewel_engines.pricing (import commit, margin update).
    - payment_status changes only when a SupplierPaymentModel referencing the
      item is written in the same transaction.

Audit relevance:
    paid_price_per_gram and price_variance record what the supplier was
    actually paid for the item, next to the originally recorded raw price.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jewel_kernel.db.base import TrackedBase, UUIDString
from jewel_kernel.domain.inventory import InventoryItem, ItemStatus, PaymentStatus


class InventoryItemModel(TrackedBase):
    """
    Persistent storage for an inventory item.

    Non-goals:
        - Range checks (weight > 0, stone_weight <= weight) are enforced by
          the import validator before insert, not by the database.
    """

    __tablename__ = "inventory_items"

    __table_args__ = (
        # Query: outstanding items per supplier, oldest first
        Index("idx_item_supplier_payment", "supplier_name", "payment_status"),
        Index("idx_item_branch", "branch_id"),
        Index("idx_item_purchase_date", "purchase_date"),
    )

    model: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)

    weight: Mapped[Decimal] = mapped_column(nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    size: Mapped[str | None] = mapped_column(String(20), nullable=True)

    raw_material_price: Mapped[Decimal] = mapped_column(nullable=False)
    incoming_raw_material_price: Mapped[Decimal] = mapped_column(nullable=False)
    labor_cost_per_gram: Mapped[Decimal] = mapped_column(nullable=False)
    profit_percentage: Mapped[Decimal] = mapped_column(nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(nullable=False)
    selling_price: Mapped[Decimal] = mapped_column(nullable=False)

    is_central_inventory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    branch_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("branches.id"),
        nullable=True,
    )

    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    purity: Mapped[str | None] = mapped_column(String(20), nullable=True)
    stone_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    stone_weight: Mapped[Decimal | None] = mapped_column(nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    supplier_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=ItemStatus.AVAILABLE.value
    )
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.UNPAID.value
    )

    # Written when a supplier payment covers the item
    payment_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("supplier_payments.id"),
        nullable=True,
    )
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_price_per_gram: Mapped[Decimal | None] = mapped_column(nullable=True)
    price_variance: Mapped[Decimal | None] = mapped_column(nullable=True)

    source_row_index: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def to_domain(self) -> InventoryItem:
        """Build the immutable domain view consumed by the engines."""
        return InventoryItem(
            id=str(self.id),
            model=self.model,
            category=self.category,
            weight=self.weight,
            raw_material_price=self.raw_material_price,
            incoming_raw_material_price=self.incoming_raw_material_price,
            labor_cost_per_gram=self.labor_cost_per_gram,
            profit_percentage=self.profit_percentage,
            is_central_inventory=self.is_central_inventory,
            quantity=self.quantity,
            branch_id=str(self.branch_id) if self.branch_id else None,
            supplier_name=self.supplier_name,
            payment_status=PaymentStatus(self.payment_status),
            status=ItemStatus(self.status),
            purchase_date=self.purchase_date,
            created_at=self.created_at,
            selling_price=self.selling_price,
            size=self.size,
            color=self.color,
            purity=self.purity,
            stone_type=self.stone_type,
            stone_weight=self.stone_weight,
            manufacturer=self.manufacturer,
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return (
            f"<InventoryItem {self.id}: {self.model} {self.weight}g "
            f"{self.payment_status}>"
        )
