"""
Module: jewel_kernel.models.supplier_payment
Responsibility: ORM persistence for lump supplier payments and the per-item
    lines an allocation produced.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - A payment has at least one line (EmptyAllocationError is raised by the
      service before anything is written).
    - total_payment_cost == sum(line.payment_cost) and
      price_variance == total_payment_cost - total_original_cost, as computed
      by jewel_engines.payment_allocation.

Audit relevance:
    price_variance is stored as plain arithmetic (paid minus originally
    recorded cost).  No favourable/unfavourable label is persisted.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jewel_kernel.db.base import Base, UUIDString


class SupplierPaymentModel(Base):
    """One lump payment to a supplier."""

    __tablename__ = "supplier_payments"

    __table_args__ = (
        Index("idx_supplier_payment_supplier", "supplier_name"),
        Index("idx_supplier_payment_date", "payment_date"),
    )

    supplier_name: Mapped[str] = mapped_column(String(200), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    total_amount_available: Mapped[Decimal] = mapped_column(nullable=False)
    agreed_price_per_gram: Mapped[Decimal] = mapped_column(nullable=False)

    total_weight: Mapped[Decimal] = mapped_column(nullable=False)
    total_original_cost: Mapped[Decimal] = mapped_column(nullable=False)
    total_payment_cost: Mapped[Decimal] = mapped_column(nullable=False)
    price_variance: Mapped[Decimal] = mapped_column(nullable=False)

    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by_id: Mapped[str] = mapped_column(String(64), nullable=False)

    lines: Mapped[list["SupplierPaymentLineModel"]] = relationship(
        back_populates="payment",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SupplierPaymentLineModel.line_number",
    )

    def __repr__(self) -> str:
        return (
            f"<SupplierPayment {self.id}: {self.supplier_name} "
            f"{self.total_payment_cost} ({len(self.lines)} items)>"
        )


class SupplierPaymentLineModel(Base):
    """The share of a payment that settled one inventory item."""

    __tablename__ = "supplier_payment_lines"

    __table_args__ = (
        Index("idx_payment_line_payment", "payment_id"),
        Index("idx_payment_line_item", "item_id"),
    )

    payment_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("supplier_payments.id"),
        nullable=False,
    )
    item_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("inventory_items.id"),
        nullable=False,
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)

    weight: Mapped[Decimal] = mapped_column(nullable=False)
    original_cost: Mapped[Decimal] = mapped_column(nullable=False)
    payment_cost: Mapped[Decimal] = mapped_column(nullable=False)
    price_variance: Mapped[Decimal] = mapped_column(nullable=False)

    payment: Mapped[SupplierPaymentModel] = relationship(back_populates="lines")
