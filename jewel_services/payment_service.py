"""
jewel_services.payment_service -- supplier payment preview and commit.

Responsibility:
    Load a supplier's outstanding items, run the PaymentAllocator over
    them, and on commit record the payment and mark the covered items paid.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    The transaction boundary is the injected ``session_scope`` callable.

Invariants enforced:
    - Commit re-runs the allocation inside its own transaction, so the
      items marked paid are exactly the ones allocated against the rows
      the transaction read.
    - A payment row is written together with one line per selected item
      and every selected item is updated in the same transaction.
    - Each paid item records the agreed price per gram and its own price
      variance (payment cost minus recorded cost).

Failure modes:
    - EmptyAllocationError from commit when the allocation selects nothing.
    - InvalidAllocationInputError propagates from the engine.

Audit relevance:
    supplier_payments and supplier_payment_lines keep the totals and the
    per-item split; inventory_items.payment_id links each item back.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from jewel_engines.payment_allocation import (
    AllocationResult,
    PaymentAllocator,
    PaymentEnvelope,
    SupplierOutstanding,
)
from jewel_kernel.domain.clock import Clock, SystemClock
from jewel_kernel.domain.inventory import (
    OUTSTANDING_PAYMENT_STATUSES,
    InventoryItem,
    PaymentStatus,
)
from jewel_kernel.exceptions import EmptyAllocationError
from jewel_kernel.logging_config import LogContext, get_logger
from jewel_kernel.models.inventory_item import InventoryItemModel
from jewel_kernel.models.supplier_payment import SupplierPaymentLineModel, SupplierPaymentModel

logger = get_logger("services.payment")

SessionScope = Callable[[], AbstractContextManager[Session]]


@dataclass(frozen=True)
class RecordedPayment:
    """A committed supplier payment and the allocation it was built from."""

    payment_id: UUID
    allocation: AllocationResult


def _load_outstanding(session: Session, supplier_name: str) -> list[InventoryItemModel]:
    stmt = select(InventoryItemModel).where(
        InventoryItemModel.supplier_name == supplier_name,
        InventoryItemModel.payment_status.in_(
            [s.value for s in OUTSTANDING_PAYMENT_STATUSES]
        ),
    )
    return list(session.scalars(stmt))


class SupplierPaymentService:
    """
    Preview/commit service for lump supplier payments.

    Contract:
        Receives session_scope and Clock via constructor injection.
        actor_id is an explicit parameter of every write.
    Guarantees:
        - ``preview`` never writes.
        - ``commit`` either records the whole payment or nothing.
    Non-goals:
        - Splitting one item across two payments.
        - Refunds or reversals of a recorded payment.
    """

    def __init__(
        self,
        session_scope: SessionScope,
        clock: Clock | None = None,
        allocator: PaymentAllocator | None = None,
    ):
        self._session_scope = session_scope
        self._clock = clock or SystemClock()
        self._allocator = allocator or PaymentAllocator()

    def outstanding_items(self, supplier_name: str) -> list[InventoryItem]:
        with self._session_scope() as session:
            return [m.to_domain() for m in _load_outstanding(session, supplier_name)]

    def outstanding(self, supplier_name: str) -> SupplierOutstanding:
        """Balance still owed to the supplier at recorded raw prices."""
        return self._allocator.outstanding_balance(
            supplier_name=supplier_name,
            candidates=self.outstanding_items(supplier_name),
        )

    def preview(self, envelope: PaymentEnvelope) -> AllocationResult:
        """Allocate the envelope against the current outstanding items."""
        with LogContext.bind(supplier_name=envelope.supplier_name):
            return self._allocator.allocate(
                envelope=envelope,
                candidates=self.outstanding_items(envelope.supplier_name),
            )

    def commit(
        self,
        envelope: PaymentEnvelope,
        actor_id: str,
        reference: str | None = None,
        notes: str | None = None,
    ) -> RecordedPayment:
        """
        Record the payment and mark the allocated items paid.

        Raises:
            EmptyAllocationError: If the payment covers no outstanding item.
        """
        with LogContext.bind(supplier_name=envelope.supplier_name, actor_id=actor_id):
            with self._session_scope() as session:
                models = _load_outstanding(session, envelope.supplier_name)
                allocation = self._allocator.allocate(
                    envelope=envelope,
                    candidates=[m.to_domain() for m in models],
                )
                if allocation.is_empty:
                    logger.warning("payment_commit_rejected_empty", extra={
                        "total_amount_available": str(envelope.total_amount_available),
                        "candidate_count": len(models),
                    })
                    raise EmptyAllocationError(
                        envelope.supplier_name, envelope.total_amount_available
                    )

                now = self._clock.now()
                payment = SupplierPaymentModel(
                    id=uuid4(),
                    supplier_name=envelope.supplier_name,
                    payment_date=now,
                    total_amount_available=envelope.total_amount_available,
                    agreed_price_per_gram=envelope.agreed_price_per_gram,
                    total_weight=allocation.total_weight,
                    total_original_cost=allocation.total_original_cost,
                    total_payment_cost=allocation.total_payment_cost,
                    price_variance=allocation.price_variance,
                    reference=reference,
                    notes=notes,
                    created_by_id=actor_id,
                )

                by_id = {str(m.id): m for m in models}
                payment_id = payment.id
                for line_number, line in enumerate(allocation.lines, start=1):
                    payment.lines.append(
                        SupplierPaymentLineModel(
                            item_id=by_id[line.item_id].id,
                            line_number=line_number,
                            weight=line.weight,
                            original_cost=line.original_cost,
                            payment_cost=line.payment_cost,
                            price_variance=line.price_variance,
                        )
                    )
                session.add(payment)
                # Payment row must exist before items reference it
                session.flush()

                for line in allocation.lines:
                    item_model = by_id[line.item_id]
                    item_model.payment_status = PaymentStatus.PAID.value
                    item_model.payment_id = payment_id
                    item_model.payment_date = now
                    item_model.paid_price_per_gram = envelope.agreed_price_per_gram
                    item_model.price_variance = line.price_variance
                    item_model.updated_at = now
                    item_model.updated_by_id = actor_id

            logger.info("payment_committed", extra={
                "payment_id": str(payment_id),
                "item_count": len(allocation.lines),
                "total_payment_cost": str(allocation.total_payment_cost),
                "price_variance": str(allocation.price_variance),
                "remaining_amount": str(allocation.remaining_amount),
            })
            return RecordedPayment(payment_id=payment_id, allocation=allocation)
