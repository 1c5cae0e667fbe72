"""
Module: jewel_engines.payment_allocation
Responsibility:
    Allocate a lump supplier payment across that supplier's outstanding
    inventory items, oldest first, and report the price variance between
    what the items were recorded at and what the supplier is being paid.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import jewel_kernel domain types and exceptions.
    Consumed by jewel_services.payment_service (preview and commit).

Invariants enforced:
    - Strict FIFO: the selection is a prefix of the oldest-first candidate
      list.  Walking stops at the first item the remaining amount cannot
      cover; a cheaper later item is never selected over it.
    - No partial items: an item is either wholly selected or not at all.
    - total_payment_cost = total_weight x agreed_price_per_gram and
      remaining_amount = total_amount_available - total_payment_cost.
    - Deterministic ordering: purchase_date (midnight UTC), then the full
      created_at timestamp in UTC, then id.

Failure modes:
    - InvalidAllocationInputError when candidates is None, or a candidate
      belongs to another supplier, is already paid, or carries a negative or
      non-finite weight or raw price.
    - An empty candidate list, a non-positive agreed price or a non-positive
      amount is NOT an error: the result is empty.

Audit relevance:
    price_variance is plain arithmetic (paid minus recorded cost).  The
    engine attaches no favourable/unfavourable label to its sign.

Usage:
    from jewel_engines.payment_allocation import PaymentAllocator, PaymentEnvelope

    result = PaymentAllocator().allocate(
        envelope=PaymentEnvelope(
            supplier_name="Oltin Savdo",
            total_amount_available=Decimal("4250000"),
            agreed_price_per_gram=Decimal("850000"),
        ),
        candidates=outstanding_items,
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, time
from decimal import Decimal

from jewel_engines.tracer import traced_engine
from jewel_kernel.domain.inventory import InventoryItem
from jewel_kernel.domain.values import ZERO, is_finite_non_negative, to_decimal
from jewel_kernel.exceptions import InvalidAllocationInputError
from jewel_kernel.logging_config import get_logger

logger = get_logger("engines.payment_allocation")


@dataclass(frozen=True)
class PaymentEnvelope:
    """
    A lump payment to one supplier.

    Contract:
        Amounts are normalized to Decimal on construction.
    Guarantees:
        - Both amounts are finite.  Zero or negative values are allowed and
          produce an empty allocation.
    """

    supplier_name: str
    total_amount_available: Decimal
    agreed_price_per_gram: Decimal

    def __post_init__(self) -> None:
        for name in ("total_amount_available", "agreed_price_per_gram"):
            raw = getattr(self, name)
            try:
                value = to_decimal(raw)
            except (TypeError, ValueError) as e:
                raise InvalidAllocationInputError(f"{name} is not a number: {raw!r}") from e
            if not value.is_finite():
                raise InvalidAllocationInputError(f"{name} is not finite: {raw!r}")
            object.__setattr__(self, name, value)


@dataclass(frozen=True)
class AllocationLine:
    """One selected item and what it costs under the payment terms."""

    item_id: str
    weight: Decimal
    original_cost: Decimal
    payment_cost: Decimal

    @property
    def price_variance(self) -> Decimal:
        return self.payment_cost - self.original_cost


@dataclass(frozen=True)
class AllocationResult:
    """
    Outcome of allocating one payment envelope.

    Contract:
        Frozen dataclass summarising an allocation run.
    Guarantees:
        - ``selected_items`` and ``lines`` are in allocation order.
        - ``remaining_amount >= 0`` whenever the envelope amount was positive.
    Non-goals:
        - Does not persist anything; the caller marks items paid.
    """

    envelope: PaymentEnvelope
    selected_items: tuple[InventoryItem, ...]
    lines: tuple[AllocationLine, ...]
    total_weight: Decimal
    total_original_cost: Decimal
    total_payment_cost: Decimal
    price_variance: Decimal
    remaining_amount: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.selected_items

    @property
    def original_price_per_gram(self) -> Decimal:
        """Weight-averaged recorded raw price of the selection; 0 when empty."""
        if self.total_weight == ZERO:
            return ZERO
        return self.total_original_cost / self.total_weight

    @property
    def price_per_gram_difference(self) -> Decimal:
        """Agreed price minus the recorded average; 0 when empty."""
        if self.is_empty:
            return ZERO
        return self.envelope.agreed_price_per_gram - self.original_price_per_gram

    @property
    def selected_item_ids(self) -> tuple[str, ...]:
        return tuple(item.id for item in self.selected_items)


@dataclass(frozen=True)
class SupplierOutstanding:
    """What is still owed to one supplier, at recorded raw prices."""

    supplier_name: str
    item_count: int
    total_weight: Decimal
    total_original_cost: Decimal


_UNDATED = datetime.max.replace(tzinfo=UTC)


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps (SQLite round-trips) are stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def _allocation_sort_key(item: InventoryItem) -> tuple[int, datetime, str]:
    """Oldest first by full timestamp; undated items last; id breaks ties."""
    if item.purchase_date is not None:
        return (0, datetime.combine(item.purchase_date, time.min, tzinfo=UTC), item.id)
    if item.created_at is not None:
        return (0, _as_utc(item.created_at), item.id)
    return (1, _UNDATED, item.id)


def _empty_result(envelope: PaymentEnvelope) -> AllocationResult:
    return AllocationResult(
        envelope=envelope,
        selected_items=(),
        lines=(),
        total_weight=ZERO,
        total_original_cost=ZERO,
        total_payment_cost=ZERO,
        price_variance=ZERO,
        remaining_amount=envelope.total_amount_available,
    )


class PaymentAllocator:
    """
    Greedy oldest-first allocator for supplier payments.

    Contract:
        No I/O, no database access, fully deterministic.
        Candidates must already be filtered to the envelope's supplier and
        to outstanding payment statuses; violations raise rather than being
        silently skipped.
    Guarantees:
        - The selection is a prefix of the sorted candidate list.
        - Re-running on the same inputs selects the same items in the same
          order.
    Non-goals:
        - Does not split one item's weight across payments.
        - Does not change any item's payment status.
    """

    def _check_candidates(
        self,
        envelope: PaymentEnvelope,
        candidates: Sequence[InventoryItem] | None,
    ) -> None:
        if candidates is None:
            raise InvalidAllocationInputError("candidates must be a sequence, got None")
        for item in candidates:
            if not isinstance(item, InventoryItem):
                raise InvalidAllocationInputError(
                    f"candidate is not an InventoryItem: {type(item).__name__}"
                )
            if item.supplier_name != envelope.supplier_name:
                raise InvalidAllocationInputError(
                    f"item belongs to supplier {item.supplier_name!r}, "
                    f"not {envelope.supplier_name!r}",
                    item_id=item.id,
                )
            if not item.is_outstanding:
                raise InvalidAllocationInputError(
                    f"item payment status is {item.payment_status.value}",
                    item_id=item.id,
                )
            if not is_finite_non_negative(item.weight):
                raise InvalidAllocationInputError(
                    f"weight must be finite and non-negative, got {item.weight}",
                    item_id=item.id,
                )
            if not is_finite_non_negative(item.raw_material_price):
                raise InvalidAllocationInputError(
                    f"raw_material_price must be finite and non-negative, "
                    f"got {item.raw_material_price}",
                    item_id=item.id,
                )

    @traced_engine(
        "payment_allocation",
        "1.0",
        fingerprint_fields=("envelope", "candidates"),
    )
    def allocate(
        self,
        envelope: PaymentEnvelope,
        candidates: Sequence[InventoryItem],
    ) -> AllocationResult:
        """
        Select the oldest outstanding items the payment fully covers.

        Preconditions:
            Every candidate belongs to envelope.supplier_name and is unpaid
            or partially paid.

        Postconditions:
            The result is an order-preserving prefix of the candidates
            sorted oldest first.  Empty when there are no candidates, or
            the agreed price or amount is not positive.

        Raises:
            InvalidAllocationInputError: On a contract violation.
        """
        self._check_candidates(envelope, candidates)

        logger.info("allocation_started", extra={
            "supplier_name": envelope.supplier_name,
            "total_amount_available": str(envelope.total_amount_available),
            "agreed_price_per_gram": str(envelope.agreed_price_per_gram),
            "candidate_count": len(candidates),
        })

        if (
            not candidates
            or envelope.agreed_price_per_gram <= ZERO
            or envelope.total_amount_available <= ZERO
        ):
            logger.info("allocation_empty", extra={
                "supplier_name": envelope.supplier_name,
                "candidate_count": len(candidates),
            })
            return _empty_result(envelope)

        remaining = envelope.total_amount_available
        selected: list[InventoryItem] = []
        lines: list[AllocationLine] = []

        for item in sorted(candidates, key=_allocation_sort_key):
            item_cost = item.weight * envelope.agreed_price_per_gram
            if item_cost <= ZERO or remaining < item_cost:
                break
            remaining -= item_cost
            selected.append(item)
            lines.append(
                AllocationLine(
                    item_id=item.id,
                    weight=item.weight,
                    original_cost=item.weight * item.raw_material_price,
                    payment_cost=item_cost,
                )
            )

        total_weight = sum((line.weight for line in lines), ZERO)
        total_original_cost = sum((line.original_cost for line in lines), ZERO)
        total_payment_cost = total_weight * envelope.agreed_price_per_gram

        result = AllocationResult(
            envelope=envelope,
            selected_items=tuple(selected),
            lines=tuple(lines),
            total_weight=total_weight,
            total_original_cost=total_original_cost,
            total_payment_cost=total_payment_cost,
            price_variance=total_payment_cost - total_original_cost,
            remaining_amount=envelope.total_amount_available - total_payment_cost,
        )

        logger.info("allocation_completed", extra={
            "supplier_name": envelope.supplier_name,
            "selected_count": len(selected),
            "candidate_count": len(candidates),
            "total_weight": str(total_weight),
            "total_payment_cost": str(total_payment_cost),
            "price_variance": str(result.price_variance),
        })
        return result

    @traced_engine(
        "payment_allocation.outstanding",
        "1.0",
        fingerprint_fields=("supplier_name", "candidates"),
    )
    def outstanding_balance(
        self,
        supplier_name: str,
        candidates: Sequence[InventoryItem],
    ) -> SupplierOutstanding:
        """
        Total outstanding weight and recorded cost for one supplier.

        Items of other suppliers and already-paid items are ignored here;
        this is a read-only balance view, not an allocation input check.
        """
        if candidates is None:
            raise InvalidAllocationInputError("candidates must be a sequence, got None")
        owed = [
            item for item in candidates
            if item.supplier_name == supplier_name and item.is_outstanding
        ]
        return SupplierOutstanding(
            supplier_name=supplier_name,
            item_count=len(owed),
            total_weight=sum((item.weight for item in owed), ZERO),
            total_original_cost=sum(
                (item.weight * item.raw_material_price for item in owed), ZERO
            ),
        )
