"""
jewel_services.margin_service -- bulk profit margin updates.

The one sanctioned way to change an item's selling price other than
recomputing it from cost inputs: the operator picks items and a new
profit percentage, previews the old/new prices, then applies.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from jewel_engines.pricing import CostCalculator, MarginUpdateLine
from jewel_kernel.domain.clock import Clock, SystemClock
from jewel_kernel.domain.values import to_decimal
from jewel_kernel.exceptions import ItemNotFoundError
from jewel_kernel.logging_config import LogContext, get_logger
from jewel_kernel.models.inventory_item import InventoryItemModel

logger = get_logger("services.margin")

SessionScope = Callable[[], AbstractContextManager[Session]]


def _load_items(session: Session, item_ids: Sequence[UUID | str]) -> list[InventoryItemModel]:
    """Load items in the requested order; every id must exist."""
    wanted = [UUID(str(i)) for i in item_ids]
    rows = session.scalars(
        select(InventoryItemModel).where(InventoryItemModel.id.in_(wanted))
    )
    by_id = {m.id: m for m in rows}
    for item_id in wanted:
        if item_id not in by_id:
            raise ItemNotFoundError(str(item_id))
    return [by_id[i] for i in wanted]


class MarginUpdateService:
    """Preview and apply a new profit percentage to selected items."""

    def __init__(
        self,
        session_scope: SessionScope,
        clock: Clock | None = None,
        calculator: CostCalculator | None = None,
    ):
        self._session_scope = session_scope
        self._clock = clock or SystemClock()
        self._calculator = calculator or CostCalculator()

    def preview(
        self,
        item_ids: Sequence[UUID | str],
        new_profit_percentage: Decimal,
    ) -> tuple[MarginUpdateLine, ...]:
        """
        Old and new selling prices, without writing.

        Raises:
            ItemNotFoundError: If any id does not exist.
        """
        with self._session_scope() as session:
            items = [m.to_domain() for m in _load_items(session, item_ids)]
        return self._calculator.preview_margin_update(items, new_profit_percentage)

    def apply(
        self,
        item_ids: Sequence[UUID | str],
        new_profit_percentage: Decimal,
        actor_id: str,
    ) -> tuple[MarginUpdateLine, ...]:
        """
        Reprice the items in one transaction.

        Raises:
            ItemNotFoundError: If any id does not exist; nothing is written.
            InvalidPricingInputError: If the percentage is negative or not a number.
        """
        with LogContext.bind(actor_id=actor_id):
            with self._session_scope() as session:
                models = _load_items(session, item_ids)
                lines = self._calculator.preview_margin_update(
                    [m.to_domain() for m in models], new_profit_percentage
                )
                now = self._clock.now()
                for model, line in zip(models, lines):
                    model.profit_percentage = to_decimal(new_profit_percentage)
                    model.selling_price = line.new_selling_price
                    model.updated_at = now
                    model.updated_by_id = actor_id

            logger.info("margin_update_applied", extra={
                "item_count": len(lines),
                "new_profit_percentage": str(new_profit_percentage),
            })
            return lines
