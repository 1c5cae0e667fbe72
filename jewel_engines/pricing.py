"""
jewel_engines.pricing -- Cost and selling price derivation for inventory items.

Responsibility:
    Derive material cost, labor cost, total cost, selling price and profit
    for a piece of jewelry from its weight, per-gram prices, labor rate and
    profit percentage.  Also provides the side-by-side central/branch view,
    the explicit margin-update preview and the market price adjustment.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import jewel_kernel domain types and exceptions.
    Consumed by jewel_ingestion (per valid import row) and jewel_services
    (import commit, margin updates).

Invariants enforced:
    - Central stock is costed at the raw material price; branch stock at
      the incoming (transfer) price.
    - selling_price >= total_cost >= material_cost >= 0 for valid inputs.
    - Decimal-only arithmetic, no rounding inside the engine.  Rounding for
      display is the caller's concern.

Failure modes:
    - InvalidPricingInputError for a negative, non-finite or non-numeric
      input.  This is a caller contract violation; import rows are checked
      by the validator before they reach this engine.

Usage:
    from jewel_engines.pricing import derive_pricing

    result = derive_pricing(
        weight=Decimal("3.62"),
        raw_material_price=Decimal("800000"),
        incoming_raw_material_price=Decimal("850000"),
        labor_cost_per_gram=Decimal("70000"),
        profit_percentage=Decimal("20"),
        is_central_inventory=False,
    )
    result.selling_price  # Decimal("3996480.000")
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from jewel_engines.tracer import traced_engine
from jewel_kernel.domain.inventory import InventoryItem
from jewel_kernel.domain.values import HUNDRED, ONE, ZERO, is_finite_non_negative, to_decimal
from jewel_kernel.exceptions import InvalidPricingInputError
from jewel_kernel.logging_config import get_logger

logger = get_logger("engines.pricing")


def _require(field_name: str, value: Any) -> Decimal:
    """Convert a pricing input to Decimal and check it is finite and >= 0."""
    try:
        result = to_decimal(value)
    except (TypeError, ValueError) as e:
        raise InvalidPricingInputError(field_name, value) from e
    if not is_finite_non_negative(result):
        raise InvalidPricingInputError(field_name, value)
    return result


@dataclass(frozen=True)
class PricingResult:
    """
    Cost breakdown and selling price for one item.

    All amounts are in currency units for the whole item (not per gram).
    """

    material_cost: Decimal
    labor_total: Decimal
    total_cost: Decimal
    selling_price: Decimal
    profit: Decimal
    is_central_inventory: bool
    material_price_per_gram: Decimal


@dataclass(frozen=True)
class DualPricingResult:
    """Central and branch pricing for the same physical attributes."""

    central: PricingResult
    branch: PricingResult
    transfer_profit: Decimal

    @property
    def total_system_profit(self) -> Decimal:
        """Profit captured at the warehouse plus the warehouse-to-branch markup."""
        return self.central.profit + self.transfer_profit


@dataclass(frozen=True)
class MarginUpdateLine:
    """Preview of one item's selling price under a new profit percentage."""

    item_id: str
    old_selling_price: Decimal
    new_selling_price: Decimal
    price_difference: Decimal
    percentage_difference: Decimal


@dataclass(frozen=True)
class PriceAdjustment:
    """An item's per-gram prices and selling price after a market price move."""

    item_id: str
    raw_material_price: Decimal
    incoming_raw_material_price: Decimal
    selling_price: Decimal


class CostCalculator:
    """
    Pure function calculator for jewelry costing.

    Contract:
        No I/O, no database access, fully deterministic.
        Inputs are Decimal-convertible (int, str, Decimal; float via str).
    Guarantees:
        - material_cost = weight x (raw if central else incoming)
        - labor_total = weight x labor_cost_per_gram
        - selling_price = total_cost x (1 + profit_percentage / 100)
        - profit = selling_price - total_cost
    Non-goals:
        - Does not round.  Does not know about currencies.
        - Does not read an item's stored selling_price except in
          ``preview_margin_update``, where it is the "old" side of the diff.
    """

    @traced_engine(
        "pricing",
        "1.0",
        fingerprint_fields=(
            "weight",
            "raw_material_price",
            "incoming_raw_material_price",
            "labor_cost_per_gram",
            "profit_percentage",
            "is_central_inventory",
        ),
    )
    def derive_pricing(
        self,
        weight: Decimal,
        raw_material_price: Decimal,
        incoming_raw_material_price: Decimal,
        labor_cost_per_gram: Decimal,
        profit_percentage: Decimal,
        is_central_inventory: bool,
    ) -> PricingResult:
        """
        Derive the cost breakdown and selling price for one item.

        Raises:
            InvalidPricingInputError: If any numeric input is negative,
                non-finite or not a number.
        """
        return self._derive(
            weight,
            raw_material_price,
            incoming_raw_material_price,
            labor_cost_per_gram,
            profit_percentage,
            is_central_inventory,
        )

    def _derive(
        self,
        weight: Any,
        raw_material_price: Any,
        incoming_raw_material_price: Any,
        labor_cost_per_gram: Any,
        profit_percentage: Any,
        is_central_inventory: bool,
    ) -> PricingResult:
        w = _require("weight", weight)
        raw = _require("raw_material_price", raw_material_price)
        incoming = _require("incoming_raw_material_price", incoming_raw_material_price)
        labor = _require("labor_cost_per_gram", labor_cost_per_gram)
        pct = _require("profit_percentage", profit_percentage)
        central = bool(is_central_inventory)

        per_gram = raw if central else incoming
        material_cost = w * per_gram
        labor_total = w * labor
        total_cost = material_cost + labor_total
        selling_price = total_cost * (ONE + pct / HUNDRED)

        return PricingResult(
            material_cost=material_cost,
            labor_total=labor_total,
            total_cost=total_cost,
            selling_price=selling_price,
            profit=selling_price - total_cost,
            is_central_inventory=central,
            material_price_per_gram=per_gram,
        )

    @traced_engine(
        "pricing.dual",
        "1.0",
        fingerprint_fields=(
            "weight",
            "raw_material_price",
            "incoming_raw_material_price",
            "labor_cost_per_gram",
            "profit_percentage",
        ),
    )
    def dual_pricing(
        self,
        weight: Decimal,
        raw_material_price: Decimal,
        incoming_raw_material_price: Decimal,
        labor_cost_per_gram: Decimal,
        profit_percentage: Decimal,
    ) -> DualPricingResult:
        """
        Price the same attributes as central stock and as branch stock.

        transfer_profit is the margin captured purely by moving stock from
        the warehouse to a branch: branch.material_cost - central.material_cost.
        It is negative when the incoming price is below the raw price.
        """
        args = (
            weight,
            raw_material_price,
            incoming_raw_material_price,
            labor_cost_per_gram,
            profit_percentage,
        )
        central = self._derive(*args, is_central_inventory=True)
        branch = self._derive(*args, is_central_inventory=False)
        return DualPricingResult(
            central=central,
            branch=branch,
            transfer_profit=branch.material_cost - central.material_cost,
        )

    def dual_price_item(self, item: InventoryItem) -> DualPricingResult:
        """Central and branch pricing for an item's own cost inputs."""
        return self.dual_pricing(
            weight=item.weight,
            raw_material_price=item.raw_material_price,
            incoming_raw_material_price=item.incoming_raw_material_price,
            labor_cost_per_gram=item.labor_cost_per_gram,
            profit_percentage=item.profit_percentage,
        )

    def profit_margin(self, selling_price: Any, total_cost: Any) -> Decimal:
        """Markup over cost in percent; 0 when total_cost <= 0."""
        selling = to_decimal(selling_price)
        cost = to_decimal(total_cost)
        if cost <= ZERO:
            return ZERO
        return (selling - cost) / cost * HUNDRED

    def optimal_incoming_price(
        self,
        raw_material_price: Any,
        desired_margin: Any = Decimal("10"),
    ) -> Decimal:
        """Incoming (transfer) price that yields desired_margin percent over raw."""
        raw = _require("raw_material_price", raw_material_price)
        margin = _require("desired_margin", desired_margin)
        return raw * (ONE + margin / HUNDRED)

    def price_item(self, item: InventoryItem) -> PricingResult:
        """Derive pricing from an item's own cost inputs and central flag."""
        return self.derive_pricing(
            weight=item.weight,
            raw_material_price=item.raw_material_price,
            incoming_raw_material_price=item.incoming_raw_material_price,
            labor_cost_per_gram=item.labor_cost_per_gram,
            profit_percentage=item.profit_percentage,
            is_central_inventory=item.is_central_inventory,
        )

    @traced_engine(
        "pricing.margin_update",
        "1.0",
        fingerprint_fields=("items", "new_profit_percentage"),
    )
    def preview_margin_update(
        self,
        items: Iterable[InventoryItem],
        new_profit_percentage: Any,
    ) -> tuple[MarginUpdateLine, ...]:
        """
        Preview selling prices under a new profit percentage.

        The old side is the item's stored selling_price.  When the stored
        price is zero the percentage difference is reported as 0.
        """
        pct = _require("new_profit_percentage", new_profit_percentage)
        lines: list[MarginUpdateLine] = []
        for item in items:
            repriced = self._derive(
                item.weight,
                item.raw_material_price,
                item.incoming_raw_material_price,
                item.labor_cost_per_gram,
                pct,
                item.is_central_inventory,
            )
            old = item.selling_price
            difference = repriced.selling_price - old
            lines.append(
                MarginUpdateLine(
                    item_id=item.id,
                    old_selling_price=old,
                    new_selling_price=repriced.selling_price,
                    price_difference=difference,
                    percentage_difference=(difference / old * HUNDRED) if old > ZERO else ZERO,
                )
            )

        logger.info("margin_update_previewed", extra={
            "item_count": len(lines),
            "new_profit_percentage": str(pct),
        })
        return tuple(lines)

    @traced_engine(
        "pricing.market_adjustment",
        "1.0",
        fingerprint_fields=("items", "new_raw_material_price"),
    )
    def adjust_for_market_price(
        self,
        items: Iterable[InventoryItem],
        new_raw_material_price: Any,
    ) -> tuple[PriceAdjustment, ...]:
        """
        Reprice items after a market move in the raw material price.

        The incoming price moves by the same proportion as the raw price;
        the selling price is recomputed with each item's own central flag
        and profit percentage.

        Raises:
            InvalidPricingInputError: If the new price is invalid, or an
                item's current raw price is zero (the proportion is undefined).
        """
        new_raw = _require("new_raw_material_price", new_raw_material_price)
        adjustments: list[PriceAdjustment] = []
        for item in items:
            old_raw = _require("raw_material_price", item.raw_material_price)
            if old_raw == ZERO:
                raise InvalidPricingInputError("raw_material_price", item.raw_material_price)
            new_incoming = item.incoming_raw_material_price * new_raw / old_raw
            repriced = self._derive(
                item.weight,
                new_raw,
                new_incoming,
                item.labor_cost_per_gram,
                item.profit_percentage,
                item.is_central_inventory,
            )
            adjustments.append(
                PriceAdjustment(
                    item_id=item.id,
                    raw_material_price=new_raw,
                    incoming_raw_material_price=new_incoming,
                    selling_price=repriced.selling_price,
                )
            )
        return tuple(adjustments)


_default_calculator = CostCalculator()

derive_pricing = _default_calculator.derive_pricing
dual_pricing = _default_calculator.dual_pricing
dual_price_item = _default_calculator.dual_price_item
profit_margin = _default_calculator.profit_margin
optimal_incoming_price = _default_calculator.optimal_incoming_price
price_item = _default_calculator.price_item
preview_margin_update = _default_calculator.preview_margin_update
adjust_for_market_price = _default_calculator.adjust_for_market_price
