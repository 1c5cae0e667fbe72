"""
Module: jewel_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for higher
    layers (jewel_ingestion, jewel_services).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import jewel_kernel domain types, exceptions and logging.
    MUST NOT import jewel_services, jewel_ingestion or the database.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
    - Decimal-only arithmetic; floats are converted through ``str`` at the
      boundary.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every public engine call is traced via ``@traced_engine``, emitting a
    JEWEL_ENGINE_TRACE record with engine name, version, input fingerprint
    and duration.

Usage:
    from jewel_engines import CostCalculator, PaymentAllocator, PaymentEnvelope
"""

from jewel_engines.payment_allocation import (
    AllocationLine,
    AllocationResult,
    PaymentAllocator,
    PaymentEnvelope,
    SupplierOutstanding,
)
from jewel_engines.pricing import (
    CostCalculator,
    DualPricingResult,
    MarginUpdateLine,
    PriceAdjustment,
    PricingResult,
    adjust_for_market_price,
    derive_pricing,
    dual_price_item,
    dual_pricing,
    optimal_incoming_price,
    preview_margin_update,
    price_item,
    profit_margin,
)
from jewel_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Pricing
    "CostCalculator",
    "DualPricingResult",
    "MarginUpdateLine",
    "PriceAdjustment",
    "PricingResult",
    "adjust_for_market_price",
    "derive_pricing",
    "dual_price_item",
    "dual_pricing",
    "optimal_incoming_price",
    "preview_margin_update",
    "price_item",
    "profit_margin",
    # Payment allocation
    "AllocationLine",
    "AllocationResult",
    "PaymentAllocator",
    "PaymentEnvelope",
    "SupplierOutstanding",
    # Tracing
    "compute_input_fingerprint",
    "traced_engine",
]
