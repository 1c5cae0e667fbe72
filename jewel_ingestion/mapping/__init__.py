"""Header mapping and cell coercion (pure)."""

from jewel_ingestion.mapping.coercion import (
    CoercionResult,
    coerce_bool,
    coerce_decimal,
    coerce_int,
    normalize_purchase_date,
)
from jewel_ingestion.mapping.headers import (
    CANONICAL_FIELDS,
    HEADER_ALIASES,
    HeaderMapper,
    map_row,
    normalize_header,
)

__all__ = [
    "CANONICAL_FIELDS",
    "HEADER_ALIASES",
    "CoercionResult",
    "HeaderMapper",
    "coerce_bool",
    "coerce_decimal",
    "coerce_int",
    "map_row",
    "normalize_header",
    "normalize_purchase_date",
]
