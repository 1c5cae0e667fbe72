"""
Header mapping: raw spreadsheet row -> canonical field dict.

Spreadsheets arrive with Uzbek or English column names in any casing and
spacing ("Lom narxi", "lomNarxi", "raw_material_price").  Every header is
normalized and looked up in one alias table; unrecognized columns are
ignored.  Pure, ZERO I/O.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from jewel_kernel.exceptions import ConfigurationError

CANONICAL_FIELDS: tuple[str, ...] = (
    "model",
    "category",
    "weight",
    "size",
    "quantity",
    "raw_material_price",
    "incoming_raw_material_price",
    "labor_cost_per_gram",
    "profit_percentage",
    "is_central_inventory",
    "branch",
    "color",
    "purity",
    "stone_type",
    "stone_weight",
    "manufacturer",
    "supplier_name",
    "purchase_date",
    "payment_status",
    "notes",
)

# Apostrophe variants used in Uzbek Latin (o', g') plus whitespace, _ and -
_STRIP_CHARS = re.compile(r"['‘’ʻʼ`\s_\-]+")

_ALIASES: dict[str, tuple[str, ...]] = {
    "model": ("model",),
    "category": ("kategoriya", "category"),
    "weight": ("og'irlik", "weight"),
    "size": ("o'lcham", "size"),
    "quantity": ("miqdor", "quantity"),
    "raw_material_price": ("lom narxi", "raw material price", "raw price"),
    "incoming_raw_material_price": (
        "lom narxi kirim",
        "incoming raw material price",
        "incoming price",
    ),
    "labor_cost_per_gram": ("ishchi haqi", "labor cost", "labor cost per gram"),
    "profit_percentage": ("foyda foizi", "foyda", "profit", "profit percentage"),
    "is_central_inventory": (
        "markaziy inventar",
        "markaz",
        "provider",
        "is provider",
        "ombor",
        "is central inventory",
        "central inventory",
    ),
    "branch": ("filial", "branch", "branch name"),
    "color": ("rang", "color"),
    "purity": ("tozalik", "purity"),
    "stone_type": ("tosh turi", "tosh", "stone", "stone type"),
    "stone_weight": ("tosh og'irligi", "tosh og'irlik", "stone weight"),
    "manufacturer": ("ishlab chiqaruvchi", "manufacturer"),
    "supplier_name": ("ta'minotchi", "supplier", "supplier name"),
    "purchase_date": (
        "xarid sanasi",
        "sotib olingan sana",
        "sotib olingan sanasi",
        "sana",
        "date",
        "purchase date",
    ),
    "payment_status": ("to'lov holati", "to'lov", "payment", "payment status"),
    "notes": ("izoh", "notes"),
}


def normalize_header(header: Any) -> str:
    """Lowercase and drop apostrophes, whitespace, underscores and hyphens."""
    if header is None:
        return ""
    return _STRIP_CHARS.sub("", str(header).lower())


HEADER_ALIASES: dict[str, str] = {
    normalize_header(alias): canonical
    for canonical, aliases in _ALIASES.items()
    for alias in aliases
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def map_row(row: Mapping[Any, Any], aliases: Mapping[str, str] = HEADER_ALIASES) -> dict[str, Any]:
    """
    Map one raw row to canonical field names.

    Blank cells are dropped.  When several columns map to the same field,
    the first non-blank one (in the row's column order) wins.  Returns an
    empty dict when nothing recognizable is filled in.
    """
    mapped: dict[str, Any] = {}
    for header, value in row.items():
        canonical = aliases.get(normalize_header(header))
        if canonical is None or canonical in mapped or _is_blank(value):
            continue
        mapped[canonical] = value
    return mapped


class HeaderMapper:
    """
    Alias table with optional site-specific additions.

    Extra aliases are normalized like built-in ones and may override them.
    """

    def __init__(self, extra_aliases: Mapping[str, str] | None = None):
        aliases = dict(HEADER_ALIASES)
        for header, canonical in (extra_aliases or {}).items():
            if canonical not in CANONICAL_FIELDS:
                raise ConfigurationError(
                    "header_aliases", f"{header!r} maps to unknown field {canonical!r}"
                )
            aliases[normalize_header(header)] = canonical
        self._aliases = aliases

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def canonical_for(self, header: Any) -> str | None:
        return self._aliases.get(normalize_header(header))

    def map_row(self, row: Mapping[Any, Any]) -> dict[str, Any]:
        return map_row(row, self._aliases)
