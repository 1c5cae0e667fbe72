"""
EngineSettings schema.

Frozen dataclass holding every tunable the engines read: the fixed
enumerations an import row is checked against, pricing defaults, warning
thresholds and the branch vocabulary.  YAML is parsed into this type by
``jewel_config.loader``; engines receive it by constructor injection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class EngineSettings:
    """Runtime settings for pricing, allocation and import validation."""

    categories: tuple[str, ...] = ("Uzuk", "Sirg'a", "Bilakuzuk", "Zanjir", "Boshqa")
    colors: tuple[str, ...] = ("Sariq", "Oq", "Qizil", "Aralash")
    purities: tuple[str, ...] = ("14K", "18K", "21K", "22K", "24K")
    payment_statuses: tuple[str, ...] = ("paid", "partially_paid", "unpaid")

    default_profit_percentage: Decimal = Decimal("20")
    profit_warning_min: Decimal = Decimal("10")
    profit_warning_max: Decimal = Decimal("100")
    default_quantity: int = 1

    # Two-digit years <= pivot land in the current century
    two_digit_year_pivot: int = 30

    warehouse_label: str = "Ombor"
    central_branch_aliases: tuple[str, ...] = ("markaz", "марказ", "center", "central")

    true_values: tuple[str, ...] = ("true", "1", "yes", "ha", "x")
    false_values: tuple[str, ...] = ("false", "0", "no", "yo'q", "yoq")

    progress_interval: int = 50

    # (normalized header, canonical field) pairs added to the built-in table
    header_aliases: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def header_alias_map(self) -> dict[str, str]:
        return dict(self.header_aliases)
