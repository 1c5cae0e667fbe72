"""
jewel_ingestion.domain.types -- Pure frozen dataclasses for bulk inventory import.

ZERO I/O. Imports only from jewel_kernel.domain.

Row-level problems are data, not exceptions: every check that fails
produces a ``RowIssue`` on the record, and the batch carries on.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Protocol, runtime_checkable

from jewel_kernel.domain.inventory import PaymentStatus
from jewel_kernel.domain.values import ZERO


# =============================================================================
# Issues
# =============================================================================


class IssueSeverity(str, Enum):
    """ERROR makes the row invalid; WARNING is advisory."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class RowIssue:
    """One problem found on an import row."""

    code: str
    message: str
    field: str
    severity: IssueSeverity = IssueSeverity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == IssueSeverity.ERROR


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class ImportedItem:
    """
    Coerced payload of one import row.

    Numeric fields are None when the cell was missing or could not be
    coerced; such a row always carries an ERROR issue for that field.
    total_cost and selling_price are zero unless the row is valid.
    """

    model: str
    category: str
    weight: Decimal | None
    raw_material_price: Decimal | None
    incoming_raw_material_price: Decimal | None
    labor_cost_per_gram: Decimal | None
    profit_percentage: Decimal | None
    quantity: int | None
    is_central_inventory: bool
    purchase_date: date
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    branch_id: str | None = None
    branch_name: str | None = None
    size: str | None = None
    color: str | None = None
    purity: str | None = None
    stone_type: str | None = None
    stone_weight: Decimal | None = None
    manufacturer: str | None = None
    supplier_name: str | None = None
    notes: str | None = None
    total_cost: Decimal = ZERO
    selling_price: Decimal = ZERO


@dataclass(frozen=True)
class ValidatedImportRecord:
    """
    Outcome of validating one non-empty import row.

    Contract:
        is_valid is True exactly when no ERROR issue is present.
    Guarantees:
        - ``errors`` and ``warnings`` preserve the order rules ran in.
        - ``source_row_index`` is the spreadsheet row number, counting the
          header row as row 1.
    """

    item: ImportedItem
    source_row_index: int
    issues: tuple[RowIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not any(issue.is_error for issue in self.issues)

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(i.message for i in self.issues if i.severity == IssueSeverity.ERROR)

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(i.message for i in self.issues if i.severity == IssueSeverity.WARNING)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == IssueSeverity.WARNING for i in self.issues)

    def issue_codes(self) -> tuple[str, ...]:
        return tuple(i.code for i in self.issues)


# =============================================================================
# Summary
# =============================================================================


@dataclass(frozen=True)
class ImportSummary:
    """
    Aggregate over the records of one batch (or of several merged chunks).

    Breakdowns count rows, valid or not, that have a value for the key.
    """

    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    warning_rows: int = 0
    total_value: Decimal = ZERO
    by_category: dict[str, int] = field(default_factory=dict)
    by_supplier: dict[str, int] = field(default_factory=dict)
    by_branch: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_records(
        cls,
        records: Iterable[ValidatedImportRecord],
        warehouse_label: str,
    ) -> ImportSummary:
        total = valid = warned = 0
        value = ZERO
        categories: Counter[str] = Counter()
        suppliers: Counter[str] = Counter()
        branches: Counter[str] = Counter()

        for record in records:
            item = record.item
            total += 1
            if record.is_valid:
                valid += 1
                value += item.selling_price * (item.quantity or 1)
            if record.has_warnings:
                warned += 1
            if item.category:
                categories[item.category] += 1
            if item.supplier_name:
                suppliers[item.supplier_name] += 1
            if item.branch_name:
                branches[item.branch_name] += 1
            elif item.is_central_inventory:
                branches[warehouse_label] += 1

        return cls(
            total_rows=total,
            valid_rows=valid,
            invalid_rows=total - valid,
            warning_rows=warned,
            total_value=value,
            by_category=dict(categories),
            by_supplier=dict(suppliers),
            by_branch=dict(branches),
        )

    def merge(self, other: ImportSummary) -> ImportSummary:
        """Combine two summaries; associative and commutative."""
        return ImportSummary(
            total_rows=self.total_rows + other.total_rows,
            valid_rows=self.valid_rows + other.valid_rows,
            invalid_rows=self.invalid_rows + other.invalid_rows,
            warning_rows=self.warning_rows + other.warning_rows,
            total_value=self.total_value + other.total_value,
            by_category=dict(Counter(self.by_category) + Counter(other.by_category)),
            by_supplier=dict(Counter(self.by_supplier) + Counter(other.by_supplier)),
            by_branch=dict(Counter(self.by_branch) + Counter(other.by_branch)),
        )


# =============================================================================
# Branch lookup
# =============================================================================


@runtime_checkable
class BranchDirectory(Protocol):
    """Resolves branch names typed into a spreadsheet to branch ids."""

    def resolve_id(self, name: str) -> str | None:
        ...

    def name_for(self, branch_id: str) -> str | None:
        ...


class StaticBranchDirectory:
    """
    In-memory BranchDirectory over an id -> name mapping.

    Lookup is case-insensitive and ignores surrounding whitespace.  When a
    branch is named like one of ``central_aliases`` every alias resolves to
    it, so "Markaz", "марказ" and "center" all find the central branch.
    """

    def __init__(
        self,
        branches: Mapping[str, str],
        central_aliases: Iterable[str] = ("markaz", "марказ", "center", "central"),
    ):
        self._names = {str(bid): name for bid, name in branches.items()}
        self._ids: dict[str, str] = {}
        for bid, name in self._names.items():
            self._ids.setdefault(name.strip().lower(), bid)

        aliases = [a.strip().lower() for a in central_aliases]
        central_id = next((self._ids[a] for a in aliases if a in self._ids), None)
        if central_id is not None:
            for alias in aliases:
                self._ids.setdefault(alias, central_id)

    def resolve_id(self, name: str) -> str | None:
        if name is None:
            return None
        return self._ids.get(str(name).strip().lower())

    def name_for(self, branch_id: str) -> str | None:
        return self._names.get(str(branch_id))
