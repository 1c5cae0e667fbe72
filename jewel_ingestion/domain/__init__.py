"""Pure import domain: record types, branch lookup and row rules. ZERO I/O."""

from jewel_ingestion.domain.types import (
    BranchDirectory,
    ImportedItem,
    ImportSummary,
    IssueSeverity,
    RowIssue,
    StaticBranchDirectory,
    ValidatedImportRecord,
)

__all__ = [
    "BranchDirectory",
    "ImportedItem",
    "ImportSummary",
    "IssueSeverity",
    "RowIssue",
    "StaticBranchDirectory",
    "ValidatedImportRecord",
]
