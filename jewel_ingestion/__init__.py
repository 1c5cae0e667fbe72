"""
jewel_ingestion -- bulk inventory import.

Pipeline: source adapter (file -> raw rows) -> header mapping -> coercion
and row rules -> pricing of valid rows -> ImportSummary.  Everything after
the adapter is pure; persistence is jewel_services.import_service.
"""

from jewel_ingestion.domain.types import (
    BranchDirectory,
    ImportedItem,
    ImportSummary,
    IssueSeverity,
    RowIssue,
    StaticBranchDirectory,
    ValidatedImportRecord,
)
from jewel_ingestion.services.import_validator import ImportValidator

__all__ = [
    "BranchDirectory",
    "ImportValidator",
    "ImportedItem",
    "ImportSummary",
    "IssueSeverity",
    "RowIssue",
    "StaticBranchDirectory",
    "ValidatedImportRecord",
]
