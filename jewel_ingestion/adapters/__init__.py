"""Source adapters for bulk import (file I/O only, no DB)."""

from pathlib import Path

from jewel_ingestion.adapters.base import SourceAdapter
from jewel_ingestion.adapters.csv_adapter import CsvSourceAdapter
from jewel_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter

_ADAPTERS_BY_SUFFIX: dict[str, type] = {
    ".csv": CsvSourceAdapter,
    ".xlsx": XlsxSourceAdapter,
    ".xlsm": XlsxSourceAdapter,
}


def adapter_for(source_path: Path) -> SourceAdapter:
    """Pick an adapter by file extension."""
    suffix = Path(source_path).suffix.lower()
    try:
        return _ADAPTERS_BY_SUFFIX[suffix]()
    except KeyError:
        raise ValueError(
            f"Unsupported file type {suffix!r}; expected one of {sorted(_ADAPTERS_BY_SUFFIX)}"
        ) from None


__all__ = [
    "SourceAdapter",
    "CsvSourceAdapter",
    "XlsxSourceAdapter",
    "adapter_for",
]
