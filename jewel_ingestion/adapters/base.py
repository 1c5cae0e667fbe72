"""
Source adapter protocol.

Contract:
    SourceAdapter.read() yields one dict per data row (header -> cell),
    streaming.  Blank rows between data rows are yielded as all-blank dicts
    so a row's position stays aligned with the file; trailing blank rows
    are dropped.  Once the header has been read, ``first_data_row`` holds
    the 1-based file row of the first yielded dict.

Architecture: jewel_ingestion/adapters. File I/O only, no DB imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading spreadsheet-like files into row dicts."""

    first_data_row: int

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield one dict per data row."""
        ...
