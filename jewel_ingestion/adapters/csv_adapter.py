"""
CSV source adapter.

Uses csv.reader with the first record as the header.  Configurable:
delimiter, encoding, skip_rows.  Handles BOM via utf-8-sig when encoding is
utf-8.  Streams rows.

Blank records between data rows are yielded as all-blank dicts so a row's
position still maps to its line in the file; trailing blank records are
dropped.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Iterator


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() in ("utf-8", "utf8"):
        return "utf-8-sig"  # Strip BOM if present
    return enc


def _is_blank(values: list[str]) -> bool:
    return not any(v.strip() for v in values)


class CsvSourceAdapter:
    """Read CSV files as one dict per record after the header."""

    def __init__(self) -> None:
        # 1-based line of the first data record; known once the header is read
        self.first_data_row = 2

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        encoding = _get_encoding(options)
        delimiter = options.get("delimiter", ",")
        skip_rows = int(options.get("skip_rows", 0))

        with Path(source_path).open("r", encoding=encoding, newline="") as f:
            for _ in range(skip_rows):
                next(f, None)
            reader = csv.reader(f, delimiter=delimiter)
            headers = next(reader, None)
            if headers is None:
                return
            self.first_data_row = skip_rows + 2

            pending_blank = 0
            for values in reader:
                if _is_blank(values):
                    pending_blank += 1
                    continue
                for _ in range(pending_blank):
                    yield {header: "" for header in headers}
                pending_blank = 0
                # Cells past the header are dropped
                yield {
                    header: values[c] if c < len(values) else ""
                    for c, header in enumerate(headers)
                }
