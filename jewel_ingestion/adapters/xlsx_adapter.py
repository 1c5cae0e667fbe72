"""
XLSX source adapter for bulk inventory templates.

Supports:
  - sheet by index (0-based) or name
  - header row by 0-based index, or the first non-empty row
  - blank rows between data rows yielded as all-blank dicts, so a row's
    position still maps to its sheet row; trailing blank rows dropped

Cell values are passed through typed: numbers stay numbers and date cells
stay ``date``/``datetime``, so the validator can accept them as-is.
Whole-number floats are returned as int.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Any, Iterator

import openpyxl


def _normalize_header_cell(value: Any) -> str:
    """Header cell -> display string with collapsed whitespace."""
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, float, date)):
        return value
    return str(value).strip()


def _is_blank_row(values: tuple[Any, ...]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


class XlsxSourceAdapter:
    """
    Read .xlsx files as one dict per data row.

    source_options:
      sheet: 0-based sheet index (int) or sheet name (str). Default: active sheet.
      header_row: 0-based index of the header row. Default: first non-empty row.
    """

    def __init__(self) -> None:
        # 1-based sheet row of the first data row; known once the header is read
        self.first_data_row = 2

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        wb = openpyxl.load_workbook(source_path, read_only=True, data_only=True)
        try:
            sheet = self._get_sheet(wb, options)
            header_row_idx = options.get("header_row")

            headers: list[str] | None = None
            pending_blank = 0
            for index, values in enumerate(sheet.iter_rows(values_only=True)):
                if headers is None:
                    if header_row_idx is not None:
                        if index < int(header_row_idx):
                            continue
                    elif _is_blank_row(values):
                        continue
                    headers = self._build_headers(values)
                    self.first_data_row = index + 2
                    continue

                if _is_blank_row(values):
                    pending_blank += 1
                    continue
                for _ in range(pending_blank):
                    yield {header: "" for header in headers}
                pending_blank = 0
                yield {
                    header: _cell_value(values[c] if c < len(values) else None)
                    for c, header in enumerate(headers)
                }
        finally:
            wb.close()

    def _build_headers(self, values: tuple[Any, ...]) -> list[str]:
        headers: list[str] = []
        for c, v in enumerate(values):
            key = _normalize_header_cell(v) or f"Column_{c + 1}"
            # Dedupe duplicate headers
            base = key
            cnt = 0
            while key in headers:
                cnt += 1
                key = f"{base}_{cnt}"
            headers.append(key)
        return headers

    def _get_sheet(self, wb: Any, options: dict[str, Any]) -> Any:
        sheet_ref = options.get("sheet")
        if sheet_ref is None:
            return wb.active
        if isinstance(sheet_ref, int):
            return wb.worksheets[sheet_ref]
        return wb[sheet_ref]
