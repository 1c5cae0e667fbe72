"""Tests for CSV and XLSX source adapters."""

from datetime import datetime
from pathlib import Path

import openpyxl
import pytest

from jewel_config.schema import EngineSettings
from jewel_ingestion.adapters import (
    CsvSourceAdapter,
    SourceAdapter,
    XlsxSourceAdapter,
    adapter_for,
)
from jewel_ingestion.services.import_validator import ImportValidator
from jewel_kernel.domain.clock import DeterministicClock


def _write_xlsx(path: Path, rows: list[list]) -> Path:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Inventar"
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


class TestCsvSourceAdapter:
    def test_reads_rows_with_bom(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("Model,Og'irlik,Lom narxi\nUZ-1,3.62,800000\nUZ-2,2,800000\n", encoding="utf-8-sig")

        rows = list(CsvSourceAdapter().read(path, {}))

        assert rows == [
            {"Model": "UZ-1", "Og'irlik": "3.62", "Lom narxi": "800000"},
            {"Model": "UZ-2", "Og'irlik": "2", "Lom narxi": "800000"},
        ]

    def test_inner_blank_rows_kept_and_overflow_cells_dropped(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("Model,Og'irlik\nUZ-1,3.62,extra\n,\n\nUZ-2,2\n", encoding="utf-8")

        rows = list(CsvSourceAdapter().read(path, {}))

        assert [r["Model"] for r in rows] == ["UZ-1", "", "", "UZ-2"]
        assert rows[0] == {"Model": "UZ-1", "Og'irlik": "3.62"}
        assert rows[1] == {"Model": "", "Og'irlik": ""}

    def test_trailing_blank_rows_dropped(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("Model\nUZ-1\n,\n\n", encoding="utf-8")

        rows = list(CsvSourceAdapter().read(path, {}))
        assert rows == [{"Model": "UZ-1"}]

    def test_short_rows_padded(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("Model,Rang\nUZ-1\n", encoding="utf-8")

        (row,) = list(CsvSourceAdapter().read(path, {}))
        assert row == {"Model": "UZ-1", "Rang": ""}

    def test_first_data_row(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("Inventory export\n\nModel\nUZ-1\n", encoding="utf-8")

        adapter = CsvSourceAdapter()
        list(adapter.read(path, {"skip_rows": 2}))
        assert adapter.first_data_row == 4

    def test_empty_file(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("", encoding="utf-8")
        assert list(CsvSourceAdapter().read(path, {})) == []

    def test_delimiter_and_skip_rows(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("Inventory export\nModel;Og'irlik\nUZ-1;3,62\n", encoding="utf-8")

        rows = list(CsvSourceAdapter().read(path, {"delimiter": ";", "skip_rows": 1}))
        assert rows == [{"Model": "UZ-1", "Og'irlik": "3,62"}]


class TestXlsxSourceAdapter:
    def test_typed_cells(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [
                ["Model", "Og'irlik", "Miqdor", "Lom narxi", "Sotib olingan sana"],
                ["UZ-1", 3.62, 2.0, 800000, datetime(2025, 5, 19)],
            ],
        )
        (row,) = list(XlsxSourceAdapter().read(path, {}))

        assert row["Model"] == "UZ-1"
        assert row["Og'irlik"] == pytest.approx(3.62)
        assert row["Miqdor"] == 2 and isinstance(row["Miqdor"], int)
        assert row["Lom narxi"] == 800000
        assert row["Sotib olingan sana"] == datetime(2025, 5, 19)

    def test_inner_blank_rows_kept_and_missing_cells_blank(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [
                ["Model", "Rang"],
                ["UZ-1", "Oq"],
                [None, None],
                ["UZ-2"],
                [None, None],
            ],
        )
        rows = list(XlsxSourceAdapter().read(path, {}))

        assert [r["Model"] for r in rows] == ["UZ-1", "", "UZ-2"]
        assert rows[1] == {"Model": "", "Rang": ""}
        assert rows[2]["Rang"] == ""

    def test_explicit_header_row(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [
                ["Ommaviy import shabloni"],
                ["Model", "Og'irlik"],
                ["UZ-1", 3],
            ],
        )
        rows = list(XlsxSourceAdapter().read(path, {"header_row": 1}))
        assert rows == [{"Model": "UZ-1", "Og'irlik": 3}]

    def test_first_data_row_follows_detected_header(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [
                [None],
                [None],
                ["Model"],
                ["UZ-1"],
            ],
        )
        adapter = XlsxSourceAdapter()
        rows = list(adapter.read(path, {}))

        assert rows == [{"Model": "UZ-1"}]
        assert adapter.first_data_row == 4

    def test_first_data_row_follows_explicit_header(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [["Shablon"], ["Model"], ["UZ-1"]],
        )
        adapter = XlsxSourceAdapter()
        list(adapter.read(path, {"header_row": 1}))
        assert adapter.first_data_row == 3

    def test_header_whitespace_collapsed_and_duplicates_renamed(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [
                ["Lom   narxi", "Model", "Model"],
                [800000, "UZ-1", "UZ-1b"],
            ],
        )
        (row,) = list(XlsxSourceAdapter().read(path, {}))
        assert row == {"Lom narxi": 800000, "Model": "UZ-1", "Model_1": "UZ-1b"}

    def test_sheet_by_name(self, tmp_path):
        path = tmp_path / "items.xlsx"
        wb = openpyxl.Workbook()
        wb.active.append(["Other"])
        ws = wb.create_sheet("Mahsulotlar")
        ws.append(["Model"])
        ws.append(["UZ-9"])
        wb.save(path)

        rows = list(XlsxSourceAdapter().read(path, {"sheet": "Mahsulotlar"}))
        assert rows == [{"Model": "UZ-9"}]


class TestAdapterFor:
    @pytest.mark.parametrize(
        "name, adapter_type",
        [
            ("items.csv", CsvSourceAdapter),
            ("items.XLSX", XlsxSourceAdapter),
            ("items.xlsm", XlsxSourceAdapter),
        ],
    )
    def test_by_suffix(self, name, adapter_type):
        adapter = adapter_for(Path(name))
        assert isinstance(adapter, adapter_type)
        assert isinstance(adapter, SourceAdapter)

    def test_unsupported(self):
        with pytest.raises(ValueError):
            adapter_for(Path("items.json"))


class TestRowNumbersThroughValidator:
    """source_row_index must name the row the operator sees in the file."""

    HEADER = ["Model", "Kategoriya", "Og'irlik", "Lom narxi", "Lom narxi kirim", "Ishchi haqi", "Filial"]

    def setup_method(self):
        self.validator = ImportValidator(settings=EngineSettings(), clock=DeterministicClock())

    def _validate(self, adapter, path, branches, options=None):
        rows = list(adapter.read(path, options or {}))
        records, summary = self.validator.validate_batch(
            rows, branches, first_row_number=adapter.first_data_row
        )
        return records, summary

    def test_csv_blank_line_keeps_numbering(self, tmp_path, branches):
        path = tmp_path / "items.csv"
        path.write_text(
            ",".join(self.HEADER) + "\n"
            "UZ-1,Uzuk,3.62,800000,850000,70000,Narpay\n"
            ",,,,,,\n"
            "UZ-B,Uzuk,,800000,850000,70000,Narpay\n",
            encoding="utf-8",
        )
        records, summary = self._validate(adapter_for(path), path, branches)

        assert [r.source_row_index for r in records] == [2, 4]
        assert not records[1].is_valid
        assert summary.total_rows == 2

    def test_csv_skip_rows_offsets_numbering(self, tmp_path, branches):
        path = tmp_path / "items.csv"
        path.write_text(
            "Inventar eksporti\n"
            + ",".join(self.HEADER) + "\n"
            "UZ-1,Uzuk,3.62,800000,850000,70000,Narpay\n",
            encoding="utf-8",
        )
        records, _ = self._validate(adapter_for(path), path, branches, {"skip_rows": 1})
        assert [r.source_row_index for r in records] == [3]

    def test_xlsx_blank_row_and_header_offset(self, tmp_path, branches):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [
                ["Ommaviy import shabloni"],
                self.HEADER,
                ["UZ-1", "Uzuk", 3.62, 800000, 850000, 70000, "Narpay"],
                [None] * 7,
                ["UZ-B", "Uzuk", None, 800000, 850000, 70000, "Narpay"],
            ],
        )
        records, summary = self._validate(
            adapter_for(path), path, branches, {"header_row": 1}
        )

        assert [r.source_row_index for r in records] == [3, 5]
        assert not records[1].is_valid
        assert summary.valid_rows == 1
