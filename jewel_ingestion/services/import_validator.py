"""
ImportValidator: header mapping -> coercion and rules -> pricing -> summary.

Orchestrates the pure pieces of the import pipeline over a whole batch of
raw spreadsheet rows.  Performs no I/O; reading files is the adapters' job
and persisting records is jewel_services.import_service's job.

Failure modes:
    - InvalidImportBatchError when ``rows`` is not a sequence of mappings.
      Malformed cells never raise; they become RowIssues.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from typing import Any

from jewel_config import get_active_config
from jewel_config.schema import EngineSettings
from jewel_engines.pricing import CostCalculator
from jewel_ingestion.domain.types import (
    BranchDirectory,
    ImportedItem,
    ImportSummary,
    ValidatedImportRecord,
)
from jewel_ingestion.domain.validators import validate_import_row
from jewel_ingestion.mapping.headers import HeaderMapper
from jewel_kernel.domain.clock import Clock, SystemClock
from jewel_kernel.exceptions import InvalidImportBatchError
from jewel_kernel.logging_config import get_logger

logger = get_logger("ingestion.import_validator")

ProgressCallback = Callable[[int, int], None]

# Spreadsheet row 1 is the header; the first data row is row 2
FIRST_DATA_ROW = 2


def _as_row_list(rows: Any) -> list[Mapping[Any, Any]]:
    if rows is None:
        raise InvalidImportBatchError("rows must be a sequence of records, got None")
    if isinstance(rows, (str, bytes, bytearray)) or isinstance(rows, Mapping):
        raise InvalidImportBatchError(
            f"rows must be a sequence of records, got {type(rows).__name__}"
        )
    try:
        materialized = list(rows)
    except TypeError as e:
        raise InvalidImportBatchError(
            f"rows must be a sequence of records, got {type(rows).__name__}"
        ) from e
    for position, row in enumerate(materialized):
        if not isinstance(row, Mapping):
            raise InvalidImportBatchError(
                f"record is a {type(row).__name__}, not a mapping", row_position=position
            )
    return materialized


class ImportValidator:
    """
    Validates and prices a batch of bulk-import rows.

    Contract:
        Deterministic for a given ``today``: validating the same rows twice
        yields equal records and summaries.
    Guarantees:
        - valid_rows + invalid_rows == total_rows.
        - Every valid record is priced with CostCalculator; invalid records
          keep zero cost and selling price.
        - Rows with no recognized non-blank cell are skipped and not counted.
    Non-goals:
        - Duplicate detection across rows.
        - Persisting anything.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        calculator: CostCalculator | None = None,
        clock: Clock | None = None,
    ):
        self._settings = settings or get_active_config()
        self._calculator = calculator or CostCalculator()
        self._clock = clock or SystemClock()
        self._mapper = HeaderMapper(self._settings.header_alias_map)

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def _price(self, item: ImportedItem) -> ImportedItem:
        pricing = self._calculator.derive_pricing(
            weight=item.weight,
            raw_material_price=item.raw_material_price,
            incoming_raw_material_price=item.incoming_raw_material_price,
            labor_cost_per_gram=item.labor_cost_per_gram,
            profit_percentage=item.profit_percentage,
            is_central_inventory=item.is_central_inventory,
        )
        return dataclasses.replace(
            item, total_cost=pricing.total_cost, selling_price=pricing.selling_price
        )

    def validate_row(
        self,
        row: Mapping[Any, Any],
        known_branches: BranchDirectory,
        *,
        source_row_index: int,
        today: date,
    ) -> ValidatedImportRecord | None:
        """Validate one raw row; None when the row has nothing recognizable."""
        mapped = self._mapper.map_row(row)
        if not mapped:
            return None
        item, issues = validate_import_row(
            mapped, branches=known_branches, settings=self._settings, today=today
        )
        record = ValidatedImportRecord(item=item, source_row_index=source_row_index, issues=issues)
        if record.is_valid:
            record = dataclasses.replace(record, item=self._price(item))
        return record

    def validate_batch(
        self,
        rows: Iterable[Mapping[Any, Any]],
        known_branches: BranchDirectory,
        *,
        today: date | None = None,
        progress: ProgressCallback | None = None,
        first_row_number: int = FIRST_DATA_ROW,
    ) -> tuple[list[ValidatedImportRecord], ImportSummary]:
        """
        Validate a whole batch.

        Args:
            rows: Raw rows keyed by spreadsheet header.
            known_branches: Branch lookup for the branch column.
            today: Fallback purchase date; defaults to the injected clock.
            progress: Called as ``progress(processed, total)`` every
                ``progress_interval`` rows and after the last row.
            first_row_number: Spreadsheet row number of ``rows[0]``.

        Returns:
            (records, summary); records are in input order.

        Raises:
            InvalidImportBatchError: If rows is not a sequence of mappings.
        """
        raw_rows = _as_row_list(rows)
        today = today or self._clock.today()
        total = len(raw_rows)
        interval = self._settings.progress_interval

        logger.info("import_batch_started", extra={"row_count": total, "today": today})

        records: list[ValidatedImportRecord] = []
        skipped = 0
        for position, row in enumerate(raw_rows):
            record = self.validate_row(
                row,
                known_branches,
                source_row_index=position + first_row_number,
                today=today,
            )
            if record is None:
                skipped += 1
            else:
                records.append(record)
                if not record.is_valid:
                    logger.debug("import_row_invalid", extra={
                        "source_row_index": record.source_row_index,
                        "issue_codes": list(record.issue_codes()),
                    })

            processed = position + 1
            if progress is not None and (processed % interval == 0 or processed == total):
                progress(processed, total)

        summary = ImportSummary.from_records(records, self._settings.warehouse_label)

        logger.info("import_batch_validated", extra={
            "total_rows": summary.total_rows,
            "valid_rows": summary.valid_rows,
            "invalid_rows": summary.invalid_rows,
            "warning_rows": summary.warning_rows,
            "skipped_rows": skipped,
            "total_value": str(summary.total_value),
        })
        return records, summary
