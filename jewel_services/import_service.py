"""
jewel_services.import_service -- preview and commit of bulk inventory imports.

Responsibility:
    Run the ImportValidator against the live branch table (preview), then
    insert the valid records as InventoryItemModel rows (commit).

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    The transaction boundary is the injected ``session_scope`` callable.

Invariants enforced:
    - Only valid records are inserted; invalid records are skipped and
      counted.
    - A commit is one transaction: either every valid record is inserted
      or none is.
    - created_at comes from the injected Clock, created_by_id from the
      explicit actor_id.

Failure modes:
    - InvalidImportBatchError from preview for a malformed batch.
    - Database errors propagate after rollback by ``session_scope``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from contextlib import AbstractContextManager
from datetime import date
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from jewel_ingestion.adapters import adapter_for
from jewel_ingestion.domain.types import ImportSummary, ValidatedImportRecord
from jewel_ingestion.services.import_validator import (
    FIRST_DATA_ROW,
    ImportValidator,
    ProgressCallback,
)
from jewel_kernel.domain.clock import Clock, SystemClock
from jewel_kernel.logging_config import LogContext, get_logger
from jewel_kernel.models.inventory_item import InventoryItemModel
from jewel_services.branch_directory import SqlBranchDirectory

logger = get_logger("services.import")

SessionScope = Callable[[], AbstractContextManager[Session]]


def _to_model(
    record: ValidatedImportRecord,
    actor_id: str,
    clock: Clock,
) -> InventoryItemModel:
    item = record.item
    return InventoryItemModel(
        id=uuid4(),
        model=item.model,
        category=item.category,
        weight=item.weight,
        quantity=item.quantity,
        size=item.size,
        raw_material_price=item.raw_material_price,
        incoming_raw_material_price=item.incoming_raw_material_price,
        labor_cost_per_gram=item.labor_cost_per_gram,
        profit_percentage=item.profit_percentage,
        total_cost=item.total_cost,
        selling_price=item.selling_price,
        is_central_inventory=item.is_central_inventory,
        branch_id=UUID(item.branch_id) if item.branch_id else None,
        color=item.color,
        purity=item.purity,
        stone_type=item.stone_type,
        stone_weight=item.stone_weight,
        manufacturer=item.manufacturer,
        notes=item.notes,
        supplier_name=item.supplier_name,
        purchase_date=item.purchase_date,
        payment_status=item.payment_status.value,
        source_row_index=record.source_row_index,
        created_at=clock.now(),
        created_by_id=actor_id,
    )


class InventoryImportService:
    """
    Preview/commit service for spreadsheet imports.

    Contract:
        Receives session_scope and Clock via constructor injection.
    Guarantees:
        - ``preview`` never writes.
        - ``commit`` returns the new item ids in record order.
    Non-goals:
        - Does not re-validate records at commit time; callers commit the
          records a preview returned.
    """

    def __init__(
        self,
        session_scope: SessionScope,
        clock: Clock | None = None,
        validator: ImportValidator | None = None,
    ):
        self._session_scope = session_scope
        self._clock = clock or SystemClock()
        self._validator = validator or ImportValidator(clock=self._clock)

    def preview(
        self,
        rows: Iterable[Mapping[Any, Any]],
        *,
        today: date | None = None,
        progress: ProgressCallback | None = None,
        first_row_number: int = FIRST_DATA_ROW,
    ) -> tuple[list[ValidatedImportRecord], ImportSummary]:
        """Validate rows against the current branch table."""
        with self._session_scope() as session:
            branches = SqlBranchDirectory(
                session, central_aliases=self._validator.settings.central_branch_aliases
            )
        return self._validator.validate_batch(
            rows,
            branches,
            today=today or self._clock.today(),
            progress=progress,
            first_row_number=first_row_number,
        )

    def preview_file(
        self,
        source_path: Path,
        options: dict[str, Any] | None = None,
        *,
        today: date | None = None,
        progress: ProgressCallback | None = None,
    ) -> tuple[list[ValidatedImportRecord], ImportSummary]:
        """Read a .csv/.xlsx file and preview it."""
        source_path = Path(source_path)
        adapter = adapter_for(source_path)
        rows = list(adapter.read(source_path, options or {}))
        logger.info("import_file_read", extra={
            "source_filename": source_path.name,
            "row_count": len(rows),
            "first_data_row": adapter.first_data_row,
        })
        return self.preview(
            rows,
            today=today,
            progress=progress,
            first_row_number=adapter.first_data_row,
        )

    def commit(
        self,
        records: Sequence[ValidatedImportRecord],
        actor_id: str,
    ) -> list[UUID]:
        """Insert every valid record in one transaction; return the new ids."""
        batch_id = uuid4()
        with LogContext.bind(batch_id=str(batch_id), actor_id=actor_id):
            valid = [r for r in records if r.is_valid]
            logger.info("import_commit_started", extra={
                "record_count": len(records),
                "valid_count": len(valid),
            })

            with self._session_scope() as session:
                models = [_to_model(r, actor_id, self._clock) for r in valid]
                session.add_all(models)
                session.flush()
                ids = [m.id for m in models]

            logger.info("import_commit_completed", extra={
                "inserted_count": len(ids),
                "skipped_invalid_count": len(records) - len(valid),
            })
            return ids
