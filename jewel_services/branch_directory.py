"""
SqlBranchDirectory -- BranchDirectory backed by the branches table.

Loads a snapshot of all branches once at construction so that validating a
large batch does not issue one query per row.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from jewel_ingestion.domain.types import StaticBranchDirectory
from jewel_kernel.models.branch import BranchModel


class SqlBranchDirectory(StaticBranchDirectory):
    """Case-insensitive branch lookup over a snapshot of BranchModel rows."""

    def __init__(
        self,
        session: Session,
        central_aliases: Iterable[str] = ("markaz", "марказ", "center", "central"),
    ):
        rows = session.execute(select(BranchModel.id, BranchModel.name)).all()
        super().__init__(
            {str(branch_id): name for branch_id, name in rows},
            central_aliases=central_aliases,
        )
