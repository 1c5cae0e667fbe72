"""
Module: jewel_kernel.models.branch
Responsibility: ORM persistence for retail branches and the central warehouse.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from __future__ import annotations

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from jewel_kernel.db.base import Base


class BranchModel(Base):
    """
    A retail branch or the central (provider) warehouse.

    Guarantees:
        - name is unique; lookups by name are case-insensitive at the
          service layer (SqlBranchDirectory), not in the database.
    """

    __tablename__ = "branches"

    __table_args__ = (
        UniqueConstraint("name", name="uq_branch_name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    location: Mapped[str | None] = mapped_column(String(200), nullable=True)

    is_central: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Branch {self.id}: {self.name}{' (central)' if self.is_central else ''}>"
