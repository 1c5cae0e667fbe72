"""
Module: jewel_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.  Provides
    the UUID primary key convention, type annotation map for consistent column
    types, and the TrackedBase mixin for audit timestamps.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, domain/, or outer layers.

Invariants enforced:
    - UUID primary keys: every model inherits a uuid4-generated primary key.
    - Decimal precision: type_annotation_map maps Python Decimal to
      Numeric(38, 9).  NEVER use float for money or weights.
    - Audit metadata: TrackedBase provides created_at, updated_at,
      created_by_id and updated_by_id.  Timestamps are written by services
      from an injected Clock, never by the database.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Guarantees:
        - process_bind_param: UUID -> str on INSERT/UPDATE.
        - process_result_value: str -> UUID on SELECT.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert UUID to string when storing."""
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        """Convert string back to UUID when loading."""
        if value is not None:
            return PyUUID(value)
        return None


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is always a uuid4-generated UUID stored as String(36).
        - Decimal maps to Numeric(38, 9).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


class TrackedBase(Base):
    """
    Abstract base with audit timestamp and actor tracking.

    Contract:
        created_at / created_by_id are required on INSERT.  updated_at /
        updated_by_id are set by whichever service mutates the row.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    created_by_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    updated_by_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )


# Re-export UUID for convenience
UUID = PyUUID
