"""
Pytest fixtures for the jewel ledger test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- captured_logs: JSON log records emitted under the jewel_kernel namespace
- In-memory SQLite database with a session_scope transaction boundary
- Deterministic clock, default engine settings and an item factory
"""

import json
import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from itertools import count

import pytest

from jewel_config.schema import EngineSettings
from jewel_ingestion.domain.types import StaticBranchDirectory
from jewel_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from jewel_kernel.domain.clock import DeterministicClock
from jewel_kernel.domain.inventory import InventoryItem, PaymentStatus
from jewel_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

TEST_ACTOR_ID = "test-actor"
TEST_SUPPLIER = "Oltin Savdo"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture jewel_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            allocator.allocate(envelope=envelope, candidates=items)
            logs = captured_logs()
            assert any(r["message"] == "allocation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("jewel_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings() -> EngineSettings:
    """Defaults identical to jewel_config/defaults.yaml."""
    return EngineSettings()


@pytest.fixture
def branches() -> StaticBranchDirectory:
    return StaticBranchDirectory(
        {
            "b-markaz": "Markaz",
            "b-narpay": "Narpay",
            "b-kitob": "Kitob",
        }
    )


@pytest.fixture
def make_item() -> Callable[..., InventoryItem]:
    """
    Factory for InventoryItem with sensible defaults.

    Ids are sequential ("item-001", "item-002", ...) so tie-breaking by id
    follows creation order unless a test passes its own id.
    """
    seq = count(1)

    def _make(**overrides) -> InventoryItem:
        n = next(seq)
        fields = dict(
            id=f"item-{n:03d}",
            model=f"UZ-{n}",
            category="Uzuk",
            weight=Decimal("2"),
            raw_material_price=Decimal("800000"),
            incoming_raw_material_price=Decimal("850000"),
            labor_cost_per_gram=Decimal("70000"),
            supplier_name=TEST_SUPPLIER,
            payment_status=PaymentStatus.UNPAID,
            purchase_date=date(2025, 1, n if n <= 28 else 28),
        )
        fields.update(overrides)
        return InventoryItem(**fields)

    return _make


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_session_scope():
    """
    Fresh in-memory SQLite schema per test; yields the session_scope callable.

    Services under test receive this as their transaction boundary.
    """
    init_engine_from_url("sqlite://")
    create_tables()
    yield session_scope
    drop_tables()
    reset_engine()
