"""Fixtures for service tests: seeded branches and inventory rows."""

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from jewel_kernel.domain.inventory import PaymentStatus
from jewel_kernel.models.branch import BranchModel
from jewel_kernel.models.inventory_item import InventoryItemModel

SUPPLIER = "Oltin Savdo"


@pytest.fixture
def seed_branches(db_session_scope) -> dict[str, UUID]:
    """Markaz (central), Narpay and Kitob; returns name -> id."""
    branches = [
        BranchModel(name="Markaz", is_central=True),
        BranchModel(name="Narpay"),
        BranchModel(name="Kitob"),
    ]
    with db_session_scope() as session:
        session.add_all(branches)
        session.flush()
        return {b.name: b.id for b in branches}


@pytest.fixture
def seed_item(db_session_scope, clock) -> Callable[..., UUID]:
    """Insert one inventory row and return its id."""

    def _seed(
        weight: str = "2",
        purchase_date: date = date(2025, 1, 1),
        supplier_name: str = SUPPLIER,
        payment_status: PaymentStatus = PaymentStatus.UNPAID,
        selling_price: str = "0",
        profit_percentage: str = "20",
    ) -> UUID:
        model = InventoryItemModel(
            model="UZ-1",
            category="Uzuk",
            weight=Decimal(weight),
            quantity=1,
            raw_material_price=Decimal("800000"),
            incoming_raw_material_price=Decimal("850000"),
            labor_cost_per_gram=Decimal("70000"),
            profit_percentage=Decimal(profit_percentage),
            total_cost=Decimal("0"),
            selling_price=Decimal(selling_price),
            supplier_name=supplier_name,
            purchase_date=purchase_date,
            payment_status=payment_status.value,
            created_at=clock.now(),
            created_by_id="seed",
        )
        with db_session_scope() as session:
            session.add(model)
            session.flush()
            return model.id

    return _seed
