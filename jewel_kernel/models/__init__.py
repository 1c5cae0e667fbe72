"""SQLAlchemy ORM models for branches, inventory items and supplier payments."""

from jewel_kernel.models.branch import BranchModel
from jewel_kernel.models.inventory_item import InventoryItemModel
from jewel_kernel.models.supplier_payment import (
    SupplierPaymentLineModel,
    SupplierPaymentModel,
)

__all__ = [
    "BranchModel",
    "InventoryItemModel",
    "SupplierPaymentLineModel",
    "SupplierPaymentModel",
]
