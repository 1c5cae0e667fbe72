"""
jewel_services -- preview/commit orchestration over engines and the database.

Every service receives a ``session_scope`` callable (the transaction
boundary) and a ``Clock`` by constructor injection.  Actor ids are explicit
parameters of every write and are bound into LogContext for its duration.
"""

from jewel_services.branch_directory import SqlBranchDirectory
from jewel_services.import_service import InventoryImportService
from jewel_services.margin_service import MarginUpdateService
from jewel_services.payment_service import RecordedPayment, SupplierPaymentService

__all__ = [
    "InventoryImportService",
    "MarginUpdateService",
    "RecordedPayment",
    "SqlBranchDirectory",
    "SupplierPaymentService",
]
