"""
Typed Exception Hierarchy for the Jewel Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from JewelKernelError:

    JewelKernelError (base)
    |
    +-- CallerContractViolation
    |   +-- InvalidPricingInputError
    |   +-- InvalidAllocationInputError
    |   +-- InvalidImportBatchError
    |
    +-- PaymentError
    |   +-- EmptyAllocationError
    |
    +-- InventoryError
    |   +-- ItemNotFoundError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Contract        | CALLER_CONTRACT_VIOLATION   | Input outside a documented precondition
                | INVALID_PRICING_INPUT       | Negative / non-finite pricing input
                | INVALID_ALLOCATION_INPUT    | Bad envelope or candidate list
                | INVALID_IMPORT_BATCH        | Rows are not a list of records
----------------|-----------------------------|-----------------------------------------
Payment         | EMPTY_ALLOCATION            | Commit requested for zero selected items
----------------|-----------------------------|-----------------------------------------
Inventory       | ITEM_NOT_FOUND              | Item id does not exist
----------------|-----------------------------|-----------------------------------------
Configuration   | CONFIGURATION_ERROR         | Settings file is malformed

===============================================================================
HANDLING PATTERNS
===============================================================================

Malformed spreadsheet data is NOT an exception: it is captured as row-level
issues on ValidatedImportRecord. An allocation that selects nothing is a
normal engine result. Only programmer-facing contract violations raise.

    try:
        result = allocator.allocate(envelope=envelope, candidates=items)
    except InvalidAllocationInputError as e:
        log.error("bad candidates", extra={"code": e.code, "reason": e.reason})
        raise
"""

from __future__ import annotations

from typing import Any


class JewelKernelError(Exception):
    """
    Base exception for all jewel kernel errors.

    All subclasses have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "JEWEL_KERNEL_ERROR"


# Caller contract violations


class CallerContractViolation(JewelKernelError):
    """
    Input outside a documented precondition.

    Indicates a bug in the calling layer, not bad external data.
    """

    code: str = "CALLER_CONTRACT_VIOLATION"


class InvalidPricingInputError(CallerContractViolation):
    """A pricing input is negative or not a finite number."""

    code: str = "INVALID_PRICING_INPUT"

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Pricing input {field_name!r} must be a finite non-negative number, got {value!r}"
        )


class InvalidAllocationInputError(CallerContractViolation):
    """The payment envelope or candidate list violates the allocation contract."""

    code: str = "INVALID_ALLOCATION_INPUT"

    def __init__(self, reason: str, item_id: str | None = None):
        self.reason = reason
        self.item_id = item_id
        message = f"Invalid allocation input: {reason}"
        if item_id is not None:
            message += f" (item {item_id})"
        super().__init__(message)


class InvalidImportBatchError(CallerContractViolation):
    """The import batch is not a sequence of key/value records."""

    code: str = "INVALID_IMPORT_BATCH"

    def __init__(self, reason: str, row_position: int | None = None):
        self.reason = reason
        self.row_position = row_position
        message = f"Invalid import batch: {reason}"
        if row_position is not None:
            message += f" at position {row_position}"
        super().__init__(message)


# Payment-related exceptions


class PaymentError(JewelKernelError):
    """Base exception for supplier payment errors."""

    code: str = "PAYMENT_ERROR"


class EmptyAllocationError(PaymentError):
    """
    A payment commit was requested but the allocation selected no items.

    The engine itself never raises this: an empty allocation is a valid
    result. Only the commit step refuses to record a payment for nothing.
    """

    code: str = "EMPTY_ALLOCATION"

    def __init__(self, supplier_name: str, amount: Any):
        self.supplier_name = supplier_name
        self.amount = amount
        super().__init__(
            f"Payment of {amount} for supplier {supplier_name!r} covers no outstanding items"
        )


# Inventory-related exceptions


class InventoryError(JewelKernelError):
    """Base exception for inventory errors."""

    code: str = "INVENTORY_ERROR"


class ItemNotFoundError(InventoryError):
    """Inventory item with given ID was not found."""

    code: str = "ITEM_NOT_FOUND"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Inventory item not found: {item_id}")


# Configuration


class ConfigurationError(JewelKernelError):
    """Engine settings could not be loaded or are malformed."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")
