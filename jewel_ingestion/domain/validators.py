"""
Row rules for bulk inventory import.

Takes one header-mapped row, coerces each cell once, and applies the
business rules to the typed values.  Returns the coerced ``ImportedItem``
and the ordered ``RowIssue`` list; pricing of valid rows is done by the
caller.

Architecture: jewel_ingestion/domain. ZERO I/O. Imports only from
jewel_kernel.domain, the sibling mapping module and the settings schema.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from jewel_config.schema import EngineSettings
from jewel_ingestion.domain.types import BranchDirectory, ImportedItem, IssueSeverity, RowIssue
from jewel_ingestion.mapping.coercion import (
    coerce_bool,
    coerce_decimal,
    coerce_int,
    normalize_purchase_date,
)
from jewel_kernel.domain.inventory import PaymentStatus
from jewel_kernel.domain.values import ZERO

_APOSTROPHES = re.compile(r"[‘’ʻʼ`]")


def _error(code: str, message: str, field: str) -> RowIssue:
    return RowIssue(code=code, message=message, field=field, severity=IssueSeverity.ERROR)


def _warning(code: str, message: str, field: str) -> RowIssue:
    return RowIssue(code=code, message=message, field=field, severity=IssueSeverity.WARNING)


def _text(value: Any) -> str | None:
    """Cell -> stripped text, or None when blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _match_choice(value: str, choices: Iterable[str]) -> str | None:
    """Case- and apostrophe-insensitive match; returns the canonical spelling."""
    key = _APOSTROPHES.sub("'", value).lower()
    for choice in choices:
        if _APOSTROPHES.sub("'", choice).lower() == key:
            return choice
    return None


def _positive_amount(
    row: Mapping[str, Any],
    field: str,
    label: str,
    issues: list[RowIssue],
    allow_zero: bool = False,
) -> Decimal | None:
    """Required numeric cell: missing, non-numeric and out-of-range are errors."""
    if field not in row:
        issues.append(_error("MISSING_VALUE", f"{label} is required", field))
        return None
    result = coerce_decimal(row[field])
    if not result.success:
        issues.append(_error("NOT_A_NUMBER", f"{label} must be a number, got {row[field]!r}", field))
        return None
    value: Decimal = result.value
    if value < ZERO or (value == ZERO and not allow_zero):
        bound = "cannot be negative" if allow_zero else "must be greater than 0"
        issues.append(_error("OUT_OF_RANGE", f"{label} {bound}", field))
        return None
    return value


def validate_import_row(
    row: Mapping[str, Any],
    *,
    branches: BranchDirectory,
    settings: EngineSettings,
    today: date,
) -> tuple[ImportedItem, tuple[RowIssue, ...]]:
    """
    Coerce and check one header-mapped row.

    Preconditions:
        ``row`` is keyed by canonical field names with blank cells removed
        (see ``jewel_ingestion.mapping.headers.map_row``).

    Postconditions:
        The returned issues are in rule order: required fields, optional
        numeric fields, branch logic, enumerations, stone weight, price
        sanity checks, purchase date.
    """
    issues: list[RowIssue] = []

    # Required fields
    model = _text(row.get("model"))
    if model is None:
        issues.append(_error("MISSING_MODEL", "Model name is required", "model"))

    category_text = _text(row.get("category"))
    category = _match_choice(category_text, settings.categories) if category_text else None
    if category is None:
        issues.append(_error(
            "INVALID_CATEGORY",
            f"Category must be one of: {', '.join(settings.categories)}",
            "category",
        ))

    weight = _positive_amount(row, "weight", "Weight", issues)
    raw_price = _positive_amount(row, "raw_material_price", "Raw material price", issues)
    incoming_price = _positive_amount(
        row, "incoming_raw_material_price", "Incoming raw material price", issues
    )
    labor = _positive_amount(row, "labor_cost_per_gram", "Labor cost", issues, allow_zero=True)

    # Profit percentage: optional, defaulted
    profit: Decimal | None = settings.default_profit_percentage
    if "profit_percentage" in row:
        result = coerce_decimal(row["profit_percentage"])
        if not result.success:
            issues.append(_error(
                "NOT_A_NUMBER",
                f"Profit percentage must be a number, got {row['profit_percentage']!r}",
                "profit_percentage",
            ))
            profit = None
        elif result.value < ZERO:
            issues.append(_error(
                "OUT_OF_RANGE", "Profit percentage cannot be negative", "profit_percentage"
            ))
            profit = None
        else:
            profit = result.value
    if profit is not None:
        if profit > settings.profit_warning_max:
            issues.append(_warning(
                "PROFIT_HIGH",
                f"Profit percentage is very high (over {settings.profit_warning_max}%)",
                "profit_percentage",
            ))
        if profit < settings.profit_warning_min:
            issues.append(_warning(
                "PROFIT_LOW",
                f"Profit percentage is low (under {settings.profit_warning_min}%)",
                "profit_percentage",
            ))

    # Quantity: optional, defaulted, whole and positive
    quantity: int | None = settings.default_quantity
    if "quantity" in row:
        result = coerce_int(row["quantity"])
        if not result.success:
            issues.append(_error(
                "NOT_A_WHOLE_NUMBER",
                f"Quantity must be a whole number, got {row['quantity']!r}",
                "quantity",
            ))
            quantity = None
        elif result.value <= 0:
            issues.append(_error("OUT_OF_RANGE", "Quantity must be greater than 0", "quantity"))
            quantity = None
        else:
            quantity = result.value

    # Central stock flag and branch
    is_central = False
    if "is_central_inventory" in row:
        result = coerce_bool(
            row["is_central_inventory"], settings.true_values, settings.false_values
        )
        if result.success:
            is_central = result.value
        else:
            issues.append(_warning(
                "UNRECOGNIZED_FLAG",
                f"Central inventory flag {row['is_central_inventory']!r} is not TRUE/FALSE; "
                "treated as FALSE",
                "is_central_inventory",
            ))

    branch_text = _text(row.get("branch"))
    branch_id: str | None = None
    branch_name: str | None = None
    if is_central:
        if branch_text:
            issues.append(_warning(
                "BRANCH_ON_CENTRAL_STOCK",
                "Central inventory should not name a branch",
                "branch",
            ))
    elif branch_text:
        branch_id = branches.resolve_id(branch_text)
        if branch_id is None:
            issues.append(_warning(
                "UNKNOWN_BRANCH",
                f"Branch {branch_text!r} was not found; please check the name",
                "branch",
            ))
        else:
            branch_name = branches.name_for(branch_id) or branch_text
    else:
        issues.append(_warning(
            "MISSING_BRANCH",
            "No branch given and the item is not central inventory",
            "branch",
        ))

    # Enumerations
    color = _text(row.get("color"))
    if color is not None:
        matched = _match_choice(color, settings.colors)
        if matched is None:
            issues.append(_warning(
                "INVALID_COLOR",
                f"Color {color!r} is not one of: {', '.join(settings.colors)}",
                "color",
            ))
        else:
            color = matched

    purity = _text(row.get("purity"))
    if purity is not None:
        matched = _match_choice(purity, settings.purities)
        if matched is None:
            issues.append(_warning(
                "INVALID_PURITY",
                f"Purity {purity!r} is not one of: {', '.join(settings.purities)}",
                "purity",
            ))
        else:
            purity = matched

    payment_status = PaymentStatus.UNPAID
    status_text = _text(row.get("payment_status"))
    if status_text is not None:
        matched = _match_choice(status_text, settings.payment_statuses)
        if matched is None or matched not in {s.value for s in PaymentStatus}:
            issues.append(_warning(
                "INVALID_PAYMENT_STATUS",
                f"Payment status {status_text!r} is not recognized; using unpaid",
                "payment_status",
            ))
        else:
            payment_status = PaymentStatus(matched)

    # Stone weight
    stone_weight: Decimal | None = None
    if "stone_weight" in row:
        result = coerce_decimal(row["stone_weight"])
        if not result.success or result.value <= ZERO:
            issues.append(_warning(
                "INVALID_STONE_WEIGHT",
                f"Stone weight must be a positive number, got {row['stone_weight']!r}",
                "stone_weight",
            ))
        elif weight is not None and result.value > weight:
            issues.append(_warning(
                "STONE_HEAVIER_THAN_ITEM",
                "Stone weight cannot exceed the item weight",
                "stone_weight",
            ))
        else:
            stone_weight = result.value

    # Price sanity
    if raw_price is not None and incoming_price is not None and incoming_price < raw_price:
        issues.append(_warning(
            "INCOMING_BELOW_RAW",
            "Incoming raw material price is below the raw material price",
            "incoming_raw_material_price",
        ))
    if raw_price is not None and labor is not None and labor > raw_price:
        issues.append(_warning(
            "LABOR_ABOVE_RAW",
            "Labor cost is higher than the raw material price",
            "labor_cost_per_gram",
        ))

    # Purchase date
    date_result = normalize_purchase_date(
        row.get("purchase_date"), today, settings.two_digit_year_pivot
    )
    if not date_result.success:
        issues.append(_warning("INVALID_DATE", f"Purchase date: {date_result.reason}", "purchase_date"))

    item = ImportedItem(
        model=model or "",
        category=category or (category_text or ""),
        weight=weight,
        raw_material_price=raw_price,
        incoming_raw_material_price=incoming_price,
        labor_cost_per_gram=labor,
        profit_percentage=profit,
        quantity=quantity,
        is_central_inventory=is_central,
        purchase_date=date_result.value,
        payment_status=payment_status,
        branch_id=branch_id,
        branch_name=branch_name,
        size=_text(row.get("size")),
        color=color,
        purity=purity,
        stone_type=_text(row.get("stone_type")),
        stone_weight=stone_weight,
        manufacturer=_text(row.get("manufacturer")),
        supplier_name=_text(row.get("supplier_name")),
        notes=_text(row.get("notes")),
    )
    return item, tuple(issues)
