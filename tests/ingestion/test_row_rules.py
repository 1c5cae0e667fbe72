"""
Tests for validate_import_row: per-row business rules on mapped rows.

Rows here are already keyed by canonical field name; header aliasing is
covered in test_header_mapping.py.
"""

from datetime import date
from decimal import Decimal

import pytest

from jewel_config.schema import EngineSettings
from jewel_ingestion.domain.types import IssueSeverity, StaticBranchDirectory
from jewel_ingestion.domain.validators import validate_import_row
from jewel_kernel.domain.inventory import PaymentStatus

TODAY = date(2025, 6, 1)


def _base_row(**overrides) -> dict:
    row = {
        "model": "UZ-1",
        "category": "Uzuk",
        "weight": "3.62",
        "raw_material_price": "800000",
        "incoming_raw_material_price": "850000",
        "labor_cost_per_gram": "70000",
        "branch": "Narpay",
    }
    row.update(overrides)
    return {k: v for k, v in row.items() if v is not None}


class RowRulesTestBase:
    def setup_method(self):
        self.settings = EngineSettings()
        self.branches = StaticBranchDirectory(
            {"b-markaz": "Markaz", "b-narpay": "Narpay", "b-kitob": "Kitob"}
        )

    def _validate(self, **overrides):
        return validate_import_row(
            _base_row(**overrides),
            branches=self.branches,
            settings=self.settings,
            today=TODAY,
        )

    def _codes(self, issues, severity=None) -> list[str]:
        return [i.code for i in issues if severity is None or i.severity == severity]


class TestCleanRow(RowRulesTestBase):
    def test_no_issues(self):
        item, issues = self._validate()
        assert issues == ()
        assert item.model == "UZ-1"
        assert item.weight == Decimal("3.62")
        assert item.profit_percentage == Decimal("20")
        assert item.quantity == 1
        assert item.branch_id == "b-narpay"
        assert item.branch_name == "Narpay"
        assert item.purchase_date == TODAY
        assert item.payment_status is PaymentStatus.UNPAID

    def test_pricing_left_to_caller(self):
        item, _ = self._validate()
        assert item.selling_price == Decimal("0")
        assert item.total_cost == Decimal("0")


class TestRequiredFields(RowRulesTestBase):
    def test_missing_model(self):
        _, issues = self._validate(model=None)
        assert "MISSING_MODEL" in self._codes(issues, IssueSeverity.ERROR)

    def test_category_matched_case_and_apostrophe_insensitively(self):
        item, issues = self._validate(category="sirg‘a")
        assert issues == ()
        assert item.category == "Sirg'a"

    def test_unknown_category(self):
        item, issues = self._validate(category="Ring")
        assert self._codes(issues) == ["INVALID_CATEGORY"]
        assert item.category == "Ring"

    @pytest.mark.parametrize(
        "field, value, code",
        [
            ("weight", None, "MISSING_VALUE"),
            ("weight", "abc", "NOT_A_NUMBER"),
            ("weight", "0", "OUT_OF_RANGE"),
            ("raw_material_price", "-1", "OUT_OF_RANGE"),
            ("incoming_raw_material_price", None, "MISSING_VALUE"),
            ("labor_cost_per_gram", "-5", "OUT_OF_RANGE"),
            ("labor_cost_per_gram", None, "MISSING_VALUE"),
        ],
    )
    def test_numeric_errors(self, field, value, code):
        item, issues = self._validate(**{field: value})
        errors = [i for i in issues if i.is_error]
        assert [(i.code, i.field) for i in errors] == [(code, field)]
        assert getattr(item, field) is None

    def test_zero_labor_allowed(self):
        item, issues = self._validate(labor_cost_per_gram="0")
        assert issues == ()
        assert item.labor_cost_per_gram == Decimal("0")


class TestProfitAndQuantity(RowRulesTestBase):
    def test_high_profit_is_warning(self):
        item, issues = self._validate(profit_percentage="150")
        assert self._codes(issues) == ["PROFIT_HIGH"]
        assert not issues[0].is_error
        assert item.profit_percentage == Decimal("150")

    @pytest.mark.parametrize("value", ["5", "0"])
    def test_low_profit_is_warning(self, value):
        item, issues = self._validate(profit_percentage=value)
        assert self._codes(issues) == ["PROFIT_LOW"]
        assert item.profit_percentage == Decimal(value)

    @pytest.mark.parametrize("value, code", [("-5", "OUT_OF_RANGE"), ("lots", "NOT_A_NUMBER")])
    def test_bad_profit_is_error(self, value, code):
        _, issues = self._validate(profit_percentage=value)
        assert self._codes(issues, IssueSeverity.ERROR) == [code]

    def test_quantity(self):
        item, _ = self._validate(quantity="3")
        assert item.quantity == 3

    @pytest.mark.parametrize("value, code", [("2.5", "NOT_A_WHOLE_NUMBER"), ("0", "OUT_OF_RANGE")])
    def test_bad_quantity(self, value, code):
        item, issues = self._validate(quantity=value)
        assert self._codes(issues, IssueSeverity.ERROR) == [code]
        assert item.quantity is None


class TestBranchLogic(RowRulesTestBase):
    def test_central_with_branch_warns_and_drops_branch(self):
        item, issues = self._validate(is_central_inventory="TRUE")
        assert self._codes(issues) == ["BRANCH_ON_CENTRAL_STOCK"]
        assert item.is_central_inventory is True
        assert item.branch_id is None

    def test_central_without_branch(self):
        item, issues = self._validate(is_central_inventory="ha", branch=None)
        assert issues == ()
        assert item.is_central_inventory is True

    def test_unrecognized_flag_treated_as_false(self):
        item, issues = self._validate(is_central_inventory="maybe")
        assert self._codes(issues) == ["UNRECOGNIZED_FLAG"]
        assert item.is_central_inventory is False
        assert item.branch_id == "b-narpay"

    def test_unknown_branch(self):
        item, issues = self._validate(branch="Samarqand")
        assert self._codes(issues) == ["UNKNOWN_BRANCH"]
        assert item.branch_id is None

    def test_missing_branch(self):
        _, issues = self._validate(branch=None)
        assert self._codes(issues) == ["MISSING_BRANCH"]

    @pytest.mark.parametrize("name", ["markaz", "MARKAZ", "марказ", "center"])
    def test_central_branch_aliases(self, name):
        item, issues = self._validate(branch=name)
        assert issues == ()
        assert item.branch_id == "b-markaz"
        assert item.branch_name == "Markaz"


class TestEnumerations(RowRulesTestBase):
    def test_canonical_spellings_stored(self):
        item, issues = self._validate(color="oq", purity="18k", payment_status="Paid")
        assert issues == ()
        assert item.color == "Oq"
        assert item.purity == "18K"
        assert item.payment_status is PaymentStatus.PAID

    def test_unknown_values_warn(self):
        item, issues = self._validate(color="Blue", purity="9K", payment_status="done")
        assert self._codes(issues) == ["INVALID_COLOR", "INVALID_PURITY", "INVALID_PAYMENT_STATUS"]
        assert all(not i.is_error for i in issues)
        assert item.payment_status is PaymentStatus.UNPAID


class TestStoneWeight(RowRulesTestBase):
    def test_valid(self):
        item, issues = self._validate(stone_weight="0.5")
        assert issues == ()
        assert item.stone_weight == Decimal("0.5")

    @pytest.mark.parametrize("value", ["-1", "0", "heavy"])
    def test_invalid_dropped(self, value):
        item, issues = self._validate(stone_weight=value)
        assert self._codes(issues) == ["INVALID_STONE_WEIGHT"]
        assert item.stone_weight is None

    def test_heavier_than_item(self):
        item, issues = self._validate(stone_weight="10")
        assert self._codes(issues) == ["STONE_HEAVIER_THAN_ITEM"]
        assert item.stone_weight is None


class TestPriceSanity(RowRulesTestBase):
    def test_incoming_below_raw(self):
        _, issues = self._validate(incoming_raw_material_price="700000")
        assert self._codes(issues, IssueSeverity.WARNING) == ["INCOMING_BELOW_RAW"]

    def test_labor_above_raw(self):
        _, issues = self._validate(labor_cost_per_gram="900000")
        assert self._codes(issues, IssueSeverity.WARNING) == ["LABOR_ABOVE_RAW"]


class TestPurchaseDate(RowRulesTestBase):
    def test_two_digit_year(self):
        item, issues = self._validate(purchase_date="05/19/25")
        assert issues == ()
        assert item.purchase_date == date(2025, 5, 19)

    def test_malformed_date_warns_and_uses_today(self):
        item, issues = self._validate(purchase_date="19-05-2025")
        assert self._codes(issues) == ["INVALID_DATE"]
        assert item.purchase_date == TODAY


class TestIssueOrdering(RowRulesTestBase):
    def test_rule_order(self):
        _, issues = self._validate(
            model=None,
            weight="abc",
            profit_percentage="150",
            branch="Nowhere",
            purchase_date="bad",
        )
        assert self._codes(issues) == [
            "MISSING_MODEL",
            "NOT_A_NUMBER",
            "PROFIT_HIGH",
            "UNKNOWN_BRANCH",
            "INVALID_DATE",
        ]
