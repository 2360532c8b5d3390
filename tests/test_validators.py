"""
Unit Tests for Validators

Covers input-shape checks, business rules and admin configuration bounds.
"""

from decimal import Decimal

import pytest

from loan_engine.models import RateTable, ValidationRules
from loan_engine.validators import ConfigValidator, InputValidator, RuleValidator, validate


class TestRuleValidator:
    """Test business-rule violations."""

    @pytest.fixture
    def rules(self):
        return ValidationRules()

    def test_clean_deal_passes(self, rules, make_deal):
        assert validate(make_deal(), rules) == []

    def test_low_fico_single_violation(self, rules, make_deal):
        """FICO 600 with default rules: exactly one violation."""
        violations = validate(make_deal(fico=600), rules)
        assert violations == ["FICO score must be at least 650"]

    def test_fico_at_threshold_passes(self, rules, make_deal):
        assert validate(make_deal(fico=650), rules) == []

    def test_rehab_over_limit(self, rules, make_deal):
        violations = validate(make_deal(purchase_price=200000, rehab_budget=100001, arv=400000), rules)
        assert violations == ["Rehab budget cannot exceed 50% of purchase price"]

    def test_rehab_at_limit_passes(self, rules, make_deal):
        assert validate(make_deal(purchase_price=200000, rehab_budget=100000, arv=400000), rules) == []

    def test_low_arv_ratio(self, rules, make_deal):
        violations = validate(make_deal(purchase_price=200000, rehab_budget=0, arv=230000), rules)
        assert violations == ["ARV must be at least 120% of purchase price"]

    def test_arv_ratio_at_minimum_passes(self, rules, make_deal):
        assert validate(make_deal(purchase_price=200000, rehab_budget=0, arv=240000), rules) == []

    def test_rehab_and_arv_both_reported(self, rules, make_deal):
        """All checks run; violations are not short-circuited."""
        violations = validate(make_deal(purchase_price=200000, rehab_budget=120000, arv=220000), rules)
        assert violations == [
            "Rehab budget cannot exceed 50% of purchase price",
            "ARV must be at least 120% of purchase price",
        ]

    def test_all_three_reported(self, rules, make_deal):
        violations = validate(make_deal(purchase_price=200000, rehab_budget=120000, arv=220000, fico=500), rules)
        assert len(violations) == 3
        assert violations[0] == "FICO score must be at least 650"

    def test_messages_follow_configured_rules(self, make_deal):
        rules = ValidationRules(
            min_fico=700,
            max_rehab_budget_percentage=Decimal("25"),
            min_arv_to_purchase_ratio=Decimal("1.35"),
        )
        violations = validate(make_deal(purchase_price=200000, rehab_budget=60000, arv=260000, fico=690), rules)
        assert violations == [
            "FICO score must be at least 700",
            "Rehab budget cannot exceed 25% of purchase price",
            "ARV must be at least 135% of purchase price",
        ]

    def test_zero_purchase_price_does_not_divide(self, rules, make_deal):
        deal = make_deal(purchase_price=0, rehab_budget=0, arv=300000)
        violations = RuleValidator().validate(deal, rules)
        assert "Purchase price must be greater than zero" in violations

    def test_does_not_mutate_inputs(self, rules, make_deal):
        deal = make_deal(fico=600)
        validate(deal, rules)
        assert deal.borrower_fico == 600
        assert rules == ValidationRules()


class TestInputValidator:
    """Test field-level shape checks on raw requests."""

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_valid_request(self, validator, sample_request):
        assert validator.validate(sample_request) == []

    def test_camel_case_keys_accepted(self, validator):
        data = {
            "address": "1 Elm St",
            "transactionType": "Refinance",
            "purchasePrice": 150000,
            "rehabBudget": 10000,
            "arv": 200000,
            "borrowerFico": 700,
            "borrowerExperience": "Beginner",
        }
        assert validator.validate(data) == []

    def test_not_a_dict(self, validator):
        assert validator.validate(["nope"]) == ["Request body must be a JSON object"]

    def test_missing_fields_are_all_reported(self, validator):
        errors = validator.validate({})
        fields = [error.split(":")[0] for error in errors]
        assert fields == [
            "address",
            "transaction_type",
            "purchase_price",
            "rehab_budget",
            "arv",
            "borrower_fico",
            "borrower_experience",
        ]

    def test_blank_address(self, validator, sample_request):
        sample_request["address"] = "   "
        assert validator.validate(sample_request) == ["address: Address is required"]

    def test_unknown_transaction_type(self, validator, sample_request):
        sample_request["transaction_type"] = "Lease"
        errors = validator.validate(sample_request)
        assert len(errors) == 1
        assert errors[0].startswith("transaction_type:")

    def test_cash_out_refinance_accepted(self, validator, sample_request):
        sample_request["transaction_type"] = "Cash-Out Refinance"
        assert validator.validate(sample_request) == []

    def test_purchase_price_minimum(self, validator, sample_request):
        sample_request["purchase_price"] = 999
        assert validator.validate(sample_request) == ["purchase_price: Purchase price must be at least $1,000"]

    def test_negative_rehab(self, validator, sample_request):
        sample_request["rehab_budget"] = -1
        assert validator.validate(sample_request) == ["rehab_budget: Rehab budget cannot be negative"]

    def test_zero_rehab_accepted(self, validator, sample_request):
        sample_request["rehab_budget"] = 0
        assert validator.validate(sample_request) == []

    @pytest.mark.parametrize("fico", [299, 851])
    def test_fico_out_of_range(self, validator, sample_request, fico):
        sample_request["borrower_fico"] = fico
        assert validator.validate(sample_request) == ["borrower_fico: FICO score must be between 300-850"]

    def test_fractional_fico(self, validator, sample_request):
        sample_request["borrower_fico"] = 700.5
        errors = validator.validate(sample_request)
        assert errors == ["borrower_fico: must be a whole number, got: 700.5"]

    @pytest.mark.parametrize("value", ["abc", True, "NaN", [1]])
    def test_non_numeric(self, validator, sample_request, value):
        sample_request["arv"] = value
        errors = validator.validate(sample_request)
        assert len(errors) == 1
        assert errors[0].startswith("arv: must be a number")

    def test_numeric_strings_accepted(self, validator, sample_request):
        sample_request["purchase_price"] = "200000"
        assert validator.validate(sample_request) == []

    def test_unknown_experience(self, validator, sample_request):
        sample_request["borrower_experience"] = "Expert"
        errors = validator.validate(sample_request)
        assert len(errors) == 1
        assert errors[0].startswith("borrower_experience:")


class TestConfigValidator:
    """Test admin configuration bounds."""

    @pytest.fixture
    def validator(self):
        return ConfigValidator()

    def test_defaults_are_valid(self, validator):
        assert validator.validate_rate_table(RateTable()) == []
        assert validator.validate_rules(ValidationRules()) == []

    def test_ltv_above_90(self, validator):
        errors = validator.validate_rate_table(RateTable(ltv_professional=Decimal("95")))
        assert errors == ["ltv_professional must be between 50 and 90, got: 95"]

    def test_ltv_below_50(self, validator):
        errors = validator.validate_rate_table(RateTable(ltv_beginner=Decimal("45")))
        assert len(errors) == 1

    def test_base_rate_above_20(self, validator):
        errors = validator.validate_rate_table(RateTable(base_interest_rate=Decimal("21")))
        assert errors == ["base_interest_rate must be between 0 and 20, got: 21"]

    def test_floor_above_base(self, validator):
        table = RateTable(base_interest_rate=Decimal("5"), min_interest_rate=Decimal("6"))
        errors = validator.validate_rate_table(table)
        assert errors == ["min_interest_rate (6) cannot exceed base_interest_rate (5)"]

    def test_floor_equal_to_base(self, validator):
        table = RateTable(base_interest_rate=Decimal("6"), min_interest_rate=Decimal("6"))
        assert validator.validate_rate_table(table) == []

    def test_multiple_errors_collected(self, validator):
        table = RateTable(fico_discount_750=Decimal("6"), closing_costs_percentage=Decimal("11"))
        assert len(validator.validate_rate_table(table)) == 2

    def test_min_fico_bounds(self, validator):
        assert len(validator.validate_rules(ValidationRules(min_fico=299))) == 1
        assert len(validator.validate_rules(ValidationRules(min_fico=851))) == 1

    def test_arv_ratio_bounds(self, validator):
        errors = validator.validate_rules(ValidationRules(min_arv_to_purchase_ratio=Decimal("0.9")))
        assert errors == ["min_arv_to_purchase_ratio must be between 1 and 3, got: 0.9"]

    def test_rehab_percentage_bounds(self, validator):
        errors = validator.validate_rules(ValidationRules(max_rehab_budget_percentage=Decimal("101")))
        assert len(errors) == 1
