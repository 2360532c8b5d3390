"""
Validation for the Loan Sizer Engine

Three layers, each returning a list of messages instead of raising:
- InputValidator: field-level shape checks on the raw request
- RuleValidator: business rules (FICO, rehab budget, ARV ratio)
- ConfigValidator: admin bounds on RateTable / ValidationRules
"""

from decimal import Decimal, InvalidOperation

from .models import EXPERIENCE_LEVELS, TRANSACTION_TYPES, DealInput, RateTable, ValidationRules


def _number(value) -> Decimal | None:
    """Parse a numeric field, returning None for anything that is not a finite number."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _format_number(value: Decimal) -> str:
    """Render 50 as '50' and 1.25 as '1.25'."""
    return format(value.normalize(), "f")


class InputValidator:
    """Validates the shape of a raw deal request before a DealInput is built."""

    # field -> (snake key, camel key, minimum, maximum, message)
    NUMERIC_FIELDS = [
        ("purchase_price", "purchasePrice", Decimal("1000"), None,
         "Purchase price must be at least $1,000"),
        ("rehab_budget", "rehabBudget", Decimal("0"), None,
         "Rehab budget cannot be negative"),
        ("arv", "arv", Decimal("1000"), None,
         "ARV must be at least $1,000"),
        ("borrower_fico", "borrowerFico", Decimal("300"), Decimal("850"),
         "FICO score must be between 300-850"),
    ]

    def validate(self, data) -> list[str]:
        """Return field-level messages. An empty list means a DealInput can be built."""
        if not isinstance(data, dict):
            return ["Request body must be a JSON object"]

        errors = []

        address = data.get("address")
        if not isinstance(address, str) or not address.strip():
            errors.append("address: Address is required")

        transaction_type = self._get(data, "transaction_type", "transactionType")
        if transaction_type not in TRANSACTION_TYPES:
            errors.append(
                f"transaction_type: must be one of {', '.join(TRANSACTION_TYPES)}, got: {transaction_type}"
            )

        for snake, camel, minimum, maximum, message in self.NUMERIC_FIELDS:
            raw = self._get(data, snake, camel)
            if raw is None:
                errors.append(f"{snake}: is required")
                continue
            number = _number(raw)
            if number is None:
                errors.append(f"{snake}: must be a number, got: {raw!r}")
                continue
            if number < minimum or (maximum is not None and number > maximum):
                errors.append(f"{snake}: {message}")
            elif snake == "borrower_fico" and number != number.to_integral_value():
                errors.append(f"{snake}: must be a whole number, got: {raw}")

        experience = self._get(data, "borrower_experience", "borrowerExperience")
        if experience not in EXPERIENCE_LEVELS:
            errors.append(
                f"borrower_experience: must be one of {', '.join(EXPERIENCE_LEVELS)}, got: {experience}"
            )

        return errors

    @staticmethod
    def _get(data: dict, snake: str, camel: str):
        if snake in data:
            return data[snake]
        return data.get(camel)


class RuleValidator:
    """Evaluates approval rules. Every check runs; all violations are collected."""

    def validate(self, deal: DealInput, rules: ValidationRules) -> list[str]:
        violations = []
        violations.extend(self._check_fico(deal, rules))
        violations.extend(self._check_rehab_budget(deal, rules))
        violations.extend(self._check_arv_ratio(deal, rules))
        return violations

    def _check_fico(self, deal: DealInput, rules: ValidationRules) -> list[str]:
        if deal.borrower_fico < rules.min_fico:
            return [f"FICO score must be at least {rules.min_fico}"]
        return []

    def _check_rehab_budget(self, deal: DealInput, rules: ValidationRules) -> list[str]:
        max_rehab = deal.purchase_price * rules.max_rehab_budget_percentage / Decimal("100")
        if deal.rehab_budget > max_rehab:
            pct = _format_number(rules.max_rehab_budget_percentage)
            return [f"Rehab budget cannot exceed {pct}% of purchase price"]
        return []

    def _check_arv_ratio(self, deal: DealInput, rules: ValidationRules) -> list[str]:
        # Ratio is undefined here; report it instead of dividing.
        if deal.purchase_price <= 0:
            return ["Purchase price must be greater than zero"]

        if deal.arv / deal.purchase_price < rules.min_arv_to_purchase_ratio:
            pct = _format_number(rules.min_arv_to_purchase_ratio * Decimal("100"))
            return [f"ARV must be at least {pct}% of purchase price"]
        return []


class ConfigValidator:
    """Checks admin-supplied configuration against its documented bounds."""

    RATE_TABLE_BOUNDS = {
        "base_interest_rate": (Decimal("0"), Decimal("20")),
        "fico_discount_750": (Decimal("0"), Decimal("5")),
        "fico_discount_700": (Decimal("0"), Decimal("5")),
        "fico_discount_650": (Decimal("0"), Decimal("5")),
        "experience_discount_professional": (Decimal("0"), Decimal("2")),
        "experience_discount_experienced": (Decimal("0"), Decimal("2")),
        "min_interest_rate": (Decimal("0"), Decimal("10")),
        "ltv_beginner": (Decimal("50"), Decimal("90")),
        "ltv_intermediate": (Decimal("50"), Decimal("90")),
        "ltv_experienced": (Decimal("50"), Decimal("90")),
        "ltv_professional": (Decimal("50"), Decimal("90")),
        "closing_costs_percentage": (Decimal("0"), Decimal("10")),
        "origination_fee_percentage": (Decimal("0"), Decimal("5")),
    }

    VALIDATION_RULE_BOUNDS = {
        "min_fico": (Decimal("300"), Decimal("850")),
        "max_rehab_budget_percentage": (Decimal("0"), Decimal("100")),
        "min_arv_to_purchase_ratio": (Decimal("1"), Decimal("3")),
    }

    def validate_rate_table(self, table: RateTable) -> list[str]:
        errors = self._check_bounds(table, self.RATE_TABLE_BOUNDS)
        if table.min_interest_rate > table.base_interest_rate:
            errors.append(
                f"min_interest_rate ({table.min_interest_rate}) cannot exceed "
                f"base_interest_rate ({table.base_interest_rate})"
            )
        return errors

    def validate_rules(self, rules: ValidationRules) -> list[str]:
        return self._check_bounds(rules, self.VALIDATION_RULE_BOUNDS)

    @staticmethod
    def _check_bounds(config, bounds: dict) -> list[str]:
        errors = []
        for name, (low, high) in bounds.items():
            value = getattr(config, name)
            if not (low <= value <= high):
                errors.append(f"{name} must be between {low} and {high}, got: {value}")
        return errors


def validate(deal: DealInput, rules: ValidationRules) -> list[str]:
    """Return business-rule violations for a deal. Empty list means the deal passes."""
    return RuleValidator().validate(deal, rules)
