"""
Loan Sizer - Main Orchestrator

Coordinates the sizing pipeline through discrete, testable steps.
"""

import logging
from typing import Any, Dict

from .calculators import (
    ApprovalEvaluator,
    FeeCalculator,
    InterestRateCalculator,
    LoanSizeCalculator,
    PaymentCalculator,
)
from .calculators.fees import quantize_money, quantize_rate
from .config import ConfigStore, default_store
from .models import DealInput, LoanTerms, ProcessingContext, RateTable, SizingResult, ValidationRules
from .output import OutputBuilder
from .validators import InputValidator, RuleValidator

logger = logging.getLogger(__name__)

CALCULATED = "calculated"
INVALID_INPUT = "invalid_input"
VALIDATION_FAILED = "validation_failed"


class TermsCalculator:
    """
    The formula engine.

    Implements the term pipeline:
    1. LTV lookup + Max Loan Amount
    2. Interest Rate
    3. Closing Costs + Origination Fee
    4. Total Project Cost + Down Payment
    5. Monthly Payment
    6. Approval Status
    7. Round once, build LoanTerms

    Input is expected to be validated already; nothing here re-checks it.
    """

    def __init__(self):
        self.loan_size_calculator = LoanSizeCalculator()
        self.rate_calculator = InterestRateCalculator()
        self.fee_calculator = FeeCalculator()
        self.payment_calculator = PaymentCalculator()
        self.approval_evaluator = ApprovalEvaluator()

    def calculate(self, deal: DealInput, rates: RateTable, rules: ValidationRules) -> LoanTerms:
        ctx = ProcessingContext(deal=deal, rates=rates, rules=rules)

        # Step 1: LTV and loan size
        ctx.ltv, ctx.max_loan_amount = self.loan_size_calculator.calculate(ctx)

        # Step 2: Interest rate
        ctx.interest_rate = self.rate_calculator.calculate(ctx)

        # Step 3: Fees
        ctx.closing_costs, ctx.origination_fee = self.fee_calculator.calculate(ctx)

        # Step 4: Project cost and down payment (negative when the loan exceeds cost)
        ctx.total_project_cost = deal.purchase_price + deal.rehab_budget
        ctx.down_payment = ctx.total_project_cost - ctx.max_loan_amount

        # Step 5: Monthly payment
        ctx.monthly_payment = self.payment_calculator.calculate(ctx)

        # Step 6: Approval
        ctx.approval_status = self.approval_evaluator.evaluate(ctx)

        # Step 7: Round
        return self._build_terms(ctx)

    def _build_terms(self, ctx: ProcessingContext) -> LoanTerms:
        return LoanTerms(
            max_loan_amount=quantize_money(ctx.max_loan_amount),
            interest_rate=quantize_rate(ctx.interest_rate),
            ltv=ctx.ltv,
            down_payment=quantize_money(ctx.down_payment),
            closing_costs=quantize_money(ctx.closing_costs),
            origination_fee=quantize_money(ctx.origination_fee),
            monthly_payment=quantize_money(ctx.monthly_payment),
            total_project_cost=quantize_money(ctx.total_project_cost),
            approval_status=ctx.approval_status,
        )


class LoanSizer:
    """
    Main orchestrator for loan sizing requests.

    1. Check input shape
    2. Build DealInput
    3. Snapshot configuration
    4. Validate business rules
    5. Compute terms
    """

    def __init__(self, store: ConfigStore | None = None):
        self.store = store or default_store
        self.input_validator = InputValidator()
        self.rule_validator = RuleValidator()
        self.terms_calculator = TermsCalculator()
        self.output_builder = OutputBuilder()

    def process(self, deal: DealInput) -> SizingResult:
        """
        Size an already well-formed deal.

        Args:
            deal: DealInput that passed shape checks

        Returns:
            SizingResult with terms, or the business-rule violations
        """
        rates, rules = self.store.snapshot()

        violations = self.rule_validator.validate(deal, rules)
        if violations:
            logger.warning(f"Deal failed validation: {deal.address} ({len(violations)} violations)")
            return SizingResult(status=VALIDATION_FAILED, deal=deal, errors=violations)

        terms = self.terms_calculator.calculate(deal, rates, rules)
        return SizingResult(status=CALCULATED, deal=deal, terms=terms)

    def process_raw(self, data: Dict[str, Any]) -> SizingResult:
        """Size a deal from a raw request dict, reporting shape errors as a list."""
        errors = self.input_validator.validate(data)
        if errors:
            return SizingResult(status=INVALID_INPUT, errors=errors)
        return self.process(DealInput.from_dict(data))

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a deal from raw dictionary input.

        Convenience method for API usage.
        """
        return self.output_builder.build(self.process_raw(data))


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def compute_terms(deal: DealInput, rates: RateTable, rules: ValidationRules | None = None) -> LoanTerms:
    """
    Compute loan terms for a validated deal.

    `rules` supplies the approval threshold; defaults apply when omitted.
    """
    return TermsCalculator().calculate(deal, rates, rules or ValidationRules())


def process_deal_from_json(json_input: str) -> str:
    """Process a deal from a JSON string and return a JSON string."""
    import json

    try:
        data = json.loads(json_input)
    except json.JSONDecodeError as e:
        return json.dumps({"errors": [f"Invalid JSON: {e}"], "status": INVALID_INPUT}, indent=2)

    return json.dumps(LoanSizer().process_from_dict(data), indent=2)
