"""
Unit Tests for Loan Size, Fee, Payment and Approval calculators

Tests verify calculations against known expected values.
"""

from decimal import Decimal

import pytest

from loan_engine.calculators.approval import ApprovalEvaluator
from loan_engine.calculators.fees import FeeCalculator, percent_of, quantize_money, quantize_rate
from loan_engine.calculators.loan import LoanSizeCalculator
from loan_engine.calculators.payment import PaymentCalculator
from loan_engine.models import ProcessingContext, RateTable, ValidationRules


class TestQuantize:
    """Test the rounding utilities."""

    def test_money_rounds_down_below_half(self):
        assert quantize_money(Decimal("100.49")) == Decimal("100")

    def test_money_rounds_up_at_half(self):
        # ROUND_HALF_UP
        assert quantize_money(Decimal("100.5")) == Decimal("101")

    def test_money_negative_rounds_away_from_zero_at_half(self):
        assert quantize_money(Decimal("-5000.5")) == Decimal("-5001")

    def test_rate_two_places(self):
        assert quantize_rate(Decimal("7.125")) == Decimal("7.13")

    def test_percent_of(self):
        assert percent_of(Decimal("255000"), Decimal("3")) == Decimal("7650")


class TestLoanSize:
    """Test LTV lookup and max loan amount."""

    @pytest.fixture
    def calculator(self):
        return LoanSizeCalculator()

    @pytest.mark.parametrize("experience,expected", [
        ("Beginner", Decimal("70")),
        ("Intermediate", Decimal("75")),
        ("Experienced", Decimal("80")),
        ("Professional", Decimal("85")),
    ])
    def test_ltv_by_tier(self, experience, expected):
        assert LoanSizeCalculator.lookup_ltv(RateTable(), experience) == expected

    def test_unknown_tier_falls_back_to_beginner(self):
        rates = RateTable(ltv_beginner=Decimal("65"))
        assert LoanSizeCalculator.lookup_ltv(rates, "Expert") == Decimal("65")

    def test_max_loan_is_arv_times_ltv(self, calculator, make_deal):
        """$300,000 × 85% = $255,000"""
        ctx = _make_context(make_deal(arv=300000, experience="Professional"))
        ltv, max_loan = calculator.calculate(ctx)

        assert ltv == Decimal("85")
        assert max_loan == Decimal("255000")

    def test_max_loan_is_not_rounded(self, calculator, make_deal):
        """$100,005 × 70% = $70,003.50 exactly"""
        ctx = _make_context(make_deal(arv=100005, experience="Beginner"))
        _, max_loan = calculator.calculate(ctx)
        assert max_loan == Decimal("70003.5")


class TestFees:
    """Test closing costs and origination fee."""

    @pytest.fixture
    def calculator(self):
        return FeeCalculator()

    def test_default_fees(self, calculator, make_deal):
        """3% and 1% of $255,000"""
        ctx = _make_context(make_deal())
        ctx.max_loan_amount = Decimal("255000")

        closing, origination = calculator.calculate(ctx)

        assert closing == Decimal("7650")
        assert origination == Decimal("2550")

    def test_configured_percentages(self, calculator, make_deal):
        rates = RateTable(closing_costs_percentage=Decimal("2.5"), origination_fee_percentage=Decimal("2"))
        ctx = _make_context(make_deal(), rates)
        ctx.max_loan_amount = Decimal("100000")

        closing, origination = calculator.calculate(ctx)

        assert closing == Decimal("2500")
        assert origination == Decimal("2000")

    def test_zero_percent_fee(self, calculator, make_deal):
        rates = RateTable(origination_fee_percentage=Decimal("0"))
        ctx = _make_context(make_deal(), rates)
        ctx.max_loan_amount = Decimal("100000")

        _, origination = calculator.calculate(ctx)
        assert origination == Decimal("0")


class TestMonthlyPayment:
    """Test the amortization formula."""

    @pytest.fixture
    def calculator(self):
        return PaymentCalculator()

    def test_term_is_360_months(self, calculator):
        assert calculator.TERM_MONTHS == 360

    def test_255k_at_6_5_percent(self, calculator):
        """Standard 30-year payment: ~$1,611.77"""
        payment = calculator.monthly_payment(Decimal("255000"), Decimal("6.5"))
        assert quantize_money(payment) == Decimal("1612")

    def test_210k_at_8_percent(self, calculator):
        """Standard 30-year payment: ~$1,540.91"""
        payment = calculator.monthly_payment(Decimal("210000"), Decimal("8.0"))
        assert quantize_money(payment) == Decimal("1541")

    def test_zero_rate_uses_straight_line(self, calculator):
        """0% cannot use the formula; principal / 360."""
        payment = calculator.monthly_payment(Decimal("360000"), Decimal("0"))
        assert payment == Decimal("1000")

    def test_zero_rate_is_finite(self, calculator):
        payment = calculator.monthly_payment(Decimal("255000"), Decimal("0.00"))
        assert payment.is_finite()
        assert quantize_money(payment) == Decimal("708")

    def test_payment_exceeds_interest_only(self, calculator):
        """Amortizing payment is always more than interest alone."""
        principal = Decimal("100000")
        payment = calculator.monthly_payment(principal, Decimal("7.5"))
        interest_only = principal * Decimal("0.075") / 12
        assert payment > interest_only


class TestApproval:
    """Test approval status."""

    @pytest.fixture
    def evaluator(self):
        return ApprovalEvaluator()

    def test_at_threshold_is_approved(self, evaluator, make_deal):
        ctx = _make_context(make_deal(fico=650))
        assert evaluator.evaluate(ctx) == "Approved"

    def test_below_threshold_is_pending(self, evaluator, make_deal):
        ctx = _make_context(make_deal(fico=649))
        assert evaluator.evaluate(ctx) == "Pending Review"

    def test_uses_configured_threshold(self, evaluator, make_deal):
        ctx = _make_context(make_deal(fico=690), rules=ValidationRules(min_fico=700))
        assert evaluator.evaluate(ctx) == "Pending Review"


def _make_context(deal, rates: RateTable = None, rules: ValidationRules = None) -> ProcessingContext:
    """Helper to create a minimal ProcessingContext."""
    return ProcessingContext(deal=deal, rates=rates or RateTable(), rules=rules or ValidationRules())
