"""
Fee Calculators for the Loan Sizer Engine

Closing costs and origination fee are both a percentage of the maximum loan.
All use Decimal; rounding is left to the final terms builder.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import ProcessingContext

HUNDRED = Decimal("100")


def quantize_money(value: Decimal) -> Decimal:
    """Round to whole currency units using ROUND_HALF_UP."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def quantize_rate(value: Decimal) -> Decimal:
    """Round a percentage to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    return amount * percentage / HUNDRED


class FeeCalculator:
    """Calculates closing costs and origination fee for a sized loan."""

    def calculate(self, ctx: ProcessingContext) -> tuple[Decimal, Decimal]:
        """Return (closing_costs, origination_fee), unrounded."""
        rates = ctx.rates
        return (
            self._calculate_closing_costs(ctx.max_loan_amount, rates.closing_costs_percentage),
            self._calculate_origination_fee(ctx.max_loan_amount, rates.origination_fee_percentage),
        )

    def _calculate_closing_costs(self, loan_amount: Decimal, percentage: Decimal) -> Decimal:
        """Calculate third-party closing costs (3% by default)."""
        return percent_of(loan_amount, percentage)

    def _calculate_origination_fee(self, loan_amount: Decimal, percentage: Decimal) -> Decimal:
        """Calculate lender origination fee (1% by default)."""
        return percent_of(loan_amount, percentage)
