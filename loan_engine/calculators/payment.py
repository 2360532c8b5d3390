"""
Payment Calculator

Fixed-rate, fully amortizing monthly payment over a 30 year term.
"""

from decimal import Decimal

from ..models import ProcessingContext


class PaymentCalculator:
    """Calculates the monthly principal and interest payment."""

    TERM_MONTHS = 360

    def calculate(self, ctx: ProcessingContext) -> Decimal:
        return self.monthly_payment(ctx.max_loan_amount, ctx.interest_rate)

    def monthly_payment(self, principal: Decimal, annual_rate: Decimal) -> Decimal:
        """
        payment = P * r / (1 - (1 + r) ** -n), with r the monthly rate.

        The formula divides by zero at 0%, so a zero rate repays principal
        in equal installments instead.
        """
        if annual_rate == 0:
            return principal / self.TERM_MONTHS

        monthly_rate = annual_rate / Decimal("100") / Decimal("12")
        return (principal * monthly_rate) / (1 - (1 + monthly_rate) ** -self.TERM_MONTHS)
