"""
Loan Size Calculator

Looks up the LTV for the borrower's experience tier and sizes the loan against ARV.
"""

from decimal import Decimal

from ..models import BEGINNER, ProcessingContext, RateTable
from .fees import percent_of


class LoanSizeCalculator:
    """Sizes the maximum loan from ARV and the experience-tier LTV."""

    def calculate(self, ctx: ProcessingContext) -> tuple[Decimal, Decimal]:
        """Return (ltv, max_loan_amount)."""
        ltv = self.lookup_ltv(ctx.rates, ctx.deal.borrower_experience)
        return ltv, percent_of(ctx.deal.arv, ltv)

    @staticmethod
    def lookup_ltv(rates: RateTable, experience: str) -> Decimal:
        """
        Exact tier match. Unrecognized tiers fall back to the Beginner LTV.
        """
        table = rates.ltv_by_experience
        return table.get(experience, table[BEGINNER])
