"""
Interest Rate Calculator

Prices the loan from the base rate using two independent discount tables:
- FICO tiers: the single highest tier the borrower qualifies for applies
- Experience tiers: Professional and Experienced only
The result never goes below the configured floor.
"""

from decimal import Decimal

from ..models import ProcessingContext, RateTable


class InterestRateCalculator:
    """Calculates the note rate (in percent) for a deal."""

    def calculate(self, ctx: ProcessingContext) -> Decimal:
        rates = ctx.rates
        deal = ctx.deal

        rate = rates.base_interest_rate
        rate -= self.fico_discount(rates, deal.borrower_fico)
        rate -= self.experience_discount(rates, deal.borrower_experience)

        return max(rate, rates.min_interest_rate)

    @staticmethod
    def fico_discount(rates: RateTable, fico: int) -> Decimal:
        """
        Walk the (threshold, discount) table from the highest threshold down.

        Tiers are not cumulative: a 760 borrower gets the 750+ discount only.
        """
        for threshold, discount in rates.fico_discounts:
            if fico >= threshold:
                return discount
        return Decimal("0")

    @staticmethod
    def experience_discount(rates: RateTable, experience: str) -> Decimal:
        return rates.experience_discounts.get(experience, Decimal("0"))
