"""
Output Builder

Constructs the API response from a sizing result.
"""

from decimal import Decimal

from .models import DealInput, LoanTerms, SizingResult


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def _fmt(value) -> str:
    """Format a number as a whole-unit currency string for descriptions."""
    if value < 0:
        return f"-${-value:,.0f}"
    return f"${value:,.0f}"


def _pct(value) -> str:
    return f"{float(value):g}%"


class OutputBuilder:
    """Builds the response dict for a SizingResult."""

    def build(self, result: SizingResult) -> dict:
        output = {
            "status": result.status,
            "errors": list(result.errors),
        }
        if result.deal is not None:
            output["deal_summary"] = self.build_deal_summary(result.deal)
        if result.terms is not None:
            output["loan_terms"] = self.build_loan_terms(result.deal, result.terms)
        return output

    def build_deal_summary(self, deal: DealInput) -> dict:
        """Build deal summary section."""
        return {
            "address": deal.address,
            "transaction_type": deal.transaction_type,
            "purchase_price": to_money(deal.purchase_price),
            "rehab_budget": to_money(deal.rehab_budget),
            "arv": to_money(deal.arv),
            "borrower_fico": deal.borrower_fico,
            "borrower_experience": deal.borrower_experience,
        }

    def build_loan_terms(self, deal: DealInput, terms: LoanTerms) -> dict:
        """Build loan terms section with value and description for each field."""
        arv = deal.arv
        purchase = deal.purchase_price
        rehab = deal.rehab_budget

        return {
            "ltv": {
                "value": float(terms.ltv),
                "description": f"LTV for a {deal.borrower_experience} borrower"
            },
            "max_loan_amount": {
                "value": to_money(terms.max_loan_amount),
                "description": f"{_pct(terms.ltv)} × ARV ({_fmt(arv)}) = {_fmt(terms.max_loan_amount)}"
            },
            "interest_rate": {
                "value": float(terms.interest_rate),
                "description": f"Rate for FICO {deal.borrower_fico} and {deal.borrower_experience} experience"
            },
            "closing_costs": {
                "value": to_money(terms.closing_costs),
                "description": "Third-party closing costs as a percentage of the loan amount"
            },
            "origination_fee": {
                "value": to_money(terms.origination_fee),
                "description": "Lender origination fee as a percentage of the loan amount"
            },
            "total_closing_costs": {
                "value": to_money(terms.total_closing_costs),
                "description": f"origination_fee ({_fmt(terms.origination_fee)}) + closing_costs ({_fmt(terms.closing_costs)}) = {_fmt(terms.total_closing_costs)}"
            },
            "total_project_cost": {
                "value": to_money(terms.total_project_cost),
                "description": f"purchase_price ({_fmt(purchase)}) + rehab_budget ({_fmt(rehab)}) = {_fmt(terms.total_project_cost)}"
            },
            "down_payment": {
                "value": to_money(terms.down_payment),
                "description": (
                    f"total_project_cost ({_fmt(terms.total_project_cost)}) - max_loan_amount ({_fmt(terms.max_loan_amount)}) = {_fmt(terms.down_payment)}"
                    + (". Loan exceeds total project cost" if terms.down_payment < 0 else "")
                )
            },
            "monthly_payment": {
                "value": to_money(terms.monthly_payment),
                "description": f"{_fmt(terms.max_loan_amount)} at {_pct(terms.interest_rate)} amortized over 360 months"
            },
            "approval_status": {
                "value": terms.approval_status,
                "description": "FICO meets the minimum for approval" if terms.is_approved else "FICO below the approval minimum; manual review required"
            },
        }
