"""
Approval Evaluator

Approval status is driven by the same min_fico threshold the rule validator
uses, so the two can never disagree.
"""

from ..models import APPROVED, PENDING_REVIEW, ProcessingContext


class ApprovalEvaluator:
    """Assigns Approved / Pending Review."""

    def evaluate(self, ctx: ProcessingContext) -> str:
        if ctx.deal.borrower_fico >= ctx.rules.min_fico:
            return APPROVED
        return PENDING_REVIEW
