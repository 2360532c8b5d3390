"""
Calculators Package

Provides all calculation components for loan term computation.
"""

from .approval import ApprovalEvaluator
from .fees import FeeCalculator
from .loan import LoanSizeCalculator
from .payment import PaymentCalculator
from .rate import InterestRateCalculator

__all__ = [
    "LoanSizeCalculator",
    "InterestRateCalculator",
    "FeeCalculator",
    "PaymentCalculator",
    "ApprovalEvaluator",
]
