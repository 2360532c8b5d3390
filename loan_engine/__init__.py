"""
LOAN SIZER ENGINE
Loan terms, approval rules and term sheets for fix-and-flip deals
"""

from .config import ConfigStore, ConfigurationError, default_store
from .models import DealInput, LoanTerms, RateTable, SizingResult, ValidationRules
from .notifications import dispatch_notification
from .processor import LoanSizer, compute_terms
from .term_sheet import produce_document
from .validators import validate

__all__ = [
    'LoanSizer',
    'DealInput',
    'LoanTerms',
    'RateTable',
    'ValidationRules',
    'SizingResult',
    'ConfigStore',
    'ConfigurationError',
    'default_store',
    'compute_terms',
    'validate',
    'produce_document',
    'dispatch_notification',
]
