"""Shared fixtures for loan sizer tests."""

from decimal import Decimal

import pytest

from loan_engine import default_store
from loan_engine.models import DealInput


def _make_deal(
    purchase_price=200000,
    rehab_budget=50000,
    arv=300000,
    fico=760,
    experience="Professional",
    transaction_type="Purchase",
    address="123 Main St",
) -> DealInput:
    """Helper to create a DealInput with sensible defaults."""
    return DealInput(
        address=address,
        transaction_type=transaction_type,
        purchase_price=Decimal(str(purchase_price)),
        rehab_budget=Decimal(str(rehab_budget)),
        arv=Decimal(str(arv)),
        borrower_fico=fico,
        borrower_experience=experience,
    )


@pytest.fixture
def make_deal():
    """Factory for DealInput objects; override only what a test cares about."""
    return _make_deal


@pytest.fixture
def sample_request():
    """Raw request body for the standard Professional / 760 FICO scenario."""
    return {
        "address": "123 Main St",
        "transaction_type": "Purchase",
        "purchase_price": 200000,
        "rehab_budget": 50000,
        "arv": 300000,
        "borrower_fico": 760,
        "borrower_experience": "Professional",
    }


@pytest.fixture(autouse=True)
def reset_default_store():
    """Entry points share the process-wide store; start every test from defaults."""
    default_store.reset()
    yield
    default_store.reset()
