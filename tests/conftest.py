"""
Shared fixtures for the payment instruction tests.
"""
from datetime import date

import pytest

from core.schema import Account
from services.payment_service import PaymentInstructionService

REFERENCE_DATE = date(2025, 6, 15)


@pytest.fixture
def reference_date():
    """Fixed 'today' so date classification is deterministic."""
    return REFERENCE_DATE


@pytest.fixture
def service():
    return PaymentInstructionService()


@pytest.fixture
def usd_accounts():
    """Two USD accounts plus an unrelated one."""
    return [
        Account(id="a", balance=230, currency="USD"),
        Account(id="x", balance=50, currency="NGN"),
        Account(id="b", balance=300, currency="usd"),
    ]
