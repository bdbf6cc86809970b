# tests/conftest.py
"""
Pytest fixtures for Ledgerline tests.

Ledger-owned rows (fiscal periods, entries, sequences) are created through
accounting.commands; the write barrier rejects direct saves, tests included.
Accounts and companies are plain reference data and are created directly.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.models import Company, LegalEntity
from accounting.commands import create_fiscal_period
from accounting.models import Account


User = get_user_model()


# =============================================================================
# Company & User Fixtures
# =============================================================================

@pytest.fixture
def company(db):
    """Create a test company."""
    return Company.objects.create(
        public_id=uuid4(),
        name="Test Company",
        slug="test-company",
        default_currency="RSD",
        fiscal_year_start_month=1,
        is_active=True,
    )


@pytest.fixture
def second_company(db):
    """Create a second test company for multi-tenant tests."""
    return Company.objects.create(
        public_id=uuid4(),
        name="Second Company",
        slug="second-company",
        is_active=True,
    )


@pytest.fixture
def legal_entity(db, company):
    return LegalEntity.objects.create(
        company=company,
        name="Test Company Beograd",
        tax_id="100000001",
    )


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="bookkeeper",
        email="bookkeeper@test.com",
        password="testpass123",
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


# =============================================================================
# Account Fixtures
# =============================================================================

def _account(company, code, name, status=Account.Status.ACTIVE):
    return Account.objects.create(
        public_id=uuid4(),
        company=company,
        code=code,
        name=name,
        status=status,
    )


@pytest.fixture
def cash_account(db, company):
    return _account(company, "1000", "Cash")


@pytest.fixture
def revenue_account(db, company):
    return _account(company, "4000", "Revenue")


@pytest.fixture
def expense_account(db, company):
    return _account(company, "5000", "Expenses")


@pytest.fixture
def inactive_account(db, company):
    """Account that exists but may not be posted to."""
    return _account(company, "1999", "Retired cash", status=Account.Status.INACTIVE)


@pytest.fixture
def accounts(cash_account, revenue_account, expense_account):
    return {"cash": cash_account, "revenue": revenue_account, "expense": expense_account}


# =============================================================================
# Fiscal Period Fixtures
# =============================================================================

@pytest.fixture
def january_period(db, company):
    """Open period covering January 2026."""
    result = create_fiscal_period(company, "2026/01", date(2026, 1, 1), date(2026, 1, 31))
    assert result.success, result.error
    return result.data


@pytest.fixture
def february_period(db, company):
    result = create_fiscal_period(company, "2026/02", date(2026, 2, 1), date(2026, 2, 28))
    assert result.success, result.error
    return result.data


# =============================================================================
# Posting helpers
# =============================================================================

@pytest.fixture
def sale_lines():
    """Balanced two-line cash sale of 1,200.00."""
    return [
        {"account_code": "1000", "debit": Decimal("1200.00"), "credit": Decimal("0"), "description": "Cash in"},
        {"account_code": "4000", "debit": Decimal("0"), "credit": Decimal("1200.00"), "description": "Sales"},
    ]
