"""Shared pytest fixtures for pocketledger tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from pocketledger.database.factories import create_sqlite_database
from pocketledger.domain.account import AccountService
from pocketledger.domain.balance import BalanceService
from pocketledger.domain.bill import BillService
from pocketledger.domain.budget import BudgetService
from pocketledger.domain.category import CategoryService
from pocketledger.domain.dashboard import DashboardService
from pocketledger.domain.entities import BillKind, CategoryKind
from pocketledger.domain.payment import PaymentService
from pocketledger.domain.transaction import TransactionService
from pocketledger.domain.user import UserService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_service(temp_db):
    return UserService(temp_db)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db)


@pytest.fixture
def bill_service(temp_db):
    return BillService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    return PaymentService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    return BalanceService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    return BudgetService(temp_db)


@pytest.fixture
def dashboard_service(temp_db):
    return DashboardService(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Create the acting user."""
    user_id = user_service.create_user(name="Ana Souza", email="ana@example.com")
    return user_service.get_user(user_id)


@pytest.fixture
def other_user(user_service):
    """Create a second user to check ownership boundaries."""
    user_id = user_service.create_user(name="Bruno Lima", email="bruno@example.com")
    return user_service.get_user(user_id)


@pytest.fixture
def sample_account(account_service, sample_user):
    """Create a checking account with an opening balance of 500.00."""
    account_id = account_service.create_account(
        sample_user.id, name="Checking", opening_balance=Decimal("500.00")
    )
    return account_service.get_account(sample_user.id, account_id)


@pytest.fixture
def sample_category(category_service, sample_user):
    """Create an expense category."""
    category_id = category_service.create_category(sample_user.id, name="Food", kind=CategoryKind.EXPENSE)
    return category_service.get_category(sample_user.id, category_id)


@pytest.fixture
def laptop_bill(bill_service, sample_user):
    """A 1000.00 bill split into three monthly installments from 2024-01-10."""
    bill_id = bill_service.create_bill(
        sample_user.id,
        description="Laptop",
        total_amount=Decimal("1000.00"),
        kind=BillKind.INSTALLMENT,
        installment_count=3,
        first_due_date=date(2024, 1, 10),
    )
    return bill_service.get_bill(sample_user.id, bill_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
