"""Tests for monthly budgets."""

import pytest
from datetime import date
from decimal import Decimal

from pocketledger.domain.entities import BudgetLimitKind, TransactionKind
from pocketledger.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def leisure(category_service, sample_user):
    return category_service.create_category(sample_user.id, "Leisure")


def _income(transaction_service, user, account, amount, day=date(2024, 3, 5)):
    transaction_service.create_transaction(user.id, account.id, TransactionKind.INCOME, amount, "Salary", day)


def _expense(transaction_service, user, account, amount, category_id, day=date(2024, 3, 10)):
    transaction_service.create_transaction(
        user.id, account.id, TransactionKind.EXPENSE, amount, "Spend", day, category_id
    )


def test_fixed_budget_status(budget_service, transaction_service, sample_user, sample_account, sample_category):
    budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, fixed_amount="800")
    _expense(transaction_service, sample_user, sample_account, "200.00", sample_category.id)
    _expense(transaction_service, sample_user, sample_account, "99.00", sample_category.id, date(2024, 4, 1))

    report = budget_service.evaluate(sample_user.id, 3, 2024)

    (status,) = report.statuses
    assert status.category_name == "Food"
    assert status.limit_kind == BudgetLimitKind.FIXED
    assert status.limit_amount == Decimal("800.00")
    assert status.spent == Decimal("200.00")
    assert status.available == Decimal("600.00")
    assert status.percent_used == Decimal("25.00")


def test_percentage_budget_follows_income(
    budget_service, transaction_service, sample_user, sample_account, leisure
):
    budget_service.set_budget(sample_user.id, leisure, 3, 2024, percentage="10")
    _income(transaction_service, sample_user, sample_account, "3000.00")

    first = budget_service.evaluate(sample_user.id, 3, 2024).statuses[0]
    assert first.limit_kind == BudgetLimitKind.PERCENTAGE
    assert first.limit_amount == Decimal("300.00")

    _income(transaction_service, sample_user, sample_account, "1000.00", date(2024, 3, 20))

    second = budget_service.evaluate(sample_user.id, 3, 2024)
    assert second.total_income == Decimal("4000.00")
    assert second.statuses[0].limit_amount == Decimal("400.00")
    assert second.statuses[0].budget.percentage == Decimal("10.00")
    assert second.statuses[0].budget.fixed_amount is None


def test_percentage_budget_without_income(budget_service, sample_user, leisure):
    budget_service.set_budget(sample_user.id, leisure, 3, 2024, percentage="15")
    status = budget_service.evaluate(sample_user.id, 3, 2024).statuses[0]
    assert status.limit_amount == Decimal("0.00")
    assert status.percent_used == Decimal("0.00")


def test_spend_counts_exact_category_only(
    budget_service, category_service, transaction_service, sample_user, sample_account, sample_category
):
    groceries = category_service.create_category(sample_user.id, "Groceries", parent_id=sample_category.id)
    budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, fixed_amount="500")
    _expense(transaction_service, sample_user, sample_account, "120.00", groceries)

    assert budget_service.evaluate(sample_user.id, 3, 2024).statuses[0].spent == Decimal("0.00")


def test_set_budget_replaces_previous(budget_service, sample_user, sample_category):
    first = budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, fixed_amount="800")
    second = budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, percentage="20")

    assert first == second
    (budget,) = budget_service.list_budgets(sample_user.id, 3, 2024)
    assert budget.fixed_amount is None
    assert budget.percentage == Decimal("20.00")


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"fixed_amount": "10", "percentage": "10"},
        {"fixed_amount": "0"},
        {"percentage": "0"},
        {"percentage": "100.01"},
        {"percentage": "lots"},
    ],
)
def test_invalid_limits(budget_service, sample_user, sample_category, kwargs):
    with pytest.raises(ValidationError):
        budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, **kwargs)


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({}, "needs a fixed amount or a percentage"),
        ({"fixed_amount": "10", "percentage": "10"}, "not both"),
    ],
)
def test_limit_choice_messages(budget_service, sample_user, sample_category, kwargs, message):
    with pytest.raises(ValidationError, match=message):
        budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, **kwargs)


@pytest.mark.parametrize("month, year", [(0, 2024), (13, 2024), (1, 2019), (1, 2101)])
def test_invalid_period(budget_service, sample_user, sample_category, month, year):
    with pytest.raises(ValidationError):
        budget_service.set_budget(sample_user.id, sample_category.id, month, year, fixed_amount="10")


def test_full_percentage_is_allowed(budget_service, sample_user, sample_category):
    budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, percentage="100")


def test_unknown_category(budget_service, sample_user, other_user, sample_category):
    with pytest.raises(NotFoundError):
        budget_service.set_budget(other_user.id, sample_category.id, 3, 2024, fixed_amount="10")


def test_delete_budget(budget_service, sample_user, other_user, sample_category):
    budget_id = budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, fixed_amount="10")
    with pytest.raises(NotFoundError):
        budget_service.delete_budget(other_user.id, budget_id)
    budget_service.delete_budget(sample_user.id, budget_id)
    assert budget_service.list_budgets(sample_user.id, 3, 2024) == []


def test_summary_uses_effective_limits(
    budget_service, transaction_service, sample_user, sample_account, sample_category, leisure
):
    uncategorized_day = date(2024, 3, 12)
    budget_service.set_budget(sample_user.id, sample_category.id, 3, 2024, fixed_amount="500")
    budget_service.set_budget(sample_user.id, leisure, 3, 2024, percentage="10")
    _income(transaction_service, sample_user, sample_account, "2000.00")
    _expense(transaction_service, sample_user, sample_account, "150.00", sample_category.id)
    transaction_service.create_transaction(
        sample_user.id, sample_account.id, TransactionKind.EXPENSE, "50.00", "Misc", uncategorized_day
    )

    summary = budget_service.get_summary(sample_user.id, 3, 2024)

    assert summary.total_budgeted == Decimal("700.00")
    assert summary.total_spent == Decimal("200.00")
    assert summary.total_income == Decimal("2000.00")
    assert summary.balance == Decimal("1800.00")
    assert summary.available == Decimal("500.00")
    assert summary.percent_spent == Decimal("28.57")
