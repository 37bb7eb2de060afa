"""Monthly category budgets."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import (
    Budget,
    BudgetReport,
    BudgetStatus,
    BudgetSummary,
    Category,
    Transaction,
    TransactionKind,
)
from pocketledger.utils.date_parser import MonthWindow, month_window
from pocketledger.utils.money import (
    ZERO,
    apply_percentage,
    percentage_of,
    sum_money,
    to_money,
)

logger = logging.getLogger(__name__)

MIN_YEAR = 2020
MAX_YEAR = 2100


def period_income(transactions: Iterable[Transaction], window: MonthWindow) -> Decimal:
    """Total income of the transactions falling inside the window."""
    return sum_money(
        t.amount for t in transactions if t.kind == TransactionKind.INCOME and window.contains(t.date)
    )


def effective_limit(budget: Budget, total_income: Decimal) -> Decimal:
    """Resolve a budget's limit for a period.

    Percentage budgets are never materialized; their limit follows the
    period's income every time it is evaluated.
    """
    if budget.percentage is not None:
        return apply_percentage(budget.percentage, total_income)
    return budget.fixed_amount if budget.fixed_amount is not None else ZERO


def evaluate_budgets(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    window: MonthWindow,
    category_names: Optional[dict[int, str]] = None,
) -> tuple[Decimal, list[BudgetStatus]]:
    """Compute spend against each budget's effective limit.

    Only transactions dated inside ``window`` count. Spend is the sum of
    EXPENSE transactions with exactly the budget's category; the income
    base for percentage budgets is the sum of all INCOME transactions.

    Returns:
        Tuple of (total income of the period, statuses in budget order)
    """
    in_window = [t for t in transactions if window.contains(t.date)]
    total_income = period_income(in_window, window)

    spent_by_category: dict[int, Decimal] = {}
    for txn in in_window:
        if txn.kind == TransactionKind.EXPENSE and txn.category_id is not None:
            spent_by_category[txn.category_id] = spent_by_category.get(txn.category_id, ZERO) + txn.amount

    names = category_names or {}
    statuses = []
    for budget in budgets:
        limit = effective_limit(budget, total_income)
        spent = to_money(spent_by_category.get(budget.category_id, ZERO))
        statuses.append(
            BudgetStatus(
                budget=budget,
                category_name=names.get(budget.category_id, ""),
                limit_kind=budget.limit_kind,
                limit_amount=limit,
                spent=spent,
                available=limit - spent,
                percent_used=percentage_of(spent, limit),
            )
        )
    return total_income, statuses


def _validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise errors.ValidationError(f"Month must be between 1 and 12, got {month}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise errors.ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")


def _to_decimal(value, field: str) -> Decimal:
    try:
        return to_money(value)
    except (ValueError, InvalidOperation) as e:
        raise errors.ValidationError(f"Invalid {field}: {value!r}") from e


class BudgetService:
    """Service for setting and evaluating monthly budgets."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def set_budget(
        self,
        user_id: int,
        category_id: int,
        month: int,
        year: int,
        fixed_amount: Optional[Decimal | int | str] = None,
        percentage: Optional[Decimal | int | str] = None,
    ) -> int:
        """Create or replace the budget of a category for a month.

        Exactly one of ``fixed_amount`` and ``percentage`` must be given;
        setting one clears the other.

        Returns:
            Budget ID

        Raises:
            ValidationError: If the limit or the period is invalid
            NotFoundError: If category doesn't exist for this user
        """
        _validate_period(month, year)
        if fixed_amount is None and percentage is None:
            raise errors.ValidationError("A budget needs a fixed amount or a percentage")
        if fixed_amount is not None and percentage is not None:
            raise errors.ValidationError("Provide either a fixed amount or a percentage, not both")

        fixed = None
        pct = None
        if fixed_amount is not None:
            fixed = _to_decimal(fixed_amount, "fixed amount")
            if fixed <= 0:
                raise errors.ValidationError(errors.non_positive_amount("Fixed amount"))
        else:
            pct = _to_decimal(percentage, "percentage")
            if not Decimal("0") < pct <= Decimal("100"):
                raise errors.ValidationError(f"Percentage must be between 0 and 100, got {pct}")

        if self.db.get_category(user_id, category_id) is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))

        budget_id = self.db.upsert_budget(
            user_id=user_id,
            category_id=category_id,
            month=month,
            year=year,
            fixed_amount=fixed,
            percentage=pct,
        )
        logger.info("Budget %s set for category %s in %02d/%d", budget_id, category_id, month, year)
        return budget_id

    def list_budgets(self, user_id: int, month: int, year: int) -> list[Budget]:
        return self.db.list_budgets(user_id, month, year)

    def delete_budget(self, user_id: int, budget_id: int) -> None:
        """Delete a budget.

        Raises:
            NotFoundError: If budget doesn't exist for this user
        """
        if self.db.get_budget(user_id, budget_id) is None:
            raise errors.NotFoundError(errors.budget_not_found(budget_id))
        self.db.delete_budget(user_id, budget_id)

    def evaluate(self, user_id: int, month: int, year: int) -> BudgetReport:
        """Evaluate every budget of a month against that month's transactions."""
        _validate_period(month, year)
        window = month_window(month, year)
        budgets = self.db.list_budgets(user_id, month, year)
        transactions = self.db.list_transactions(user_id, start=window.start, end=window.end)
        categories: dict[int, Category] = {
            c.id: c for c in self.db.list_categories(user_id, include_inactive=True)
        }
        total_income, statuses = evaluate_budgets(
            budgets,
            transactions,
            window,
            category_names={cid: c.name for cid, c in categories.items()},
        )
        return BudgetReport(month=month, year=year, total_income=total_income, statuses=tuple(statuses))

    def get_summary(self, user_id: int, month: int, year: int) -> BudgetSummary:
        """Budget totals of a month, using effective limits."""
        report = self.evaluate(user_id, month, year)
        window = month_window(month, year)
        expenses = self.db.list_transactions(
            user_id, start=window.start, end=window.end, kind=TransactionKind.EXPENSE
        )
        total_spent = sum_money(t.amount for t in expenses)
        total_budgeted = sum_money(s.limit_amount for s in report.statuses)
        return BudgetSummary(
            month=month,
            year=year,
            total_budgeted=total_budgeted,
            total_spent=total_spent,
            total_income=report.total_income,
            balance=report.total_income - total_spent,
            percent_spent=percentage_of(total_spent, total_budgeted),
            available=total_budgeted - total_spent,
        )
