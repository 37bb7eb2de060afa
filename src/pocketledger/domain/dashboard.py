"""Monthly dashboard snapshot."""

from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain.balance import compute_balance
from pocketledger.domain.budget import evaluate_budgets
from pocketledger.domain.entities import (
    AccountBalance,
    Bill,
    BillsDue,
    BillStatus,
    BudgetOverview,
    CategorySpending,
    DashboardSnapshot,
    Installment,
    InstallmentDue,
    MonthTotals,
    TransactionKind,
)
from pocketledger.utils.date_parser import month_window, resolve_month
from pocketledger.utils.money import ZERO, percentage_of, sum_money, to_money

UPCOMING_LIMIT = 10
OVERDUE_LIMIT = 5
TOP_CATEGORIES_LIMIT = 5


def _due_item(installment: Installment, bill: Bill) -> InstallmentDue:
    return InstallmentDue(
        installment_id=installment.id,
        bill_id=bill.id,
        description=bill.description,
        number=installment.number,
        remaining=installment.remaining,
        due_date=installment.due_date,
        do_not_count=bill.do_not_count,
    )


class DashboardService:
    """Composes balances, bills and budgets into one read-only snapshot."""

    def __init__(self, db: Database):
        self.db = db

    def build_snapshot(
        self, user_id: int, month: Optional[int] = None, year: Optional[int] = None
    ) -> DashboardSnapshot:
        """Build the dashboard for a month (the current one by default)."""
        month, year = resolve_month(month, year)
        window = month_window(month, year)

        # Balances of active accounts
        all_transactions = self.db.list_transactions(user_id, newest_first=False)
        payments = self.db.list_payments(user_id)
        balances = [
            AccountBalance(account=acc, balance=compute_balance(acc, all_transactions, payments))
            for acc in self.db.list_accounts(user_id)
        ]

        # Month totals
        month_transactions = [t for t in all_transactions if window.contains(t.date)]
        income = sum_money(t.amount for t in month_transactions if t.kind == TransactionKind.INCOME)
        expense = sum_money(t.amount for t in month_transactions if t.kind == TransactionKind.EXPENSE)

        # Installments
        bills = {bill.id: bill for bill in self.db.list_bills(user_id)}
        due_in_month = self.db.list_unpaid_installments(
            user_id, due_from=window.first_day, due_to=window.last_day
        )
        overdue = self.db.list_unpaid_installments(user_id, due_before=window.first_day)
        open_due = [i for i in due_in_month if bills[i.bill_id].status == BillStatus.OPEN]
        bills_due = BillsDue(
            total_open=sum_money(
                i.remaining for i in open_due if not bills[i.bill_id].do_not_count
            ),
            count=len(open_due),
        )

        # Budgets
        budgets = self.db.list_budgets(user_id, month, year)
        _, statuses = evaluate_budgets(budgets, month_transactions, window)
        total_budgeted = sum_money(s.limit_amount for s in statuses)

        return DashboardSnapshot(
            month=month,
            year=year,
            total_balance=sum_money(b.balance for b in balances),
            accounts=tuple(balances),
            month_totals=MonthTotals(income=income, expense=expense, net=income - expense),
            bills_due=bills_due,
            upcoming=tuple(_due_item(i, bills[i.bill_id]) for i in due_in_month[:UPCOMING_LIMIT]),
            overdue=tuple(_due_item(i, bills[i.bill_id]) for i in overdue[:OVERDUE_LIMIT]),
            budget=BudgetOverview(
                total_budgeted=total_budgeted,
                total_spent=expense,
                percent=percentage_of(expense, total_budgeted),
            ),
            top_categories=tuple(self._top_categories(user_id, month_transactions)),
        )

    def _top_categories(self, user_id: int, month_transactions) -> list[CategorySpending]:
        """Largest expense categories of the month; ties keep first-seen order."""
        categories = {c.id: c for c in self.db.list_categories(user_id, include_inactive=True)}
        totals: dict[int, CategorySpending] = {}
        for txn in month_transactions:
            if txn.kind != TransactionKind.EXPENSE or txn.category_id not in categories:
                continue
            current = totals.get(txn.category_id)
            category = categories[txn.category_id]
            totals[txn.category_id] = CategorySpending(
                category_id=category.id,
                name=category.name,
                color=category.color,
                amount=to_money((current.amount if current else ZERO) + txn.amount),
            )
        ranked = sorted(totals.values(), key=lambda c: c.amount, reverse=True)
        return ranked[:TOP_CATEGORIES_LIMIT]
