"""Derived account balances.

No running balance is ever stored. An account's balance is recomputed on
every read as::

    opening_balance + income - expense - payments

Every payment creates a linked EXPENSE transaction (``payment_id`` set). That
transaction is left out of the expense term, so each payment reduces the
balance exactly once, through the payment term.
"""

from decimal import Decimal
from typing import Iterable

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import (
    Account,
    AccountBalance,
    BalanceBreakdown,
    Payment,
    Transaction,
    TransactionKind,
)
from pocketledger.utils.money import sum_money, to_money


def balance_breakdown(
    account: Account,
    transactions: Iterable[Transaction],
    payments: Iterable[Payment],
) -> BalanceBreakdown:
    """Compute the components of an account's balance.

    ``transactions`` and ``payments`` may span every account of the user;
    only rows drawn on ``account`` are counted.
    """
    income: list[Decimal] = []
    expense: list[Decimal] = []
    for txn in transactions:
        if txn.account_id != account.id:
            continue
        if txn.kind == TransactionKind.INCOME:
            income.append(txn.amount)
        elif txn.payment_id is None:
            expense.append(txn.amount)

    total_income = sum_money(income)
    total_expense = sum_money(expense)
    total_payments = sum_money(p.amount for p in payments if p.account_id == account.id)
    return BalanceBreakdown(
        account_id=account.id,
        opening_balance=account.opening_balance,
        total_income=total_income,
        total_expense=total_expense,
        total_payments=total_payments,
        current_balance=to_money(
            account.opening_balance + total_income - total_expense - total_payments
        ),
    )


def compute_balance(
    account: Account,
    transactions: Iterable[Transaction],
    payments: Iterable[Payment],
) -> Decimal:
    """Compute an account's current balance."""
    return balance_breakdown(account, transactions, payments).current_balance


class BalanceService:
    """Read-side service computing balances from a snapshot of the store."""

    def __init__(self, db: Database):
        self.db = db

    def get_breakdown(self, user_id: int, account_id: int) -> BalanceBreakdown:
        """Get the balance breakdown of one account.

        Raises:
            NotFoundError: If the account does not exist for this user
        """
        account = self.db.get_account(user_id, account_id)
        if account is None:
            raise errors.NotFoundError(errors.account_not_found(account_id))
        transactions = self.db.list_transactions(user_id, account_id=account_id)
        payments = self.db.list_payments(user_id, account_id=account_id)
        return balance_breakdown(account, transactions, payments)

    def get_balance(self, user_id: int, account_id: int) -> Decimal:
        return self.get_breakdown(user_id, account_id).current_balance

    def list_balances(self, user_id: int, include_inactive: bool = False) -> list[AccountBalance]:
        """Compute the balance of every account from one read of the ledger."""
        accounts = self.db.list_accounts(user_id, include_inactive=include_inactive)
        transactions = self.db.list_transactions(user_id)
        payments = self.db.list_payments(user_id)
        return [
            AccountBalance(account=account, balance=compute_balance(account, transactions, payments))
            for account in accounts
        ]

    def total_balance(self, user_id: int) -> Decimal:
        """Sum of the balances of all active accounts."""
        return sum_money(item.balance for item in self.list_balances(user_id))
