"""Domain model entities for pocketledger.

These are pure data classes representing business concepts, independent of
database schema. Balances and bill totals are never stored on them; they are
derived by the services from transactions, installments and payments.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountKind(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    WALLET = "WALLET"
    INVESTMENT = "INVESTMENT"


class CategoryKind(str, Enum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class TransactionKind(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class BillKind(str, Enum):
    INSTALLMENT = "INSTALLMENT"
    LUMP_SUM = "LUMP_SUM"


class BillStatus(str, Enum):
    OPEN = "OPEN"
    SETTLED = "SETTLED"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class BudgetLimitKind(str, Enum):
    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"


@dataclass(frozen=True)
class User:
    """Owner of every other entity."""

    id: int
    name: str
    email: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Account domain entity. The balance is derived, never stored."""

    id: int
    user_id: int
    name: str
    kind: AccountKind
    opening_balance: Decimal
    color: str
    active: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with a single level of nesting."""

    id: int
    user_id: int
    name: str
    kind: CategoryKind
    color: str
    icon: str
    parent_id: Optional[int]
    active: bool
    created_at: datetime


@dataclass(frozen=True)
class CategoryTreeNode:
    """Category with its active subcategories."""

    id: int
    name: str
    kind: CategoryKind
    color: str
    icon: str
    parent_id: Optional[int]
    children: tuple["CategoryTreeNode", ...] = ()


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``payment_id`` is set only for the expense generated by a payment.
    """

    id: int
    user_id: int
    account_id: int
    kind: TransactionKind
    amount: Decimal
    description: str
    date: datetime
    category_id: Optional[int]
    payment_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Bill:
    """Payable bill domain entity."""

    id: int
    user_id: int
    description: str
    total_amount: Decimal
    kind: BillKind
    category_id: Optional[int]
    installment_count: Optional[int]
    note: Optional[str]
    do_not_count: bool
    status: BillStatus
    created_at: datetime


@dataclass(frozen=True)
class Installment:
    """One scheduled portion of a bill."""

    id: int
    bill_id: int
    number: int
    amount: Decimal
    paid_amount: Decimal
    due_date: Optional[date]
    status: InstallmentStatus
    version: int = 1

    @property
    def remaining(self) -> Decimal:
        return self.amount - self.paid_amount


@dataclass(frozen=True)
class PlannedInstallment:
    """Installment produced by the generator, not yet persisted."""

    number: int
    amount: Decimal
    due_date: Optional[date]


@dataclass(frozen=True)
class Payment:
    """Money drawn from an account toward an installment."""

    id: int
    installment_id: int
    account_id: int
    amount: Decimal
    paid_at: datetime
    note: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Budget:
    """Monthly spending limit for a category.

    Exactly one of ``fixed_amount`` and ``percentage`` is set.
    """

    id: int
    user_id: int
    category_id: int
    month: int
    year: int
    fixed_amount: Optional[Decimal]
    percentage: Optional[Decimal]
    created_at: datetime

    @property
    def limit_kind(self) -> BudgetLimitKind:
        if self.percentage is not None:
            return BudgetLimitKind.PERCENTAGE
        return BudgetLimitKind.FIXED


@dataclass(frozen=True)
class BalanceBreakdown:
    """Components of an account's derived balance."""

    account_id: int
    opening_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    total_payments: Decimal
    current_balance: Decimal


@dataclass(frozen=True)
class AccountBalance:
    """Account paired with its derived balance."""

    account: Account
    balance: Decimal


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of applying a payment."""

    payment: Payment
    installment_status: InstallmentStatus
    bill_settled: bool


@dataclass(frozen=True)
class PaymentReversal:
    """Outcome of reversing a payment."""

    payment: Payment
    installment_status: InstallmentStatus
    bill_reopened: bool
    removed_transactions: int


@dataclass(frozen=True)
class BillOverview:
    """Bill with its installments and derived payment totals."""

    bill: Bill
    installments: tuple[Installment, ...]
    paid_amount: Decimal
    pending_amount: Decimal
    paid_installments: int
    pending_installments: int
    payments: tuple[Payment, ...] = ()


@dataclass(frozen=True)
class BillsSummary:
    """Totals across all of a user's bills."""

    total_open: Decimal
    total_paid: Decimal
    open_bills: int
    settled_bills: int
    total_bills: int


@dataclass(frozen=True)
class BudgetStatus:
    """Spend against a budget's effective limit."""

    budget: Budget
    category_name: str
    limit_kind: BudgetLimitKind
    limit_amount: Decimal
    spent: Decimal
    available: Decimal
    percent_used: Decimal


@dataclass(frozen=True)
class BudgetReport:
    """Budget statuses for one month."""

    month: int
    year: int
    total_income: Decimal
    statuses: tuple[BudgetStatus, ...]


@dataclass(frozen=True)
class BudgetSummary:
    """Budget totals for one month."""

    month: int
    year: int
    total_budgeted: Decimal
    total_spent: Decimal
    total_income: Decimal
    balance: Decimal
    percent_spent: Decimal
    available: Decimal


@dataclass(frozen=True)
class MonthTotals:
    income: Decimal
    expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class TransactionSummary:
    """Income and expense totals over an optional date range."""

    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    count: int


@dataclass(frozen=True)
class Transfer:
    """The pair of transactions that moves money between two accounts."""

    expense_id: int
    income_id: int
    amount: Decimal
    date: datetime
    description: str


@dataclass(frozen=True)
class InstallmentDue:
    """Unpaid installment as listed on the dashboard."""

    installment_id: int
    bill_id: int
    description: str
    number: int
    remaining: Decimal
    due_date: date
    do_not_count: bool


@dataclass(frozen=True)
class BillsDue:
    total_open: Decimal
    count: int


@dataclass(frozen=True)
class BudgetOverview:
    total_budgeted: Decimal
    total_spent: Decimal
    percent: Decimal


@dataclass(frozen=True)
class CategorySpending:
    category_id: int
    name: str
    color: str
    amount: Decimal


@dataclass(frozen=True)
class DashboardSnapshot:
    """Read-only monthly projection over all of a user's data."""

    month: int
    year: int
    total_balance: Decimal
    accounts: tuple[AccountBalance, ...]
    month_totals: MonthTotals
    bills_due: BillsDue
    upcoming: tuple[InstallmentDue, ...]
    overdue: tuple[InstallmentDue, ...]
    budget: BudgetOverview
    top_categories: tuple[CategorySpending, ...] = field(default_factory=tuple)
