"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, including the string-to-enum
conversion of kind and status columns.
"""

from decimal import Decimal
from typing import Optional

from pocketledger.domain import entities as domain
from pocketledger.database.models import (
    User as ORMUser,
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    PayableBill as ORMPayableBill,
    Installment as ORMInstallment,
    Payment as ORMPayment,
    Budget as ORMBudget,
)
from pocketledger.utils.money import to_money


def _money(value) -> Decimal:
    return to_money(value if value is not None else 0)


def _optional_money(value) -> Optional[Decimal]:
    return to_money(value) if value is not None else None


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        created_at=orm_user.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        kind=domain.AccountKind(orm_account.kind),
        opening_balance=_money(orm_account.opening_balance),
        color=orm_account.color,
        active=orm_account.active,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        kind=domain.CategoryKind(orm_category.kind),
        color=orm_category.color,
        icon=orm_category.icon,
        parent_id=orm_category.parent_id,
        active=orm_category.active,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        account_id=orm_transaction.account_id,
        kind=domain.TransactionKind(orm_transaction.kind),
        amount=_money(orm_transaction.amount),
        description=orm_transaction.description,
        date=orm_transaction.date,
        category_id=orm_transaction.category_id,
        payment_id=orm_transaction.payment_id,
        created_at=orm_transaction.created_at,
    )


def bill_to_domain(orm_bill: ORMPayableBill) -> domain.Bill:
    """Convert SQLAlchemy PayableBill model to domain Bill entity."""
    return domain.Bill(
        id=orm_bill.id,
        user_id=orm_bill.user_id,
        description=orm_bill.description,
        total_amount=_money(orm_bill.total_amount),
        kind=domain.BillKind(orm_bill.kind),
        category_id=orm_bill.category_id,
        installment_count=orm_bill.installment_count,
        note=orm_bill.note,
        do_not_count=orm_bill.do_not_count,
        status=domain.BillStatus(orm_bill.status),
        created_at=orm_bill.created_at,
    )


def installment_to_domain(orm_installment: ORMInstallment) -> domain.Installment:
    """Convert SQLAlchemy Installment model to domain Installment entity."""
    return domain.Installment(
        id=orm_installment.id,
        bill_id=orm_installment.bill_id,
        number=orm_installment.number,
        amount=_money(orm_installment.amount),
        paid_amount=_money(orm_installment.paid_amount),
        due_date=orm_installment.due_date,
        status=domain.InstallmentStatus(orm_installment.status),
        version=orm_installment.version,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        installment_id=orm_payment.installment_id,
        account_id=orm_payment.account_id,
        amount=_money(orm_payment.amount),
        paid_at=orm_payment.paid_at,
        note=orm_payment.note,
        created_at=orm_payment.created_at,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        user_id=orm_budget.user_id,
        category_id=orm_budget.category_id,
        month=orm_budget.month,
        year=orm_budget.year,
        fixed_amount=_optional_money(orm_budget.fixed_amount),
        percentage=_optional_money(orm_budget.percentage),
        created_at=orm_budget.created_at,
    )
