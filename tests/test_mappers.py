"""Tests for database mappers."""

from datetime import date, datetime, UTC
from decimal import Decimal

from pocketledger.database.models import (
    Installment as ORMInstallment,
    PayableBill as ORMPayableBill,
    Transaction as ORMTransaction,
    Budget as ORMBudget,
)
from pocketledger.database.mappers import (
    bill_to_domain,
    budget_to_domain,
    installment_to_domain,
    transaction_to_domain,
)
from pocketledger.domain.entities import (
    BillKind,
    BillStatus,
    BudgetLimitKind,
    InstallmentStatus,
    TransactionKind,
)


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        orm_txn = ORMTransaction(
            id=3,
            user_id=1,
            account_id=2,
            kind="EXPENSE",
            amount=Decimal("45.9"),
            description="Lunch",
            date=datetime(2024, 1, 15, 12),
            category_id=None,
            payment_id=9,
            created_at=datetime.now(UTC),
        )

        txn = transaction_to_domain(orm_txn)

        assert txn.kind == TransactionKind.EXPENSE
        assert txn.amount == Decimal("45.90")
        assert txn.payment_id == 9


class TestBillMappers:
    """Tests for bill and installment mappers."""

    def test_bill_to_domain(self):
        orm_bill = ORMPayableBill(
            id=1,
            user_id=1,
            description="Laptop",
            total_amount=Decimal("1000"),
            kind="INSTALLMENT",
            category_id=None,
            installment_count=3,
            note=None,
            do_not_count=False,
            status="OPEN",
            created_at=datetime.now(UTC),
        )

        bill = bill_to_domain(orm_bill)

        assert bill.kind == BillKind.INSTALLMENT
        assert bill.status == BillStatus.OPEN
        assert bill.total_amount == Decimal("1000.00")

    def test_installment_to_domain_defaults_paid_amount(self):
        orm_installment = ORMInstallment(
            id=4,
            bill_id=1,
            number=2,
            amount=Decimal("333.33"),
            paid_amount=None,
            due_date=date(2024, 2, 10),
            status="PENDING",
            version=3,
        )

        installment = installment_to_domain(orm_installment)

        assert installment.paid_amount == Decimal("0.00")
        assert installment.remaining == Decimal("333.33")
        assert installment.status == InstallmentStatus.PENDING
        assert installment.version == 3


def test_budget_to_domain_limit_kind():
    orm_budget = ORMBudget(
        id=1, user_id=1, category_id=2, month=3, year=2024, fixed_amount=None, percentage=Decimal("10"),
        created_at=datetime.now(UTC),
    )

    budget = budget_to_domain(orm_budget)

    assert budget.fixed_amount is None
    assert budget.percentage == Decimal("10.00")
    assert budget.limit_kind == BudgetLimitKind.PERCENTAGE
