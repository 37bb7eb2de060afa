"""Tests for applying and reversing installment payments."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from pocketledger.database.factories import create_sqlite_database
from pocketledger.domain.entities import BillKind, BillStatus, InstallmentStatus, TransactionKind
from pocketledger.domain.errors import ConflictError, NotFoundError, ValidationError
from pocketledger.domain import PaymentService


@pytest.fixture
def gym_bill(bill_service, sample_user, sample_category):
    """300.00 in three installments of 100.00 from 2024-01-15."""
    bill_id = bill_service.create_bill(
        sample_user.id,
        description="Gym membership",
        total_amount=Decimal("300.00"),
        kind=BillKind.INSTALLMENT,
        category_id=sample_category.id,
        installment_count=3,
        first_due_date=date(2024, 1, 15),
    )
    return bill_service.get_bill(sample_user.id, bill_id)


def _installment(db, user_id, installment_id):
    return db.get_installment(user_id, installment_id)


def test_create_bill_scenario(gym_bill):
    """Three equal installments, monthly, all pending."""
    assert [(i.number, i.amount, i.due_date) for i in gym_bill.installments] == [
        (1, Decimal("100.00"), date(2024, 1, 15)),
        (2, Decimal("100.00"), date(2024, 2, 15)),
        (3, Decimal("100.00"), date(2024, 3, 15)),
    ]
    assert all(i.status == InstallmentStatus.PENDING for i in gym_bill.installments)
    assert gym_bill.bill.status == BillStatus.OPEN


class TestPay:
    """Tests for PaymentService.pay."""

    def test_full_payment_of_first_installment(
        self, payment_service, balance_service, temp_db, sample_user, sample_account, sample_category, gym_bill
    ):
        first = gym_bill.installments[0]
        result = payment_service.pay(
            sample_user.id, first.id, sample_account.id, Decimal("100.00"), date(2024, 1, 15), note="january"
        )

        assert result.installment_status == InstallmentStatus.PAID
        assert result.bill_settled is False
        assert result.payment.amount == Decimal("100.00")
        assert result.payment.paid_at == datetime(2024, 1, 15, 12, 0)
        assert result.payment.note == "january"
        assert balance_service.get_balance(sample_user.id, sample_account.id) == Decimal("400.00")

        installment = _installment(temp_db, sample_user.id, first.id)
        assert installment.paid_amount == Decimal("100.00")
        assert installment.status == InstallmentStatus.PAID
        assert temp_db.get_bill(sample_user.id, gym_bill.bill.id).status == BillStatus.OPEN

        # The payment is mirrored by an expense linked to it
        expenses = temp_db.list_transactions(sample_user.id, kind=TransactionKind.EXPENSE)
        assert len(expenses) == 1
        assert expenses[0].payment_id == result.payment.id
        assert expenses[0].amount == Decimal("100.00")
        assert expenses[0].description == "Payment: Gym membership"
        assert expenses[0].category_id == sample_category.id
        assert expenses[0].account_id == sample_account.id

    def test_overpayment_is_rejected_without_side_effects(
        self, payment_service, balance_service, temp_db, sample_user, sample_account, gym_bill
    ):
        first = gym_bill.installments[0]
        with pytest.raises(ValidationError, match="maximum allowed: 100.00"):
            payment_service.pay(sample_user.id, first.id, sample_account.id, Decimal("150.00"))

        assert balance_service.get_balance(sample_user.id, sample_account.id) == Decimal("500.00")
        assert _installment(temp_db, sample_user.id, first.id).paid_amount == Decimal("0.00")
        assert temp_db.list_payments(sample_user.id) == []
        assert temp_db.list_transactions(sample_user.id) == []

    def test_exact_remaining_pays_off_and_one_cent_more_fails(
        self, payment_service, temp_db, sample_user, sample_account, gym_bill
    ):
        first = gym_bill.installments[0]
        payment_service.pay(sample_user.id, first.id, sample_account.id, Decimal("40.00"))

        with pytest.raises(ValidationError):
            payment_service.pay(sample_user.id, first.id, sample_account.id, Decimal("60.01"))
        assert _installment(temp_db, sample_user.id, first.id).paid_amount == Decimal("40.00")

        result = payment_service.pay(sample_user.id, first.id, sample_account.id, Decimal("60.00"))
        assert result.installment_status == InstallmentStatus.PAID

    def test_partial_payments_accumulate(self, payment_service, temp_db, sample_user, sample_account, gym_bill):
        first = gym_bill.installments[0]
        result = payment_service.pay(sample_user.id, first.id, sample_account.id, "30.00")
        assert result.installment_status == InstallmentStatus.PARTIAL

        payment_service.pay(sample_user.id, first.id, sample_account.id, "20.00")
        installment = _installment(temp_db, sample_user.id, first.id)
        assert installment.paid_amount == Decimal("50.00")
        assert installment.remaining == Decimal("50.00")
        assert installment.status == InstallmentStatus.PARTIAL

    @pytest.mark.parametrize("amount", ["0", "-5.00", "abc"])
    def test_invalid_amount(self, payment_service, sample_user, sample_account, gym_bill, amount):
        with pytest.raises(ValidationError):
            payment_service.pay(sample_user.id, gym_bill.installments[0].id, sample_account.id, amount)

    def test_paying_a_paid_installment_fails(self, payment_service, sample_user, sample_account, gym_bill):
        first = gym_bill.installments[0]
        payment_service.pay(sample_user.id, first.id, sample_account.id, "100.00")
        with pytest.raises(ValidationError, match="maximum allowed: 0.00"):
            payment_service.pay(sample_user.id, first.id, sample_account.id, "0.01")

    def test_settles_bill_when_last_installment_paid(
        self, payment_service, temp_db, sample_user, sample_account, gym_bill
    ):
        results = [
            payment_service.pay(sample_user.id, i.id, sample_account.id, i.amount)
            for i in reversed(gym_bill.installments)
        ]

        assert [r.bill_settled for r in results] == [False, False, True]
        assert temp_db.get_bill(sample_user.id, gym_bill.bill.id).status == BillStatus.SETTLED

    def test_unknown_installment(self, payment_service, sample_user, sample_account):
        with pytest.raises(NotFoundError, match="Installment 999 not found"):
            payment_service.pay(sample_user.id, 999, sample_account.id, "10.00")

    def test_unknown_account_rolls_back(self, payment_service, temp_db, sample_user, gym_bill):
        with pytest.raises(NotFoundError, match="Account 999 not found"):
            payment_service.pay(sample_user.id, gym_bill.installments[0].id, 999, "10.00")
        assert temp_db.list_payments(sample_user.id) == []

    def test_other_users_installment_is_not_found(
        self, payment_service, account_service, other_user, gym_bill
    ):
        their_account = account_service.create_account(other_user.id, "Theirs", opening_balance="1000")
        with pytest.raises(NotFoundError):
            payment_service.pay(other_user.id, gym_bill.installments[0].id, their_account, "10.00")

    def test_other_users_account_is_not_found(
        self, payment_service, account_service, sample_user, other_user, gym_bill
    ):
        their_account = account_service.create_account(other_user.id, "Theirs", opening_balance="1000")
        with pytest.raises(NotFoundError):
            payment_service.pay(sample_user.id, gym_bill.installments[0].id, their_account, "10.00")

    def test_payment_date_defaults_to_today(self, payment_service, sample_user, sample_account, gym_bill):
        result = payment_service.pay(sample_user.id, gym_bill.installments[0].id, sample_account.id, "10.00")
        assert result.payment.paid_at.date() == date.today()
        assert result.payment.paid_at.hour == 12


class TestUnpay:
    """Tests for PaymentService.unpay."""

    def test_reversal_restores_previous_state(
        self, payment_service, balance_service, temp_db, sample_user, sample_account, gym_bill
    ):
        first = gym_bill.installments[0]
        result = payment_service.pay(sample_user.id, first.id, sample_account.id, Decimal("100.00"))

        reversal = payment_service.unpay(sample_user.id, result.payment.id)

        assert reversal.installment_status == InstallmentStatus.PENDING
        assert reversal.removed_transactions == 1
        assert reversal.bill_reopened is False
        installment = _installment(temp_db, sample_user.id, first.id)
        assert installment.paid_amount == Decimal("0.00")
        assert installment.status == InstallmentStatus.PENDING
        assert balance_service.get_balance(sample_user.id, sample_account.id) == Decimal("500.00")
        assert temp_db.list_transactions(sample_user.id) == []
        with pytest.raises(NotFoundError):
            payment_service.get_payment(sample_user.id, result.payment.id)

    def test_reversal_reopens_settled_bill(self, payment_service, temp_db, sample_user, sample_account, gym_bill):
        payments = [
            payment_service.pay(sample_user.id, i.id, sample_account.id, i.amount).payment
            for i in gym_bill.installments
        ]
        assert temp_db.get_bill(sample_user.id, gym_bill.bill.id).status == BillStatus.SETTLED

        reversal = payment_service.unpay(sample_user.id, payments[1].id)

        assert reversal.bill_reopened is True
        assert temp_db.get_bill(sample_user.id, gym_bill.bill.id).status == BillStatus.OPEN

    def test_partial_reversal_leaves_partial_status(
        self, payment_service, temp_db, sample_user, sample_account, gym_bill
    ):
        first = gym_bill.installments[0]
        payment_service.pay(sample_user.id, first.id, sample_account.id, "30.00")
        second = payment_service.pay(sample_user.id, first.id, sample_account.id, "70.00")

        reversal = payment_service.unpay(sample_user.id, second.payment.id)

        assert reversal.installment_status == InstallmentStatus.PARTIAL
        assert _installment(temp_db, sample_user.id, first.id).paid_amount == Decimal("30.00")

    def test_identical_payments_are_reversed_independently(
        self, payment_service, balance_service, temp_db, sample_user, sample_account, gym_bill
    ):
        """Two payments with the same account, amount, date and bill stay distinct."""
        first, second = gym_bill.installments[0], gym_bill.installments[1]
        kept = payment_service.pay(sample_user.id, first.id, sample_account.id, "100.00", date(2024, 1, 15))
        undone = payment_service.pay(sample_user.id, second.id, sample_account.id, "100.00", date(2024, 1, 15))

        payment_service.unpay(sample_user.id, undone.payment.id)

        remaining = temp_db.list_transactions(sample_user.id)
        assert len(remaining) == 1
        assert remaining[0].payment_id == kept.payment.id
        assert _installment(temp_db, sample_user.id, first.id).status == InstallmentStatus.PAID
        assert _installment(temp_db, sample_user.id, second.id).status == InstallmentStatus.PENDING
        assert balance_service.get_balance(sample_user.id, sample_account.id) == Decimal("400.00")

    def test_unknown_payment(self, payment_service, sample_user):
        with pytest.raises(NotFoundError, match="Payment 42 not found"):
            payment_service.unpay(sample_user.id, 42)

    def test_other_users_payment_is_not_found(
        self, payment_service, temp_db, sample_user, other_user, sample_account, gym_bill
    ):
        result = payment_service.pay(sample_user.id, gym_bill.installments[0].id, sample_account.id, "100.00")
        with pytest.raises(NotFoundError):
            payment_service.unpay(other_user.id, result.payment.id)
        assert temp_db.get_payment(sample_user.id, result.payment.id) is not None


class TestConcurrency:
    """Tests for conflicting writes on the same installment."""

    def test_concurrent_payment_is_retried_against_fresh_state(
        self, payment_service, temp_db, sample_user, sample_account, gym_bill, monkeypatch
    ):
        first = gym_bill.installments[0]
        other_db = create_sqlite_database(database_path=temp_db.database_path)
        original_lock = temp_db.lock_installment
        calls = []

        def lock_then_race(user_id, installment_id):
            installment = original_lock(user_id, installment_id)
            calls.append(installment_id)
            if len(calls) == 1:
                # Another writer pays 30.00 after this one has read the row
                PaymentService(other_db).pay(user_id, installment_id, sample_account.id, "30.00")
            return installment

        monkeypatch.setattr(temp_db, "lock_installment", lock_then_race)
        try:
            result = payment_service.pay(sample_user.id, first.id, sample_account.id, "50.00")
        finally:
            other_db.disconnect()

        assert len(calls) == 2
        assert result.installment_status == InstallmentStatus.PARTIAL
        installment = _installment(temp_db, sample_user.id, first.id)
        assert installment.paid_amount == Decimal("80.00")
        assert len(temp_db.list_payments(sample_user.id)) == 2

    def test_payment_made_while_row_is_held_is_not_lost(
        self, payment_service, balance_service, temp_db, sample_user, sample_account, gym_bill, monkeypatch
    ):
        first = gym_bill.installments[0]
        other_db = create_sqlite_database(database_path=temp_db.database_path)
        original_lock = temp_db.lock_installment
        raced = []

        def lock_then_race(user_id, installment_id):
            installment = original_lock(user_id, installment_id)
            if not raced:
                raced.append(installment_id)
                PaymentService(other_db).pay(user_id, installment_id, sample_account.id, "80.00")
            return installment

        monkeypatch.setattr(temp_db, "lock_installment", lock_then_race)
        try:
            # Only 20.00 is left once the 80.00 lands, so the retry refuses 50.00
            with pytest.raises(ValidationError, match="maximum allowed: 20.00"):
                payment_service.pay(sample_user.id, first.id, sample_account.id, "50.00")
        finally:
            other_db.disconnect()

        installment = temp_db.lock_installment(sample_user.id, first.id)
        payments = temp_db.list_payments(sample_user.id, installment_id=first.id)
        assert installment.paid_amount == Decimal("80.00")
        assert sum(p.amount for p in payments) == installment.paid_amount
        assert installment.paid_amount <= installment.amount
        assert balance_service.get_balance(sample_user.id, sample_account.id) == Decimal("420.00")

    def test_second_conflict_is_surfaced(self, payment_service, sample_user, sample_account, gym_bill, monkeypatch):
        attempts = []

        def always_conflict(*args):
            attempts.append(args)
            raise ConflictError("The data was modified concurrently; please try again")

        monkeypatch.setattr(payment_service, "_apply", always_conflict)
        with pytest.raises(ConflictError):
            payment_service.pay(sample_user.id, gym_bill.installments[0].id, sample_account.id, "10.00")
        assert len(attempts) == 2


def test_balance_matches_payment_history(
    payment_service, transaction_service, balance_service, temp_db, sample_user, sample_account, gym_bill
):
    """The derived balance agrees with a sequence of payments and reversals."""
    transaction_service.create_transaction(
        sample_user.id, sample_account.id, TransactionKind.INCOME, "1000.00", "Salary", date(2024, 1, 5)
    )
    transaction_service.create_transaction(
        sample_user.id, sample_account.id, TransactionKind.EXPENSE, "45.90", "Lunch", date(2024, 1, 6)
    )
    a = payment_service.pay(sample_user.id, gym_bill.installments[0].id, sample_account.id, "100.00")
    payment_service.pay(sample_user.id, gym_bill.installments[1].id, sample_account.id, "25.00")
    payment_service.unpay(sample_user.id, a.payment.id)
    payment_service.pay(sample_user.id, gym_bill.installments[2].id, sample_account.id, "100.00")

    breakdown = balance_service.get_breakdown(sample_user.id, sample_account.id)

    assert breakdown.total_income == Decimal("1000.00")
    assert breakdown.total_expense == Decimal("45.90")
    assert breakdown.total_payments == Decimal("125.00")
    assert breakdown.current_balance == Decimal("1329.10")
