"""Payment processor.

Applying a payment touches four rows that must stay consistent: the new
payment, its linked EXPENSE transaction, the installment's cumulative paid
amount and status, and the bill's aggregate status. Reversing a payment
undoes all four. Both run inside a single unit of work, so either every
write commits or none does.

The installment row is locked for the duration of the unit of work and
carries an optimistic version counter. A concurrent modification surfaces as
``ConflictError``; the operation is retried once and the second conflict is
raised to the caller.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.bill import installment_status_for, payment_description
from pocketledger.domain.entities import (
    BillStatus,
    InstallmentStatus,
    Payment,
    PaymentResult,
    PaymentReversal,
    TransactionKind,
)
from pocketledger.domain.transaction import validate_amount
from pocketledger.utils.date_parser import at_canonical_time
from pocketledger.utils.money import ZERO

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PaymentService:
    """Applies and reverses payments against installments."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db

    def _retry_on_conflict(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except errors.ConflictError:
            logger.warning("Concurrent update detected, retrying once")
            return operation()

    def pay(
        self,
        user_id: int,
        installment_id: int,
        account_id: int,
        amount: Decimal | int | str,
        payment_date: Optional[date] = None,
        note: Optional[str] = None,
    ) -> PaymentResult:
        """Apply a payment to an installment.

        Args:
            user_id: Acting user ID
            installment_id: Installment being paid down
            account_id: Account the money is drawn from
            amount: Positive amount, at most what is left on the installment
            payment_date: Payment date (defaults to today), stored at midday
            note: Optional note

        Returns:
            The payment, the installment's new status and whether the bill
            became settled

        Raises:
            NotFoundError: If installment or account doesn't exist for this user
            ValidationError: If amount is not positive or exceeds the remaining amount
            ConflictError: If the installment kept changing concurrently
        """
        value = validate_amount(amount)
        paid_at = at_canonical_time(payment_date or date.today())
        result = self._retry_on_conflict(
            lambda: self._apply(user_id, installment_id, account_id, value, paid_at, note)
        )
        logger.info(
            "Payment %s of %s applied to installment %s (status %s, bill settled: %s)",
            result.payment.id,
            value,
            installment_id,
            result.installment_status.value,
            result.bill_settled,
        )
        return result

    def _apply(self, user_id, installment_id, account_id, amount, paid_at, note) -> PaymentResult:
        with self.db.unit_of_work():
            installment = self.db.lock_installment(user_id, installment_id)
            if installment is None:
                raise errors.NotFoundError(errors.installment_not_found(installment_id))

            if self.db.get_account(user_id, account_id) is None:
                raise errors.NotFoundError(errors.account_not_found(account_id))

            remaining = installment.amount - installment.paid_amount
            if amount > remaining:
                raise errors.ValidationError(errors.payment_exceeds_remaining(remaining))

            bill = self.db.get_bill(user_id, installment.bill_id)
            payment_id = self.db.create_payment(
                installment_id=installment_id,
                account_id=account_id,
                amount=amount,
                paid_at=paid_at,
                note=note,
            )
            self.db.create_transaction(
                user_id=user_id,
                account_id=account_id,
                kind=TransactionKind.EXPENSE,
                amount=amount,
                description=payment_description(bill.description),
                date=paid_at,
                category_id=bill.category_id,
                payment_id=payment_id,
            )

            new_paid = installment.paid_amount + amount
            new_status = installment_status_for(new_paid, installment.amount)
            self.db.update_installment_payment(
                installment_id, new_paid, new_status, expected_version=installment.version
            )

            bill_settled = False
            if new_status == InstallmentStatus.PAID:
                siblings = self.db.list_installments(user_id, bill_id=bill.id)
                bill_settled = all(
                    (new_status if i.id == installment_id else i.status) == InstallmentStatus.PAID
                    for i in siblings
                )
                if bill_settled:
                    self.db.set_bill_status(bill.id, BillStatus.SETTLED)

            payment = self.db.get_payment(user_id, payment_id)

        return PaymentResult(payment=payment, installment_status=new_status, bill_settled=bill_settled)

    def unpay(self, user_id: int, payment_id: int) -> PaymentReversal:
        """Reverse a payment.

        Lowers the installment's paid amount by the payment, re-derives its
        status, reopens a settled bill, and removes the linked expense and
        the payment itself.

        Raises:
            NotFoundError: If payment doesn't exist for this user
            ConflictError: If the installment kept changing concurrently
        """
        reversal = self._retry_on_conflict(lambda: self._reverse(user_id, payment_id))
        logger.info(
            "Payment %s reversed (installment status %s, bill reopened: %s)",
            payment_id,
            reversal.installment_status.value,
            reversal.bill_reopened,
        )
        return reversal

    def _reverse(self, user_id: int, payment_id: int) -> PaymentReversal:
        with self.db.unit_of_work():
            payment = self.db.get_payment(user_id, payment_id)
            if payment is None:
                raise errors.NotFoundError(errors.payment_not_found(payment_id))

            installment = self.db.lock_installment(user_id, payment.installment_id)
            bill = self.db.get_bill(user_id, installment.bill_id)

            new_paid = max(ZERO, installment.paid_amount - payment.amount)
            new_status = installment_status_for(new_paid, installment.amount)
            self.db.update_installment_payment(
                installment.id, new_paid, new_status, expected_version=installment.version
            )

            bill_reopened = False
            if bill.status == BillStatus.SETTLED and new_status != InstallmentStatus.PAID:
                self.db.set_bill_status(bill.id, BillStatus.OPEN)
                bill_reopened = True

            removed = self.db.delete_payment_transactions(payment.id)
            self.db.delete_payment(payment.id)

        return PaymentReversal(
            payment=payment,
            installment_status=new_status,
            bill_reopened=bill_reopened,
            removed_transactions=removed,
        )

    def get_payment(self, user_id: int, payment_id: int) -> Payment:
        """Get payment by ID.

        Raises:
            NotFoundError: If payment doesn't exist for this user
        """
        payment = self.db.get_payment(user_id, payment_id)
        if payment is None:
            raise errors.NotFoundError(errors.payment_not_found(payment_id))
        return payment

    def list_payments(
        self,
        user_id: int,
        bill_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> list[Payment]:
        """List payments, newest first, optionally filtered by bill or account."""
        return self.db.list_payments(user_id, bill_id=bill_id, account_id=account_id)
