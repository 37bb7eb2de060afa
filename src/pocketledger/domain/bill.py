"""Payable bill domain service and installment generation."""

import logging
from datetime import date
from decimal import Decimal, ROUND_DOWN
from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import (
    Bill,
    BillKind,
    BillOverview,
    BillsSummary,
    BillStatus,
    Installment,
    InstallmentStatus,
    PlannedInstallment,
)
from pocketledger.domain.transaction import validate_amount
from pocketledger.utils.date_parser import add_months
from pocketledger.utils.money import CENT, sum_money

logger = logging.getLogger(__name__)


def generate_installments(
    kind: BillKind,
    total_amount: Decimal,
    count: Optional[int] = None,
    first_due_date: Optional[date] = None,
) -> list[PlannedInstallment]:
    """Split a bill into its ordered installments.

    INSTALLMENT bills are split into ``count`` equal parts due monthly from
    ``first_due_date`` (today when missing), keeping the day of month and
    clamping it to shorter months. Each part is rounded down to the cent and
    the last installment absorbs the remainder, so the amounts always add up
    to ``total_amount`` exactly.

    LUMP_SUM bills produce a single installment for the whole amount, due on
    ``first_due_date`` or with no due date at all.

    Raises:
        ValidationError: If an INSTALLMENT bill has no count or a count below 1
    """
    kind = BillKind(kind)
    if kind == BillKind.LUMP_SUM:
        return [PlannedInstallment(number=1, amount=total_amount, due_date=first_due_date)]

    if count is None or count < 1:
        raise errors.ValidationError("Installment bills require an installment count of at least 1")

    base = first_due_date or date.today()
    share = (total_amount / count).quantize(CENT, rounding=ROUND_DOWN)
    last = total_amount - share * (count - 1)
    return [
        PlannedInstallment(
            number=i + 1,
            amount=last if i == count - 1 else share,
            due_date=add_months(base, i),
        )
        for i in range(count)
    ]


def installment_status_for(paid_amount: Decimal, face_amount: Decimal) -> InstallmentStatus:
    """Derive an installment's status from how much of it has been paid."""
    if paid_amount >= face_amount:
        return InstallmentStatus.PAID
    if paid_amount > 0:
        return InstallmentStatus.PARTIAL
    return InstallmentStatus.PENDING


def payment_description(bill_description: str) -> str:
    """Description of the expense transaction generated by a payment."""
    return f"Payment: {bill_description}"


def build_overview(bill: Bill, installments: list[Installment], payments=()) -> BillOverview:
    """Attach derived payment totals to a bill."""
    paid = sum_money(i.paid_amount for i in installments)
    paid_count = sum(1 for i in installments if i.status == InstallmentStatus.PAID)
    return BillOverview(
        bill=bill,
        installments=tuple(installments),
        paid_amount=paid,
        pending_amount=bill.total_amount - paid,
        paid_installments=paid_count,
        pending_installments=len(installments) - paid_count,
        payments=tuple(payments),
    )


class BillService:
    """Service for payable bills ("contas a pagar").

    A bill's status is never set here directly; the payment processor keeps
    it in sync with its installments.
    """

    def __init__(self, db: Database):
        """Initialize bill service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_bill(
        self,
        user_id: int,
        description: str,
        total_amount: Decimal | int | str,
        kind: BillKind,
        category_id: Optional[int] = None,
        installment_count: Optional[int] = None,
        first_due_date: Optional[date] = None,
        note: Optional[str] = None,
        do_not_count: bool = False,
    ) -> int:
        """Create a bill and all of its installments in one atomic batch.

        Args:
            user_id: Owning user ID
            description: Bill description
            total_amount: Positive total amount
            kind: INSTALLMENT or LUMP_SUM
            category_id: Optional category for the generated payment expenses
            installment_count: Number of installments, required for INSTALLMENT
            first_due_date: Due date of the first installment
            note: Optional free-text note
            do_not_count: Track the bill but leave it out of due/paid totals

        Returns:
            Bill ID

        Raises:
            ValidationError: If any input is invalid
            NotFoundError: If category doesn't exist for this user
        """
        description = description.strip()
        if not description:
            raise errors.ValidationError("Description is required")
        total = validate_amount(total_amount, "Total amount")
        kind = BillKind(kind)

        if category_id is not None and self.db.get_category(user_id, category_id) is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))

        planned = generate_installments(kind, total, installment_count, first_due_date)
        if any(p.amount <= 0 for p in planned):
            raise errors.ValidationError(
                f"Total amount {total:.2f} is too small for {len(planned)} installments"
            )

        with self.db.unit_of_work():
            bill_id = self.db.create_bill(
                user_id=user_id,
                description=description,
                total_amount=total,
                kind=kind,
                installments=planned,
                category_id=category_id,
                installment_count=installment_count if kind == BillKind.INSTALLMENT else None,
                note=note,
                do_not_count=do_not_count,
            )
        logger.info("Created bill %s with %d installment(s)", bill_id, len(planned))
        return bill_id

    def require_bill(self, user_id: int, bill_id: int) -> Bill:
        """Get bill by ID or raise NotFoundError."""
        bill = self.db.get_bill(user_id, bill_id)
        if bill is None:
            raise errors.NotFoundError(errors.bill_not_found(bill_id))
        return bill

    def get_bill(self, user_id: int, bill_id: int) -> BillOverview:
        """Get a bill with its installments, payments and derived totals.

        Raises:
            NotFoundError: If bill doesn't exist for this user
        """
        bill = self.require_bill(user_id, bill_id)
        installments = self.db.list_installments(user_id, bill_id=bill_id)
        payments = self.db.list_payments(user_id, bill_id=bill_id)
        return build_overview(bill, installments, payments)

    def list_bills(
        self,
        user_id: int,
        status: Optional[BillStatus] = None,
        kind: Optional[BillKind] = None,
    ) -> list[BillOverview]:
        """List bills, newest first, each with derived totals."""
        bills = self.db.list_bills(
            user_id,
            status=BillStatus(status) if status is not None else None,
            kind=BillKind(kind) if kind is not None else None,
        )
        by_bill: dict[int, list[Installment]] = {}
        for installment in self.db.list_installments(user_id):
            by_bill.setdefault(installment.bill_id, []).append(installment)
        return [build_overview(bill, by_bill.get(bill.id, [])) for bill in bills]

    def update_bill(
        self,
        user_id: int,
        bill_id: int,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        note: Optional[str] = None,
        do_not_count: Optional[bool] = None,
        clear_category: bool = False,
        clear_note: bool = False,
    ) -> None:
        """Update the editable fields of a bill.

        Amounts, kind and installments are fixed once the bill exists.

        Args:
            clear_category: If True, clear the category (category_id must be None)
            clear_note: If True, clear the note (note must be None)

        Raises:
            NotFoundError: If bill or category doesn't exist
            ValidationError: If description is blank
        """
        self.require_bill(user_id, bill_id)
        if description is not None:
            description = description.strip()
            if not description:
                raise errors.ValidationError("Description is required")
        if clear_category and category_id is not None:
            raise errors.ValidationError("Cannot set both category_id and clear_category")
        if category_id is not None and self.db.get_category(user_id, category_id) is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))
        if clear_note and note is not None:
            raise errors.ValidationError("Cannot set both note and clear_note")

        self.db.update_bill(
            user_id,
            bill_id,
            description=description,
            category_id=category_id,
            note=note,
            do_not_count=do_not_count,
            update_category=clear_category,
            update_note=clear_note,
        )

    def delete_bill(self, user_id: int, bill_id: int) -> None:
        """Delete a bill with its installments and payments.

        Expenses already generated by its payments stay on their accounts.

        Raises:
            NotFoundError: If bill doesn't exist for this user
        """
        self.require_bill(user_id, bill_id)
        with self.db.unit_of_work():
            self.db.delete_bill(user_id, bill_id)
        logger.info("Deleted bill %s", bill_id)

    def get_summary(self, user_id: int) -> BillsSummary:
        """Totals across all bills; do-not-count bills are left out of the sums."""
        overviews = self.list_bills(user_id)
        counted = [o for o in overviews if not o.bill.do_not_count]
        open_bills = sum(1 for o in overviews if o.bill.status == BillStatus.OPEN)
        return BillsSummary(
            total_open=sum_money(o.pending_amount for o in counted),
            total_paid=sum_money(o.paid_amount for o in counted),
            open_bills=open_bills,
            settled_bills=len(overviews) - open_bills,
            total_bills=len(overviews),
        )
