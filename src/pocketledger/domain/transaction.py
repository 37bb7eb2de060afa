"""Transaction domain service."""

import logging
from typing import Optional
from datetime import date, datetime, time
from decimal import Decimal

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import (
    Transaction as TransactionEntity,
    TransactionKind,
    TransactionSummary,
    Transfer,
)
from pocketledger.utils.date_parser import at_canonical_time
from pocketledger.utils.money import sum_money, to_money

logger = logging.getLogger(__name__)


def validate_amount(amount: Decimal | int | str, field: str = "Amount") -> Decimal:
    """Convert an amount to money and require it to be positive.

    Raises:
        ValidationError: If amount is not a number or not positive
    """
    try:
        value = to_money(amount)
    except ValueError as e:
        raise errors.ValidationError(str(e)) from e
    if value <= 0:
        raise errors.ValidationError(errors.non_positive_amount(field))
    return value


class TransactionService:
    """Service for managing transactions.

    Transactions generated by payments are owned by the payment processor
    and cannot be edited or deleted here.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        user_id: int,
        account_id: int,
        kind: TransactionKind,
        amount: Decimal | int | str,
        description: str,
        date: date,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a transaction.

        Args:
            user_id: Owning user ID
            account_id: Account ID
            kind: INCOME or EXPENSE
            amount: Positive transaction amount
            description: Description
            date: Effective date, stored at midday
            category_id: Optional category ID

        Returns:
            Transaction ID

        Raises:
            ValidationError: If amount or description is invalid
            NotFoundError: If account or category doesn't exist for this user
        """
        value = validate_amount(amount)
        description = description.strip()
        if not description:
            raise errors.ValidationError("Description is required")

        # Verify account exists
        if self.db.get_account(user_id, account_id) is None:
            raise errors.NotFoundError(errors.account_not_found(account_id))

        # Verify category if provided
        if category_id is not None and self.db.get_category(user_id, category_id) is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))

        return self.db.create_transaction(
            user_id=user_id,
            account_id=account_id,
            kind=TransactionKind(kind),
            amount=value,
            description=description,
            date=at_canonical_time(date),
            category_id=category_id,
        )

    def get_transaction(self, user_id: int, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(user_id, transaction_id)

    def _require_editable(self, user_id: int, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(user_id, transaction_id)
        if txn is None:
            raise errors.NotFoundError(errors.transaction_not_found(transaction_id))
        if txn.payment_id is not None:
            raise errors.ValidationError(errors.payment_linked_transaction(transaction_id))
        return txn

    def update_transaction(
        self,
        user_id: int,
        transaction_id: int,
        account_id: Optional[int] = None,
        kind: Optional[TransactionKind] = None,
        amount: Optional[Decimal | int | str] = None,
        description: Optional[str] = None,
        date: Optional[date] = None,
        category_id: Optional[int] = None,
        clear_category: bool = False,
    ) -> None:
        """Update transaction fields.

        Args:
            clear_category: If True, clear the category (category_id must be None)

        Raises:
            NotFoundError: If transaction, account or category doesn't exist
            ValidationError: If a value is invalid or the transaction belongs to a payment
        """
        self._require_editable(user_id, transaction_id)

        value = validate_amount(amount) if amount is not None else None
        if description is not None:
            description = description.strip()
            if not description:
                raise errors.ValidationError("Description is required")

        if account_id is not None and self.db.get_account(user_id, account_id) is None:
            raise errors.NotFoundError(errors.account_not_found(account_id))

        if clear_category and category_id is not None:
            raise errors.ValidationError("Cannot set both category_id and clear_category")
        if category_id is not None and self.db.get_category(user_id, category_id) is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))

        self.db.update_transaction(
            user_id,
            transaction_id,
            account_id=account_id,
            kind=TransactionKind(kind) if kind is not None else None,
            amount=value,
            description=description,
            date=at_canonical_time(date) if date is not None else None,
            category_id=category_id,
            update_category=clear_category,
        )

    def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If the transaction belongs to a payment
        """
        self._require_editable(user_id, transaction_id)
        self.db.delete_transaction(user_id, transaction_id)

    def list_transactions(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            start_date: Optional first day (inclusive)
            end_date: Optional last day (inclusive)
            kind: Optional kind filter
            category_id: Optional category filter
            account_id: Optional account filter
        """
        start = datetime.combine(start_date, time.min) if start_date else None
        end = datetime.combine(end_date, time.max) if end_date else None
        return self.db.list_transactions(
            user_id,
            start=start,
            end=end,
            kind=TransactionKind(kind) if kind is not None else None,
            category_id=category_id,
            account_id=account_id,
        )

    def transfer(
        self,
        user_id: int,
        from_account_id: int,
        to_account_id: int,
        amount: Decimal | int | str,
        date: date,
        description: Optional[str] = None,
    ) -> Transfer:
        """Move money from one account to another.

        Writes an EXPENSE on the origin and an INCOME on the destination,
        both dated at midday of ``date``. Either both are stored or neither.

        Args:
            user_id: Owning user ID
            from_account_id: Origin account ID
            to_account_id: Destination account ID
            amount: Positive amount to move
            date: Effective date
            description: Optional description; defaults to "Transfer: <origin> -> <destination>"

        Raises:
            ValidationError: If the accounts are the same or the amount is invalid
            NotFoundError: If either account doesn't exist for this user
        """
        value = validate_amount(amount)
        if from_account_id == to_account_id:
            raise errors.ValidationError("Origin and destination accounts must be different")

        origin = self.db.get_account(user_id, from_account_id)
        if origin is None:
            raise errors.NotFoundError(errors.account_not_found(from_account_id))
        destination = self.db.get_account(user_id, to_account_id)
        if destination is None:
            raise errors.NotFoundError(errors.account_not_found(to_account_id))

        description = (description or "").strip() or f"Transfer: {origin.name} -> {destination.name}"
        when = at_canonical_time(date)

        with self.db.unit_of_work():
            expense_id = self.db.create_transaction(
                user_id=user_id,
                account_id=from_account_id,
                kind=TransactionKind.EXPENSE,
                amount=value,
                description=description,
                date=when,
            )
            income_id = self.db.create_transaction(
                user_id=user_id,
                account_id=to_account_id,
                kind=TransactionKind.INCOME,
                amount=value,
                description=description,
                date=when,
            )

        logger.info(
            "Transferred %s from account %s to account %s (transactions %s, %s)",
            value,
            from_account_id,
            to_account_id,
            expense_id,
            income_id,
        )
        return Transfer(
            expense_id=expense_id, income_id=income_id, amount=value, date=when, description=description
        )

    def get_summary(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> TransactionSummary:
        """Total income and expense over an optional inclusive date range.

        Every transaction counts, payment-generated expenses included.
        """
        transactions = self.list_transactions(user_id, start_date=start_date, end_date=end_date)
        total_income = sum_money(t.amount for t in transactions if t.kind == TransactionKind.INCOME)
        total_expense = sum_money(t.amount for t in transactions if t.kind == TransactionKind.EXPENSE)
        return TransactionSummary(
            total_income=total_income,
            total_expense=total_expense,
            net=total_income - total_expense,
            count=len(transactions),
        )
