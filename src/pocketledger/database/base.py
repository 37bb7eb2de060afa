"""Abstract database interface.

Every lookup takes the owning user's ID. Rows owned by another user are
reported exactly like missing rows (``None``), so callers can never tell the
two apart.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from pocketledger.domain.entities import (
    User,
    Account,
    AccountKind,
    Category,
    CategoryKind,
    Transaction,
    TransactionKind,
    Bill,
    BillKind,
    BillStatus,
    Installment,
    InstallmentStatus,
    PlannedInstallment,
    Payment,
    Budget,
)


class Database(ABC):
    """Abstract database interface for pocketledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes into one atomic commit.

        Writes issued inside the block are committed together when it exits
        cleanly and rolled back together when it raises. Nested blocks join
        the outermost one.
        """
        pass

    # User operations
    @abstractmethod
    def create_user(self, name: str, email: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by e-mail address."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, user_id: int, name: str, kind: AccountKind, opening_balance: Decimal, color: str
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, user_id: int, account_id: int) -> Optional[Account]:
        """Get account by ID, active or not."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: int, include_inactive: bool = False) -> list[Account]:
        """List accounts ordered by name."""
        pass

    @abstractmethod
    def update_account(
        self,
        user_id: int,
        account_id: int,
        name: Optional[str] = None,
        kind: Optional[AccountKind] = None,
        color: Optional[str] = None,
    ) -> None:
        """Update account fields. The opening balance is immutable."""
        pass

    @abstractmethod
    def deactivate_account(self, user_id: int, account_id: int) -> None:
        """Soft-delete an account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        user_id: int,
        name: str,
        kind: CategoryKind,
        color: str,
        icon: str,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, user_id: int, category_id: int) -> Optional[Category]:
        """Get category by ID, active or not."""
        pass

    @abstractmethod
    def list_categories(self, user_id: int, include_inactive: bool = False) -> list[Category]:
        """List categories ordered by name."""
        pass

    @abstractmethod
    def update_category(
        self,
        user_id: int,
        category_id: int,
        name: Optional[str] = None,
        kind: Optional[CategoryKind] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Update category fields. A kind change is applied to its subcategories too."""
        pass

    @abstractmethod
    def deactivate_category(self, user_id: int, category_id: int) -> None:
        """Soft-delete a category."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: int,
        account_id: int,
        kind: TransactionKind,
        amount: Decimal,
        description: str,
        date: datetime,
        category_id: Optional[int] = None,
        payment_id: Optional[int] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, user_id: int, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        kind: Optional[TransactionKind] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        newest_first: bool = True,
    ) -> list[Transaction]:
        """List transactions with optional filters (date bounds inclusive)."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        user_id: int,
        transaction_id: int,
        account_id: Optional[int] = None,
        kind: Optional[TransactionKind] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        date: Optional[datetime] = None,
        category_id: Optional[int] = None,
        update_category: bool = False,
    ) -> None:
        """Update transaction fields.

        Args:
            update_category: If True, update category_id even if it's None (to clear it)
        """
        pass

    @abstractmethod
    def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def delete_payment_transactions(self, payment_id: int) -> int:
        """Delete the transactions generated by a payment. Returns the count removed."""
        pass

    # Bill operations
    @abstractmethod
    def create_bill(
        self,
        user_id: int,
        description: str,
        total_amount: Decimal,
        kind: BillKind,
        installments: list[PlannedInstallment],
        category_id: Optional[int] = None,
        installment_count: Optional[int] = None,
        note: Optional[str] = None,
        do_not_count: bool = False,
    ) -> int:
        """Create a bill together with all of its installments. Returns bill ID."""
        pass

    @abstractmethod
    def get_bill(self, user_id: int, bill_id: int) -> Optional[Bill]:
        """Get bill by ID."""
        pass

    @abstractmethod
    def list_bills(
        self,
        user_id: int,
        status: Optional[BillStatus] = None,
        kind: Optional[BillKind] = None,
    ) -> list[Bill]:
        """List bills, newest first."""
        pass

    @abstractmethod
    def update_bill(
        self,
        user_id: int,
        bill_id: int,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        note: Optional[str] = None,
        do_not_count: Optional[bool] = None,
        update_category: bool = False,
        update_note: bool = False,
    ) -> None:
        """Update the user-editable bill fields."""
        pass

    @abstractmethod
    def set_bill_status(self, bill_id: int, status: BillStatus) -> None:
        """Set the derived aggregate status of a bill."""
        pass

    @abstractmethod
    def delete_bill(self, user_id: int, bill_id: int) -> None:
        """Delete a bill with its installments and payments."""
        pass

    # Installment operations
    @abstractmethod
    def get_installment(self, user_id: int, installment_id: int) -> Optional[Installment]:
        """Get installment by ID, scoped through its bill's owner."""
        pass

    @abstractmethod
    def lock_installment(self, user_id: int, installment_id: int) -> Optional[Installment]:
        """Get installment by ID, taking a row lock for the rest of the unit of work."""
        pass

    @abstractmethod
    def list_installments(self, user_id: int, bill_id: Optional[int] = None) -> list[Installment]:
        """List installments ordered by bill and number."""
        pass

    @abstractmethod
    def list_unpaid_installments(
        self,
        user_id: int,
        due_from: Optional[date] = None,
        due_to: Optional[date] = None,
        due_before: Optional[date] = None,
    ) -> list[Installment]:
        """List installments not yet PAID with a due date in range, earliest first."""
        pass

    @abstractmethod
    def update_installment_payment(
        self,
        installment_id: int,
        paid_amount: Decimal,
        status: InstallmentStatus,
        expected_version: int,
    ) -> None:
        """Store an installment's cumulative paid amount and status.

        Raises ConflictError when the row is no longer at expected_version.
        """
        pass

    # Payment operations
    @abstractmethod
    def create_payment(
        self,
        installment_id: int,
        account_id: int,
        amount: Decimal,
        paid_at: datetime,
        note: Optional[str] = None,
    ) -> int:
        """Create a payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, user_id: int, payment_id: int) -> Optional[Payment]:
        """Get payment by ID, scoped through its installment's bill owner."""
        pass

    @abstractmethod
    def list_payments(
        self,
        user_id: int,
        bill_id: Optional[int] = None,
        account_id: Optional[int] = None,
        installment_id: Optional[int] = None,
    ) -> list[Payment]:
        """List payments, newest first."""
        pass

    @abstractmethod
    def delete_payment(self, payment_id: int) -> None:
        """Delete a payment."""
        pass

    # Budget operations
    @abstractmethod
    def upsert_budget(
        self,
        user_id: int,
        category_id: int,
        month: int,
        year: int,
        fixed_amount: Optional[Decimal],
        percentage: Optional[Decimal],
    ) -> int:
        """Create or replace the budget of a category for a month. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, user_id: int, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def list_budgets(self, user_id: int, month: int, year: int) -> list[Budget]:
        """List the budgets of a month."""
        pass

    @abstractmethod
    def delete_budget(self, user_id: int, budget_id: int) -> None:
        """Delete a budget."""
        pass
