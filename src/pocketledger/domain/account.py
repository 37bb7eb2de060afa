"""Account domain service."""

from decimal import Decimal
from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import Account as AccountEntity, AccountKind
from pocketledger.utils.money import to_money

DEFAULT_ACCOUNT_COLOR = "#22c55e"


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        user_id: int,
        name: str,
        kind: AccountKind = AccountKind.CHECKING,
        opening_balance: Decimal | int | str = 0,
        color: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            user_id: Owning user ID
            name: Account name
            kind: Account kind
            opening_balance: Balance before any transaction; fixed after creation
            color: Display color tag

        Returns:
            Account ID

        Raises:
            ValidationError: If name is blank or opening balance is not a number
            ConflictError: If an active account with the same name exists
        """
        name = name.strip()
        if not name:
            raise errors.ValidationError("Account name is required")
        try:
            opening = to_money(opening_balance)
        except ValueError as e:
            raise errors.ValidationError(str(e)) from e

        # Check if account with same name exists
        for acc in self.db.list_accounts(user_id):
            if acc.name == name:
                raise errors.ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            user_id=user_id,
            name=name,
            kind=AccountKind(kind),
            opening_balance=opening,
            color=color or DEFAULT_ACCOUNT_COLOR,
        )

    def get_account(self, user_id: int, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(user_id, account_id)

    def require_account(self, user_id: int, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(user_id, account_id)
        if account is None:
            raise errors.NotFoundError(errors.account_not_found(account_id))
        return account

    def list_accounts(self, user_id: int, include_inactive: bool = False) -> list[AccountEntity]:
        """List accounts.

        Returns:
            List of account entities, active ones only unless asked otherwise
        """
        return self.db.list_accounts(user_id, include_inactive=include_inactive)

    def update_account(
        self,
        user_id: int,
        account_id: int,
        name: Optional[str] = None,
        kind: Optional[AccountKind] = None,
        color: Optional[str] = None,
    ) -> None:
        """Update an account's name, kind or color.

        Raises:
            NotFoundError: If account not found
            ValidationError: If the new name is blank
            ConflictError: If the new name is taken by another active account
        """
        self.require_account(user_id, account_id)

        if name is not None:
            name = name.strip()
            if not name:
                raise errors.ValidationError("Account name is required")
            # Check for duplicate names (excluding current account)
            for acc in self.db.list_accounts(user_id):
                if acc.id != account_id and acc.name == name:
                    raise errors.ConflictError(f"Account with name '{name}' already exists")

        self.db.update_account(
            user_id,
            account_id,
            name=name,
            kind=AccountKind(kind) if kind is not None else None,
            color=color,
        )

    def delete_account(self, user_id: int, account_id: int) -> None:
        """Soft-delete an account.

        The account keeps its transactions and payments so historical
        balances stay correct; it only disappears from listings.

        Raises:
            NotFoundError: If account not found
        """
        self.require_account(user_id, account_id)
        self.db.deactivate_account(user_id, account_id)

    def resolve_account(self, user_id: int, account: str | int) -> int:
        """Resolve account name or ID to account ID.

        Raises:
            NotFoundError: If account is not found
        """
        if isinstance(account, int) or str(account).isdigit():
            account_id = int(account)
            self.require_account(user_id, account_id)
            return account_id

        for acc in self.db.list_accounts(user_id):
            if acc.name == account:
                return acc.id
        raise errors.NotFoundError(f"Account '{account}' not found")
