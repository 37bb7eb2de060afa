"""User domain service."""

from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import User


class UserService:
    """Service for owner records. Authentication lives outside this package."""

    def __init__(self, db: Database):
        self.db = db

    def create_user(self, name: str, email: str) -> int:
        """Create a user.

        Raises:
            ValidationError: If name or e-mail is blank
            ConflictError: If the e-mail is already registered
        """
        name = name.strip()
        email = email.strip().lower()
        if not name:
            raise errors.ValidationError("Name is required")
        if not email or "@" not in email:
            raise errors.ValidationError(f"Invalid e-mail address '{email}'")
        if self.db.get_user_by_email(email) is not None:
            raise errors.ConflictError(f"User with e-mail '{email}' already exists")
        return self.db.create_user(name=name, email=email)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get_user(user_id)

    def resolve_user(self, user_ref: str | int) -> User:
        """Resolve a user ID or e-mail address to a user.

        Raises:
            NotFoundError: If no such user exists
        """
        user = None
        if isinstance(user_ref, int) or str(user_ref).isdigit():
            user = self.db.get_user(int(user_ref))
        else:
            user = self.db.get_user_by_email(str(user_ref).strip().lower())
        if user is None:
            raise errors.NotFoundError(errors.user_not_found(user_ref))
        return user
