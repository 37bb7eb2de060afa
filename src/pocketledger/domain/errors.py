"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested entity does not exist or belongs to another user."""


class ConflictError(DomainError):
    """Domain conflict, such as a concurrent modification of the same row."""


class InternalError(DomainError):
    """Storage or transport failure. Details are logged, not exposed."""


def user_not_found(user_ref: int | str) -> str:
    """Return message for missing user."""
    return f"User {user_ref} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def bill_not_found(bill_id: int) -> str:
    """Return message for missing payable bill."""
    return f"Bill {bill_id} not found"


def installment_not_found(installment_id: int) -> str:
    """Return message for missing installment."""
    return f"Installment {installment_id} not found"


def payment_not_found(payment_id: int) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def budget_not_found(budget_id: int) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def non_positive_amount(field: str = "Amount") -> str:
    """Return message for an amount that must be positive."""
    return f"{field} must be positive"


def payment_exceeds_remaining(remaining: Decimal) -> str:
    """Return message when a payment is larger than what is left to pay."""
    return f"Payment exceeds the remaining amount; maximum allowed: {remaining:.2f}"


def payment_linked_transaction(transaction_id: int) -> str:
    """Return message when a payment-generated transaction is edited directly."""
    return (
        f"Transaction {transaction_id} was generated by a payment; "
        "reverse the payment instead"
    )


def concurrent_update(entity: str, entity_id: int) -> str:
    """Return message when a row changed between read and write."""
    return f"{entity} {entity_id} was modified concurrently; please try again"
