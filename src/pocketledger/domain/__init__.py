"""Domain layer for pocketledger application."""

from importlib import import_module

# Services import the database interface, which imports domain entities, so
# they are resolved lazily to avoid circular imports.
_SERVICES = {
    "UserService": "pocketledger.domain.user",
    "AccountService": "pocketledger.domain.account",
    "CategoryService": "pocketledger.domain.category",
    "TransactionService": "pocketledger.domain.transaction",
    "BillService": "pocketledger.domain.bill",
    "BalanceService": "pocketledger.domain.balance",
    "PaymentService": "pocketledger.domain.payment",
    "BudgetService": "pocketledger.domain.budget",
    "DashboardService": "pocketledger.domain.dashboard",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
