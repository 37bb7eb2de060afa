"""Personal finance ledger: accounts, bills paid in installments and budgets."""

__version__ = "0.1.0"
