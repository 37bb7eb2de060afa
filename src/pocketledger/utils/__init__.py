"""Utility functions for pocketledger."""

from pocketledger.utils.date_parser import parse_date, month_window, at_canonical_time
from pocketledger.utils.money import parse_amount, to_money

__all__ = ["parse_date", "month_window", "at_canonical_time", "parse_amount", "to_money"]
