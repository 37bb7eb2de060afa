"""Date parsing and calendar window utilities."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Calendar dates are stored at midday so that a timezone shift of a few
# hours on storage or retrieval never moves them to a neighbouring day.
CANONICAL_TIME = time(12, 0)


@dataclass(frozen=True)
class MonthWindow:
    """First and last instant of a calendar month."""

    month: int
    year: int
    start: datetime
    end: datetime

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        return self.end.date()

    def contains(self, moment: datetime | date) -> bool:
        """Check whether a date or datetime falls inside the window."""
        if isinstance(moment, datetime):
            return self.start <= moment <= self.end
        return self.first_day <= moment <= self.last_day


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "this month",
      "last month", "next month"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def at_canonical_time(value: date | datetime) -> datetime:
    """Pin a calendar date to the canonical time of day (midday)."""
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, CANONICAL_TIME)


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length.

    ``add_months(date(2024, 1, 31), 1)`` is ``date(2024, 2, 29)``.
    """
    return start + relativedelta(months=months)


def month_window(month: int, year: int) -> MonthWindow:
    """Return the first and last instant of a calendar month.

    Raises:
        ValueError: If month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    start = datetime(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(microseconds=1)
    return MonthWindow(month=month, year=year, start=start, end=end)


def resolve_month(month: Optional[int] = None, year: Optional[int] = None) -> tuple[int, int]:
    """Fill in the current month and/or year for missing values."""
    today = date.today()
    return (month if month is not None else today.month, year if year is not None else today.year)
