"""Tests for date parsing and calendar windows."""

import pytest
from datetime import date, datetime, timedelta
from dateutil.relativedelta import relativedelta
from pocketledger.utils.date_parser import (
    add_months,
    at_canonical_time,
    month_window,
    parse_date,
    resolve_month,
)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today():
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """'last month' is the first day of the previous month."""
    expected = (date.today() - relativedelta(months=1)).replace(day=1)
    assert parse_date("last month") == expected


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_canonical_time_is_midday():
    assert at_canonical_time(date(2024, 3, 1)) == datetime(2024, 3, 1, 12, 0)
    assert at_canonical_time(datetime(2024, 3, 1, 23, 59)) == datetime(2024, 3, 1, 12, 0)


def test_add_months_clamps_day():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 11, 10), 2) == date(2025, 1, 10)


def test_month_window_bounds():
    window = month_window(2, 2024)
    assert window.start == datetime(2024, 2, 1)
    assert window.end.date() == date(2024, 2, 29)
    assert window.contains(datetime(2024, 2, 29, 23, 59, 59))
    assert not window.contains(datetime(2024, 3, 1))
    assert window.contains(date(2024, 2, 1))


def test_month_window_rejects_bad_month():
    with pytest.raises(ValueError):
        month_window(13, 2024)


def test_resolve_month_defaults_to_today():
    today = date.today()
    assert resolve_month() == (today.month, today.year)
    assert resolve_month(3) == (3, today.year)
    assert resolve_month(3, 2023) == (3, 2023)
