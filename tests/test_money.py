"""Tests for money parsing and arithmetic."""

import pytest
from decimal import Decimal
from pocketledger.utils.money import (
    apply_percentage,
    format_money,
    parse_amount,
    percentage_of,
    sum_money,
    to_money,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("R$ 1,234.50", Decimal("1234.50")),
        ("$10", Decimal("10.00")),
        ("-5.5", Decimal("-5.50")),
        ("(20.00)", Decimal("-20.00")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_to_money_goes_through_str_for_floats():
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(0.1 + 0.2) == Decimal("0.30")


def test_to_money_rounds_half_up():
    assert to_money(Decimal("2.345")) == Decimal("2.35")
    assert to_money("2.344") == Decimal("2.34")


def test_to_money_rejects_invalid():
    with pytest.raises(ValueError):
        to_money("twelve")
    with pytest.raises(ValueError):
        to_money(None)


def test_sum_money_empty():
    assert sum_money([]) == Decimal("0.00")


def test_percentage_helpers():
    assert percentage_of(Decimal("25"), Decimal("200")) == Decimal("12.50")
    assert percentage_of(Decimal("25"), Decimal("0")) == Decimal("0.00")
    assert apply_percentage(Decimal("10"), Decimal("3000.00")) == Decimal("300.00")
    assert apply_percentage(Decimal("33.33"), Decimal("100.00")) == Decimal("33.33")


def test_format_money():
    assert format_money(Decimal("1234.5")) == "1,234.50"
