"""Money parsing and arithmetic utilities.

All currency amounts are ``Decimal`` values quantized to two places. Floats
are never used for money; they are converted through ``str`` so that
``0.1`` becomes ``Decimal("0.10")`` rather than its binary approximation.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "R$ 123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount quantized to cents

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"R\$|[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    if is_negative:
        amount = -amount
    return to_money(amount)


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Convert a value to a Decimal rounded half-up to cents.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    """Sum amounts, returning ``0.00`` for an empty iterable."""
    total = ZERO
    for value in values:
        total += value
    return to_money(total)


def percentage_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``whole``, or zero when whole <= 0."""
    if whole <= 0:
        return ZERO
    return to_money(part / whole * HUNDRED)


def apply_percentage(percentage: Decimal, base: Decimal) -> Decimal:
    """Return ``percentage`` percent of ``base``."""
    return to_money(Decimal(percentage) / HUNDRED * base)


def format_money(amount: Decimal) -> str:
    """Format an amount for display, e.g. ``1,234.50``."""
    return f"{amount:,.2f}"
