"""CLI helpers for parsing amounts and dates."""

from datetime import date
from decimal import Decimal

import click

from pocketledger.utils.date_parser import parse_date
from pocketledger.utils.money import parse_amount


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)
