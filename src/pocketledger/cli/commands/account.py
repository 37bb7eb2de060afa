"""Account management commands."""

import click
from pocketledger.domain.account import AccountService
from pocketledger.domain.balance import BalanceService
from pocketledger.domain.entities import AccountKind
from pocketledger.domain.errors import DomainError
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.parsing import parse_amount_or_exit
from pocketledger.cli.resolution import require_user_id, resolve_account_or_exit
from pocketledger.utils.money import format_money

ACCOUNT_KINDS = [kind.value.lower() for kind in AccountKind]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--kind", type=click.Choice(ACCOUNT_KINDS, case_sensitive=False), default="checking",
              help="Account kind (default: checking)")
@click.option("--opening-balance", default="0", help="Opening balance (fixed after creation)")
@click.option("--color", help="Color tag, e.g. '#22c55e'")
@click.pass_context
def create_account(ctx, name: str, kind: str, opening_balance: str, color: str | None):
    """Create a new account.

    Examples:
        pocketledger account create "Wallet" --kind wallet
        pocketledger account create "Checking" --opening-balance 500.00
    """
    user_id = require_user_id(ctx)
    service = AccountService(ctx.obj["db"])
    opening = parse_amount_or_exit(ctx, opening_balance)

    try:
        account_id = service.create_account(
            user_id, name=name, kind=AccountKind(kind.upper()), opening_balance=opening, color=color
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deleted accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List accounts with their current balance."""
    user_id = require_user_id(ctx)
    balances = BalanceService(ctx.obj["db"]).list_balances(user_id, include_inactive=include_inactive)
    if not balances:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for item in balances:
        acc = item.account
        suffix = "" if acc.active else " (deleted)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.kind.value:10s} | "
            f"Balance: {format_money(item.balance):>12s}{suffix}"
        )


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_balance(ctx, account: str):
    """Show the balance breakdown of an account.

    ACCOUNT can be an account name or ID.
    """
    user_id = require_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, user_id, account)
    try:
        breakdown = BalanceService(ctx.obj["db"]).get_breakdown(user_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Opening balance: {format_money(breakdown.opening_balance):>12s}")
    click.echo(f"Income:          {format_money(breakdown.total_income):>12s}")
    click.echo(f"Expenses:        {format_money(breakdown.total_expense):>12s}")
    click.echo(f"Bill payments:   {format_money(breakdown.total_payments):>12s}")
    click.echo(f"Current balance: {format_money(breakdown.current_balance):>12s}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--kind", type=click.Choice(ACCOUNT_KINDS, case_sensitive=False), help="New account kind")
@click.option("--color", help="New color tag")
@click.pass_context
def update_account(ctx, account: str, name: str | None, kind: str | None, color: str | None):
    """Update an account's name, kind or color.

    The opening balance cannot be changed.
    """
    user_id = require_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, user_id, account)
    try:
        AccountService(ctx.obj["db"]).update_account(
            user_id,
            account_id,
            name=name,
            kind=AccountKind(kind.upper()) if kind else None,
            color=color,
        )
        click.echo(f"Updated account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool):
    """Delete an account.

    The account is hidden from listings but keeps its history, so past
    balances and reports do not change.
    """
    user_id = require_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, user_id, account)
    service = AccountService(ctx.obj["db"])
    account_obj = service.get_account(user_id, account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(user_id, account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
