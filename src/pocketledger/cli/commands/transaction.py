"""Transaction management commands."""

from datetime import date

import click
from pocketledger.domain.entities import TransactionKind
from pocketledger.domain.errors import DomainError
from pocketledger.domain.transaction import TransactionService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from pocketledger.cli.resolution import (
    require_user_id,
    resolve_account_or_exit,
    resolve_category_or_exit,
)
from pocketledger.utils.money import format_money

TRANSACTION_KINDS = [kind.value.lower() for kind in TransactionKind]


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


def _add(ctx, kind: TransactionKind, account, amount, description, date_str, category):
    user_id = require_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, user_id, account)
    value = parse_amount_or_exit(ctx, amount)
    txn_date = parse_date_or_exit(ctx, date_str) or date.today()
    category_id = resolve_category_or_exit(ctx, user_id, category) if category else None

    try:
        txn_id = TransactionService(ctx.obj["db"]).create_transaction(
            user_id,
            account_id=account_id,
            kind=kind,
            amount=value,
            description=description,
            date=txn_date,
            category_id=category_id,
        )
        click.echo(f"Created {kind.value.lower()} transaction {txn_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("income")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--amount", required=True, help="Amount (e.g., 123.45)")
@click.option("--description", required=True, help="Description")
@click.option("--date", "date_str", help="Date (YYYY-MM-DD or relative like 'today'); default today")
@click.option("--category", help="Category name, ID or path")
@click.pass_context
def add_income(ctx, account, amount, description, date_str, category):
    """Record income on an account.

    Examples:
        pocketledger transaction income --account Checking --amount 3000 --description Salary
    """
    _add(ctx, TransactionKind.INCOME, account, amount, description, date_str, category)


@transaction_group.command("expense")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--amount", required=True, help="Amount (e.g., 123.45)")
@click.option("--description", required=True, help="Description")
@click.option("--date", "date_str", help="Date (YYYY-MM-DD or relative like 'today'); default today")
@click.option("--category", help="Category name, ID or path")
@click.pass_context
def add_expense(ctx, account, amount, description, date_str, category):
    """Record an expense on an account.

    Examples:
        pocketledger transaction expense --account Wallet --amount 45.90 --description Lunch --category Food
    """
    _add(ctx, TransactionKind.EXPENSE, account, amount, description, date_str, category)


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--kind", type=click.Choice(TRANSACTION_KINDS, case_sensitive=False), help="New kind")
@click.option("--amount", help="New amount")
@click.option("--description", help="New description")
@click.option("--date", "date_str", help="New date")
@click.option("--category", help="Category name, ID or path, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    kind: str | None,
    amount: str | None,
    description: str | None,
    date_str: str | None,
    category: str | None,
):
    """Update a transaction.

    Updates only the fields that are provided. Use --category "" to clear the
    category. Expenses generated by bill payments cannot be edited.
    """
    user_id = require_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, user_id, account) if account is not None else None
    value = parse_amount_or_exit(ctx, amount) if amount is not None else None
    txn_date = parse_date_or_exit(ctx, date_str)

    category_id = None
    clear_category = False
    if category is not None:
        if category == "":
            clear_category = True
        else:
            category_id = resolve_category_or_exit(ctx, user_id, category)

    try:
        TransactionService(ctx.obj["db"]).update_transaction(
            user_id,
            transaction_id,
            account_id=account_id,
            kind=TransactionKind(kind.upper()) if kind else None,
            amount=value,
            description=description,
            date=txn_date,
            category_id=category_id,
            clear_category=clear_category,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int):
    """Delete a transaction.

    To remove an expense generated by a bill payment, reverse the payment.
    """
    user_id = require_user_id(ctx)
    try:
        TransactionService(ctx.obj["db"]).delete_transaction(user_id, transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--kind", type=click.Choice(TRANSACTION_KINDS, case_sensitive=False), help="Only this kind")
@click.option("--category", help="Category name, ID or path")
@click.option("--account", help="Account name or ID")
@click.pass_context
def list_transactions(ctx, start_date, end_date, kind, category, account):
    """View transactions with optional filters, newest first."""
    user_id = require_user_id(ctx)
    start = parse_date_or_exit(ctx, start_date)
    end = parse_date_or_exit(ctx, end_date)
    account_id = resolve_account_or_exit(ctx, user_id, account) if account else None
    category_id = resolve_category_or_exit(ctx, user_id, category) if category else None

    transactions = TransactionService(ctx.obj["db"]).list_transactions(
        user_id,
        start_date=start,
        end_date=end,
        kind=TransactionKind(kind.upper()) if kind else None,
        category_id=category_id,
        account_id=account_id,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        sign = "+" if txn.kind == TransactionKind.INCOME else "-"
        marker = " [payment]" if txn.payment_id is not None else ""
        click.echo(
            f"{txn.id:5d}  {txn.date.date().isoformat()}  {sign + format_money(txn.amount):>13s}  "
            f"{txn.description}{marker}"
        )


@transaction_group.command("transfer")
@click.option("--from", "from_account", required=True, help="Origin account name or ID")
@click.option("--to", "to_account", required=True, help="Destination account name or ID")
@click.option("--amount", required=True, help="Amount (e.g., 123.45)")
@click.option("--date", "date_str", help="Date (YYYY-MM-DD or relative like 'today'); default today")
@click.option("--description", help="Description; defaults to 'Transfer: <from> -> <to>'")
@click.pass_context
def transfer(ctx, from_account, to_account, amount, date_str, description):
    """Move money between two of your accounts.

    Records an expense on the origin and an income on the destination.

    Examples:
        pocketledger transaction transfer --from Checking --to Savings --amount 200
    """
    user_id = require_user_id(ctx)
    from_account_id = resolve_account_or_exit(ctx, user_id, from_account)
    to_account_id = resolve_account_or_exit(ctx, user_id, to_account)
    value = parse_amount_or_exit(ctx, amount)
    txn_date = parse_date_or_exit(ctx, date_str) or date.today()

    try:
        result = TransactionService(ctx.obj["db"]).transfer(
            user_id,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=value,
            date=txn_date,
            description=description,
        )
        click.echo(
            f"Transferred {format_money(result.amount)} "
            f"(transactions {result.expense_id} and {result.income_id})"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def transaction_summary(ctx, start_date, end_date):
    """Show total income, expense and net over a date range."""
    user_id = require_user_id(ctx)
    start = parse_date_or_exit(ctx, start_date)
    end = parse_date_or_exit(ctx, end_date)

    summary = TransactionService(ctx.obj["db"]).get_summary(user_id, start_date=start, end_date=end)
    click.echo(f"Income:       {format_money(summary.total_income):>13s}")
    click.echo(f"Expense:      {format_money(summary.total_expense):>13s}")
    click.echo(f"Net:          {format_money(summary.net):>13s}")
    click.echo(f"Transactions: {summary.count:>13d}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
