"""Installment payment commands."""

import click
from pocketledger.domain.errors import DomainError
from pocketledger.domain.payment import PaymentService
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from pocketledger.cli.resolution import require_user_id, resolve_account_or_exit
from pocketledger.utils.money import format_money


@click.group()
def payment_group():
    """Pay installments and reverse payments."""
    pass


@payment_group.command("pay")
@click.argument("installment_id", type=int)
@click.option("--account", required=True, help="Account the money comes from (name or ID)")
@click.option("--amount", required=True, help="Amount to pay, at most what is left on the installment")
@click.option("--date", "date_str", help="Payment date; default today")
@click.option("--note", help="Free-text note")
@click.pass_context
def pay(ctx, installment_id: int, account: str, amount: str, date_str: str | None, note: str | None):
    """Pay an installment, fully or partially.

    The payment is recorded as an expense on the account.

    Examples:
        pocketledger payment pay 12 --account Checking --amount 333.33
    """
    user_id = require_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, user_id, account)
    value = parse_amount_or_exit(ctx, amount)
    paid_on = parse_date_or_exit(ctx, date_str)

    try:
        result = PaymentService(ctx.obj["db"]).pay(
            user_id,
            installment_id=installment_id,
            account_id=account_id,
            amount=value,
            payment_date=paid_on,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Recorded payment {result.payment.id} of {format_money(result.payment.amount)}; "
        f"installment is now {result.installment_status.value.lower()}"
    )
    if result.bill_settled:
        click.echo("All installments paid; bill settled.")


@payment_group.command("undo")
@click.argument("payment_id", type=int)
@click.pass_context
def undo(ctx, payment_id: int):
    """Reverse a payment and remove its expense."""
    user_id = require_user_id(ctx)
    try:
        reversal = PaymentService(ctx.obj["db"]).unpay(user_id, payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Reversed payment {payment_id}; installment is now {reversal.installment_status.value.lower()}"
    )
    if reversal.bill_reopened:
        click.echo("Bill reopened.")


@payment_group.command("list")
@click.option("--bill", "bill_id", type=int, help="Only payments of this bill")
@click.option("--account", help="Only payments from this account (name or ID)")
@click.pass_context
def list_payments(ctx, bill_id: int | None, account: str | None):
    """List payments, newest first."""
    user_id = require_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, user_id, account) if account else None
    payments = PaymentService(ctx.obj["db"]).list_payments(user_id, bill_id=bill_id, account_id=account_id)
    if not payments:
        click.echo("No payments found.")
        return

    for pay in payments:
        note = f"  {pay.note}" if pay.note else ""
        click.echo(
            f"ID: {pay.id:4d}  {pay.paid_at.date().isoformat()}  {format_money(pay.amount):>10s}  "
            f"installment {pay.installment_id}  account {pay.account_id}{note}"
        )


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
