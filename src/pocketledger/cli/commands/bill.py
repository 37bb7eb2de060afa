"""Payable bill commands."""

import click
from pocketledger.domain.bill import BillService
from pocketledger.domain.entities import BillKind, BillStatus
from pocketledger.domain.errors import DomainError
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from pocketledger.cli.resolution import require_user_id, resolve_category_or_exit
from pocketledger.utils.money import format_money


@click.group()
def bill_group():
    """Manage bills paid in one or more installments."""
    pass


@bill_group.command("create")
@click.argument("description")
@click.option("--total", required=True, help="Total amount of the bill")
@click.option("--installments", type=int, help="Split into this many monthly installments")
@click.option("--first-due", help="Due date of the first installment")
@click.option("--category", help="Category for the expenses generated by payments")
@click.option("--note", help="Free-text note")
@click.option("--do-not-count", is_flag=True, help="Track the bill but leave it out of totals")
@click.pass_context
def create_bill(ctx, description, total, installments, first_due, category, note, do_not_count):
    """Create a bill.

    Without --installments the bill is a single lump sum.

    Examples:
        pocketledger bill create "Laptop" --total 1000.00 --installments 3 --first-due 2024-01-10
        pocketledger bill create "Dentist" --total 250 --first-due 2024-02-01
    """
    user_id = require_user_id(ctx)
    total_amount = parse_amount_or_exit(ctx, total)
    due = parse_date_or_exit(ctx, first_due)
    category_id = resolve_category_or_exit(ctx, user_id, category) if category else None
    kind = BillKind.INSTALLMENT if installments is not None else BillKind.LUMP_SUM

    try:
        bill_id = BillService(ctx.obj["db"]).create_bill(
            user_id,
            description=description,
            total_amount=total_amount,
            kind=kind,
            category_id=category_id,
            installment_count=installments,
            first_due_date=due,
            note=note,
            do_not_count=do_not_count,
        )
        click.echo(f"Created bill '{description}' (ID: {bill_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@bill_group.command("list")
@click.option("--status", type=click.Choice(["open", "settled"], case_sensitive=False), help="Only this status")
@click.pass_context
def list_bills(ctx, status: str | None):
    """List bills with paid and pending totals."""
    user_id = require_user_id(ctx)
    overviews = BillService(ctx.obj["db"]).list_bills(
        user_id, status=BillStatus(status.upper()) if status else None
    )
    if not overviews:
        click.echo("No bills found.")
        return

    for item in overviews:
        bill = item.bill
        flag = " (not counted)" if bill.do_not_count else ""
        click.echo(
            f"ID: {bill.id:3d} | {bill.description:25s} | {bill.status.value:7s} | "
            f"Total: {format_money(bill.total_amount):>10s} | Paid: {format_money(item.paid_amount):>10s} | "
            f"{item.paid_installments}/{len(item.installments)}{flag}"
        )


@bill_group.command("show")
@click.argument("bill_id", type=int)
@click.pass_context
def show_bill(ctx, bill_id: int):
    """Show a bill with its installments and payments."""
    user_id = require_user_id(ctx)
    try:
        item = BillService(ctx.obj["db"]).get_bill(user_id, bill_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    bill = item.bill
    click.echo(f"{bill.description} [{bill.status.value}]")
    click.echo(f"Total: {format_money(bill.total_amount)}  Paid: {format_money(item.paid_amount)}  "
               f"Pending: {format_money(item.pending_amount)}")
    if bill.note:
        click.echo(f"Note: {bill.note}")
    click.echo("\nInstallments:")
    for inst in item.installments:
        due = inst.due_date.isoformat() if inst.due_date else "-"
        click.echo(
            f"  #{inst.number:<3d} ID: {inst.id:4d}  due {due:10s}  {format_money(inst.amount):>10s}  "
            f"paid {format_money(inst.paid_amount):>10s}  {inst.status.value}"
        )
    if item.payments:
        click.echo("\nPayments:")
        for pay in item.payments:
            click.echo(
                f"  ID: {pay.id:4d}  {pay.paid_at.date().isoformat()}  {format_money(pay.amount):>10s}  "
                f"installment {pay.installment_id}"
            )


@bill_group.command("update")
@click.argument("bill_id", type=int)
@click.option("--description", help="New description")
@click.option("--category", help="Category name, ID or path, or empty string to clear")
@click.option("--note", help="New note, or empty string to clear")
@click.option("--count/--do-not-count", "counted", default=None, help="Include or exclude from totals")
@click.pass_context
def update_bill(ctx, bill_id, description, category, note, counted):
    """Update a bill's description, category, note or counting flag.

    Use --category "" or --note "" to clear the category or the note.
    """
    user_id = require_user_id(ctx)
    category_id = None
    clear_category = False
    if category is not None:
        if category == "":
            clear_category = True
        else:
            category_id = resolve_category_or_exit(ctx, user_id, category)

    try:
        BillService(ctx.obj["db"]).update_bill(
            user_id,
            bill_id,
            description=description,
            category_id=category_id,
            note=note or None,
            do_not_count=None if counted is None else not counted,
            clear_category=clear_category,
            clear_note=note == "",
        )
        click.echo(f"Updated bill {bill_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@bill_group.command("delete")
@click.argument("bill_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_bill(ctx, bill_id: int, yes: bool):
    """Delete a bill with its installments and payments.

    Expenses already recorded by its payments are kept.
    """
    user_id = require_user_id(ctx)
    if not yes and not click.confirm(f"Are you sure you want to delete bill {bill_id}?"):
        click.echo("Deletion cancelled.")
        return
    try:
        BillService(ctx.obj["db"]).delete_bill(user_id, bill_id)
        click.echo(f"Deleted bill {bill_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@bill_group.command("summary")
@click.pass_context
def bills_summary(ctx):
    """Show totals across all bills."""
    user_id = require_user_id(ctx)
    summary = BillService(ctx.obj["db"]).get_summary(user_id)
    click.echo(f"Open amount:   {format_money(summary.total_open):>12s}")
    click.echo(f"Paid amount:   {format_money(summary.total_paid):>12s}")
    click.echo(f"Open bills:    {summary.open_bills}")
    click.echo(f"Settled bills: {summary.settled_bills}")
    click.echo(f"Total bills:   {summary.total_bills}")


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")
