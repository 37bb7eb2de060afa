"""Dashboard command."""

import click
from pocketledger.domain.dashboard import DashboardService
from pocketledger.cli.resolution import require_user_id
from pocketledger.utils.date_parser import resolve_month
from pocketledger.utils.money import format_money


@click.command("dashboard")
@click.option("--month", type=int, help="Month (1-12); default current month")
@click.option("--year", type=int, help="Year; default current year")
@click.pass_context
def dashboard(ctx, month: int | None, year: int | None):
    """Show balances, monthly totals, bills due and budget usage."""
    user_id = require_user_id(ctx)
    month, year = resolve_month(month, year)
    try:
        snap = DashboardService(ctx.obj["db"]).build_snapshot(user_id, month, year)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Dashboard {snap.month:02d}/{snap.year}")
    click.echo("=" * 60)
    click.echo(f"Total balance: {format_money(snap.total_balance)}")
    for item in snap.accounts:
        click.echo(f"  {item.account.name:25s} {format_money(item.balance):>14s}")

    totals = snap.month_totals
    click.echo(
        f"\nIncome: {format_money(totals.income)}  Expenses: {format_money(totals.expense)}  "
        f"Net: {format_money(totals.net)}"
    )
    click.echo(f"Bills due this month: {format_money(snap.bills_due.total_open)} ({snap.bills_due.count})")

    if snap.upcoming:
        click.echo("\nDue this month:")
        for due in snap.upcoming:
            click.echo(
                f"  {due.due_date.isoformat()}  {due.description} #{due.number}  "
                f"{format_money(due.remaining)} (installment {due.installment_id})"
            )
    if snap.overdue:
        click.echo("\nOverdue:")
        for due in snap.overdue:
            click.echo(
                f"  {due.due_date.isoformat()}  {due.description} #{due.number}  "
                f"{format_money(due.remaining)} (installment {due.installment_id})"
            )

    click.echo(
        f"\nBudget: {format_money(snap.budget.total_spent)} of {format_money(snap.budget.total_budgeted)} "
        f"({snap.budget.percent}%)"
    )
    if snap.top_categories:
        click.echo("\nTop categories:")
        for cat in snap.top_categories:
            click.echo(f"  {cat.name:25s} {format_money(cat.amount):>14s}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
