"""Monthly budget commands."""

import click
from pocketledger.domain.budget import BudgetService
from pocketledger.domain.entities import BudgetLimitKind
from pocketledger.domain.errors import DomainError
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.resolution import require_user_id, resolve_category_or_exit
from pocketledger.utils.date_parser import resolve_month
from pocketledger.utils.money import format_money


@click.group()
def budget_group():
    """Manage monthly category budgets."""
    pass


@budget_group.command("set")
@click.argument("category")
@click.option("--amount", help="Fixed monthly limit")
@click.option("--percent", help="Limit as a percentage of the month's income")
@click.option("--month", type=int, help="Month (1-12); default current month")
@click.option("--year", type=int, help="Year; default current year")
@click.pass_context
def set_budget(ctx, category: str, amount: str | None, percent: str | None, month, year):
    """Set the budget of a category for a month.

    Setting a budget again replaces the previous one.

    Examples:
        pocketledger budget set Food --amount 800
        pocketledger budget set Leisure --percent 10 --month 3 --year 2024
    """
    user_id = require_user_id(ctx)
    category_id = resolve_category_or_exit(ctx, user_id, category)
    month, year = resolve_month(month, year)
    try:
        budget_id = BudgetService(ctx.obj["db"]).set_budget(
            user_id, category_id, month, year, fixed_amount=amount, percentage=percent
        )
        click.echo(f"Budget {budget_id} set for {month:02d}/{year}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@budget_group.command("delete")
@click.argument("budget_id", type=int)
@click.pass_context
def delete_budget(ctx, budget_id: int):
    """Delete a budget."""
    user_id = require_user_id(ctx)
    try:
        BudgetService(ctx.obj["db"]).delete_budget(user_id, budget_id)
        click.echo(f"Deleted budget {budget_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@budget_group.command("report")
@click.option("--month", type=int, help="Month (1-12); default current month")
@click.option("--year", type=int, help="Year; default current year")
@click.pass_context
def budget_report(ctx, month, year):
    """Show spending against each budget of a month."""
    user_id = require_user_id(ctx)
    month, year = resolve_month(month, year)
    service = BudgetService(ctx.obj["db"])
    try:
        report = service.evaluate(user_id, month, year)
        summary = service.get_summary(user_id, month, year)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Budgets for {month:02d}/{year} (income: {format_money(report.total_income)})")
    click.echo("-" * 80)
    if not report.statuses:
        click.echo("No budgets set.")
    for status in report.statuses:
        limit = format_money(status.limit_amount)
        if status.limit_kind == BudgetLimitKind.PERCENTAGE:
            limit = f"{limit} ({status.budget.percentage}%)"
        click.echo(
            f"ID: {status.budget.id:3d} | {status.category_name:20s} | Limit: {limit:>20s} | "
            f"Spent: {format_money(status.spent):>10s} | {status.percent_used}%"
        )
    click.echo("-" * 80)
    click.echo(
        f"Budgeted: {format_money(summary.total_budgeted)}  Spent: {format_money(summary.total_spent)}  "
        f"Available: {format_money(summary.available)}"
    )


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
