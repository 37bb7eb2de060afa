"""Main CLI entry point."""

import logging

import click
from pocketledger import __version__
from pocketledger.database.factories import create_database

# Import and register all commands at module level
from pocketledger.cli.commands import (
    user,
    account,
    category,
    transaction,
    bill,
    payment,
    budget,
    dashboard,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(__version__, prog_name="pocketledger")
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides POCKETLEDGER_DB_PATH environment variable)",
    envvar="POCKETLEDGER_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="POCKETLEDGER_DATABASE_URL",
)
@click.option(
    "--user",
    "user_ref",
    help="Acting user ID or e-mail",
    envvar="POCKETLEDGER_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="POCKETLEDGER_LOG_LEVEL",
    help="Logging level (default: WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, user_ref: str | None, log_level: str):
    """Pocketledger - personal finance ledger.

    Track accounts, income and expenses, bills paid in installments and
    monthly category budgets. Account balances are always derived from the
    recorded transactions and payments.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)
    ctx.obj["user"] = user_ref

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
bill.register_commands(cli)
payment.register_commands(cli)
budget.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
