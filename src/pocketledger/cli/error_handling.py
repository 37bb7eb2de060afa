"""CLI error handling helpers."""

import click

from pocketledger.domain.errors import DomainError, InternalError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Internal errors exit with status 2 and a generic message; their details
    have already been logged by the storage layer.
    """
    if isinstance(error, InternalError):
        click.echo("Error: internal failure, please try again later", err=True)
        ctx.exit(2)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
