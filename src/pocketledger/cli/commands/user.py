"""User commands."""

import click
from pocketledger.domain.errors import DomainError
from pocketledger.domain.user import UserService
from pocketledger.cli.error_handling import handle_domain_error


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("name")
@click.argument("email")
@click.pass_context
def create_user(ctx, name: str, email: str):
    """Create a user.

    Examples:
        pocketledger user create "Ana Souza" ana@example.com
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(name=name, email=email)
        click.echo(f"Created user '{name}' (ID: {user_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
