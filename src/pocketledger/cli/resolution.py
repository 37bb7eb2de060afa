"""CLI helpers for resolving the acting user, accounts and categories."""

from __future__ import annotations

import click

from pocketledger.domain.account import AccountService
from pocketledger.domain.category import CategoryService
from pocketledger.domain.errors import DomainError
from pocketledger.domain.user import UserService
from pocketledger.cli.error_handling import handle_domain_error


def require_user_id(ctx: click.Context) -> int:
    """Resolve the --user option (ID or e-mail), or exit with a CLI error."""
    user_ref = ctx.obj.get("user")
    if not user_ref:
        click.echo("Error: no user selected; pass --user or set POCKETLEDGER_USER", err=True)
        ctx.exit(1)
    try:
        return UserService(ctx.obj["db"]).resolve_user(user_ref).id
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_account_or_exit(ctx: click.Context, user_id: int, account: str | int) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return AccountService(ctx.obj["db"]).resolve_account(user_id, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_category_or_exit(ctx: click.Context, user_id: int, category: str) -> int:
    """Resolve a category ID, name or 'Parent > Child' path, or exit with a CLI error."""
    if category.isdigit():
        return int(category)

    categories = CategoryService(ctx.obj["db"]).list_categories(user_id)
    by_id = {c.id: c for c in categories}
    parts = [part.strip() for part in category.split(">")]
    for cat in categories:
        if len(parts) == 1 and cat.name == parts[0]:
            return cat.id
        if len(parts) == 2 and cat.name == parts[1] and cat.parent_id in by_id:
            if by_id[cat.parent_id].name == parts[0]:
                return cat.id
    click.echo(f"Error: Category '{category}' not found", err=True)
    ctx.exit(1)
