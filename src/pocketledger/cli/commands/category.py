"""Category management commands."""

import click
from pocketledger.domain.category import CategoryService
from pocketledger.domain.entities import CategoryKind
from pocketledger.domain.errors import DomainError
from pocketledger.cli.error_handling import handle_domain_error
from pocketledger.cli.resolution import require_user_id, resolve_category_or_exit

CATEGORY_KINDS = [kind.value.lower() for kind in CategoryKind]


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option("--kind", type=click.Choice(CATEGORY_KINDS, case_sensitive=False), default="expense",
              help="Category kind (default: expense); subcategories take the parent's kind")
@click.option("--parent", help="Parent category name or ID")
@click.option("--color", help="Color tag")
@click.option("--icon", help="Icon name")
@click.pass_context
def create_category(ctx, name: str, kind: str, parent: str | None, color: str | None, icon: str | None):
    """Create a new category.

    Examples:
        pocketledger category create "Food"
        pocketledger category create "Groceries" --parent "Food"
        pocketledger category create "Salary" --kind income
    """
    user_id = require_user_id(ctx)
    service = CategoryService(ctx.obj["db"])
    parent_id = resolve_category_or_exit(ctx, user_id, parent) if parent else None

    try:
        category_id = service.create_category(
            user_id,
            name=name,
            kind=CategoryKind(kind.upper()),
            color=color,
            icon=icon,
            parent_id=parent_id,
        )
        click.echo(f"Created category '{name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories in tree format."""
    user_id = require_user_id(ctx)
    tree = CategoryService(ctx.obj["db"]).get_category_tree(user_id)
    if not tree:
        click.echo("No categories found.")
        return

    for node in tree:
        click.echo(f"{node.name} [{node.kind.value.lower()}] (ID: {node.id})")
        for child in node.children:
            click.echo(f"  └─ {child.name} (ID: {child.id})")


@category_group.command("update")
@click.argument("category")
@click.option("--name", help="New name")
@click.option("--kind", type=click.Choice(CATEGORY_KINDS, case_sensitive=False),
              help="New kind (top-level categories only)")
@click.option("--color", help="New color tag")
@click.option("--icon", help="New icon name")
@click.pass_context
def update_category(ctx, category: str, name: str | None, kind: str | None, color: str | None, icon: str | None):
    """Update a category.

    CATEGORY can be a name, an ID or a path like 'Food > Groceries'.
    """
    user_id = require_user_id(ctx)
    category_id = resolve_category_or_exit(ctx, user_id, category)
    try:
        CategoryService(ctx.obj["db"]).update_category(
            user_id,
            category_id,
            name=name,
            kind=CategoryKind(kind.upper()) if kind else None,
            color=color,
            icon=icon,
        )
        click.echo(f"Updated category {category_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category.

    Past transactions keep their category.
    """
    user_id = require_user_id(ctx)
    category_id = resolve_category_or_exit(ctx, user_id, category)
    try:
        CategoryService(ctx.obj["db"]).delete_category(user_id, category_id)
        click.echo(f"Deleted category {category_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
