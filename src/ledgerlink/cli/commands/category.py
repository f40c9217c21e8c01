"""Category management commands."""

import click
from ledgerlink.domain.category import CategoryRegistry
from ledgerlink.domain.entities import TRANSACTION_TYPES, Category
from ledgerlink.domain.errors import DomainError
from ledgerlink.cli.error_handling import handle_domain_error
from ledgerlink.cli.session import load_categories_or_exit


def print_categories(registry: CategoryRegistry, categories: list[Category]) -> None:
    """Print categories grouped by type."""
    for category_type in TRANSACTION_TYPES:
        group = [cat for cat in categories if cat.type == category_type]
        if not group:
            continue
        click.echo(f"\n{category_type.capitalize()}:")
        for cat in group:
            marker = "" if registry.is_builtin(cat.id) else " [custom]"
            click.echo(f"  {cat.name} (ID: {cat.id}){marker}")


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(TRANSACTION_TYPES), help="Only this type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List built-in and custom categories."""
    registry = load_categories_or_exit(ctx)
    print_categories(registry, registry.all_categories(type=category_type))


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(TRANSACTION_TYPES, case_sensitive=False),
    default="expense",
    help="Category type (default: expense)",
)
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a custom category."""
    registry = load_categories_or_exit(ctx)
    try:
        category = registry.add_category(name=name, type=category_type.lower())
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {category.type} category '{category.name}' (ID: {category.id})")


@category_group.command("delete")
@click.argument("category_ref")
@click.pass_context
def delete_category(ctx, category_ref: str):
    """Delete a custom category by ID or name.

    Transactions keep the category name they were saved with.
    """
    registry = load_categories_or_exit(ctx)
    category = registry.get_category(category_ref) or registry.get_category_by_name(category_ref)
    category_id = category.id if category is not None else category_ref
    try:
        registry.delete_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{category.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
