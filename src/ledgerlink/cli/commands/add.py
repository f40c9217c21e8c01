"""Add transaction command."""

import click
from ledgerlink.domain.entities import TRANSACTION_TYPES
from ledgerlink.domain.errors import DomainError
from ledgerlink.cli.error_handling import handle_domain_error
from ledgerlink.cli.session import (
    format_amount,
    load_categories_or_exit,
    load_ledger_or_exit,
    resolve_transaction_or_exit,
    short_id,
)
from ledgerlink.utils.date_parser import parse_date
from ledgerlink.utils.amount_parser import parse_amount


def resolve_category_or_exit(ctx, registry, name: str, transaction_type: str) -> str:
    """Return the registered spelling of a category name, or exit."""
    category = registry.get_category_by_name(name)
    if category is None or category.type != transaction_type:
        click.echo(f"Error: No {transaction_type} category named '{name}'", err=True)
        ctx.exit(1)
    return category.name


@click.command("add")
@click.option(
    "--type",
    "transaction_type",
    required=True,
    type=click.Choice(TRANSACTION_TYPES, case_sensitive=False),
    help="Transaction type",
)
@click.option("--amount", required=True, help="Positive amount (e.g., 123.45 or $1,000)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", required=True, help="Category name (see 'ledgerlink category list')")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--pending", is_flag=True, help="Mark as pending (not yet paid or received)")
@click.option(
    "--link",
    "links",
    multiple=True,
    help="ID or ID prefix of an income funding this expense (repeatable)",
)
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    amount: str,
    description: str,
    category: str,
    date: str,
    pending: bool,
    links: tuple[str, ...],
):
    """Add an income or expense.

    Examples:
        ledgerlink add --type income --amount 1000000 --description "Salary" --category Sueldo
        ledgerlink add --type expense --amount 200000 --description "Rent" --category Casa --link 3f2a
    """
    transaction_type = transaction_type.lower()
    ledger = load_ledger_or_exit(ctx)
    registry = load_categories_or_exit(ctx)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_name = resolve_category_or_exit(ctx, registry, category, transaction_type)
    income_ids = [resolve_transaction_or_exit(ctx, ledger, ref).id for ref in links]

    try:
        txn = ledger.add_transaction(
            type=transaction_type,
            amount=txn_amount,
            description=description,
            category=category_name,
            date=txn_date,
            is_pending=pending,
            linked_income_ids=income_ids,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Type: {txn.type}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {format_amount(txn.amount)}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  Category: {txn.category}")
    if txn.is_pending:
        click.echo("  Status: pending")
    if txn.linked_income_ids:
        click.echo(f"  Linked incomes: {', '.join(short_id(i) for i in txn.linked_income_ids)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
