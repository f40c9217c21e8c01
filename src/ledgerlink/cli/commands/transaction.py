"""Transaction management commands."""

from typing import Iterable

import click
from ledgerlink.domain.entities import TRANSACTION_TYPES, Transaction
from ledgerlink.domain.errors import DomainError
from ledgerlink.domain.ledger import STATUS_PAID, STATUS_PENDING, summarize
from ledgerlink.domain.linking import link_coverage
from ledgerlink.cli.date_filters import resolve_cli_window
from ledgerlink.cli.error_handling import handle_domain_error
from ledgerlink.cli.session import (
    format_amount,
    load_categories_or_exit,
    load_ledger_or_exit,
    resolve_transaction_or_exit,
    short_id,
)
from ledgerlink.cli.commands.add import resolve_category_or_exit
from ledgerlink.utils.date_parser import next_window, parse_date
from ledgerlink.utils.amount_parser import parse_amount


def print_transaction_table(transactions: Iterable[Transaction], verbose: bool = False) -> None:
    """Print transactions as a compact table, or one block per transaction."""
    transactions = list(transactions)
    click.echo(f"\nFound {len(transactions)} transaction(s):")

    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Type: {txn.type}")
            click.echo(f"  Date: {txn.date}")
            click.echo(f"  Amount: {format_amount(txn.amount)}")
            click.echo(f"  Category: {txn.category}")
            click.echo(f"  Description: {txn.description}")
            click.echo(f"  Status: {STATUS_PENDING if txn.is_pending else STATUS_PAID}")
            if txn.linked_income_ids:
                click.echo(f"  Linked incomes: {', '.join(txn.linked_income_ids)}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 100)
        click.echo(
            f"{'ID':<10} {'Date':<12} {'Type':<8} {'Amount':>16} {'Status':<8} {'Category':<16} {'Description':<26}"
        )
        click.echo("-" * 100)
        for txn in transactions:
            status = STATUS_PENDING if txn.is_pending else STATUS_PAID
            click.echo(
                f"{short_id(txn.id):<10} {str(txn.date):<12} {txn.type:<8} {format_amount(txn.amount):>16} "
                f"{status:<8} {txn.category[:16]:<16} {txn.description[:26]:<26}"
            )

    summary = summarize(transactions)
    click.echo("-" * 100)
    click.echo(
        f"Income: {format_amount(summary.total_income)} | "
        f"Expenses: {format_amount(summary.total_expenses)} | "
        f"Pending: {format_amount(summary.pending_total)} | Count: {len(transactions)}"
    )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--month", type=int, help="Month (1-12)")
@click.option("--year", type=int, help="Year")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--search", help="Text to look for in description or category")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), help="Only this type")
@click.option("--status", type=click.Choice([STATUS_PENDING, STATUS_PAID]), help="Only pending or paid")
@click.option("--verbose", "-v", is_flag=True, help="Show full IDs and links")
@click.pass_context
def list_transactions(
    ctx,
    month: int | None,
    year: int | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
    search: str | None,
    transaction_type: str | None,
    status: str | None,
    verbose: bool,
):
    """View transactions with optional filters.

    Without a window every transaction is listed, newest first.
    """
    window_month, window_year = resolve_cli_window(
        ctx,
        month=month,
        year=year,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )
    ledger = load_ledger_or_exit(ctx)

    matches = {txn.id for txn in ledger.search(search, type=transaction_type, status=status)}
    transactions = [
        txn for txn in ledger.filter_by_window(month=window_month, year=window_year) if txn.id in matches
    ]

    if not transactions:
        click.echo("No transactions found.")
        return

    print_transaction_table(transactions, verbose=verbose)


@transaction_group.command("pending")
@click.pass_context
def list_pending(ctx):
    """List every pending transaction."""
    ledger = load_ledger_or_exit(ctx)
    transactions = ledger.pending_transactions()
    if not transactions:
        click.echo("No pending transactions.")
        return
    print_transaction_table(transactions)


@transaction_group.command("update")
@click.argument("transaction_ref")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", help="Positive amount")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category name of the same type")
@click.option("--pending/--paid", "is_pending", default=None, help="Set pending status")
@click.pass_context
def update_transaction(
    ctx,
    transaction_ref: str,
    date: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    is_pending: bool | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. The type cannot be changed.

    Examples:
        ledgerlink transaction update 3f2a --amount 75.00
        ledgerlink transaction update 3f2a --category Servicios --paid
    """
    ledger = load_ledger_or_exit(ctx)
    txn = resolve_transaction_or_exit(ctx, ledger, transaction_ref)

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    category_name = None
    if category is not None:
        registry = load_categories_or_exit(ctx)
        category_name = resolve_category_or_exit(ctx, registry, category, txn.type)

    try:
        ledger.update_transaction(
            txn.id,
            amount=txn_amount,
            description=description,
            category=category_name,
            date=txn_date,
            is_pending=is_pending,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {txn.id}")


@transaction_group.command("delete")
@click.argument("transaction_ref")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_ref: str, yes: bool) -> None:
    """Delete a transaction.

    Expenses linked to a deleted income keep the link; it is ignored in reports.

    Examples:
        ledgerlink transaction delete 3f2a
    """
    ledger = load_ledger_or_exit(ctx)
    txn = resolve_transaction_or_exit(ctx, ledger, transaction_ref)

    if not yes and not click.confirm(
        f"Are you sure you want to delete {txn.type} '{txn.description}' ({format_amount(txn.amount)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_transaction(txn.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {txn.id}")


@transaction_group.command("toggle-pending")
@click.argument("transaction_ref")
@click.pass_context
def toggle_pending(ctx, transaction_ref: str) -> None:
    """Flip a transaction between pending and paid."""
    ledger = load_ledger_or_exit(ctx)
    txn = resolve_transaction_or_exit(ctx, ledger, transaction_ref)
    try:
        updated = ledger.toggle_pending(txn.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    status = STATUS_PENDING if updated.is_pending else STATUS_PAID
    click.echo(f"Transaction {updated.id} is now {status}")


@transaction_group.command("link")
@click.argument("expense_ref")
@click.option("--income", "incomes", multiple=True, help="ID or ID prefix of a funding income (repeatable)")
@click.option("--clear", is_flag=True, help="Remove every link from the expense")
@click.pass_context
def link_transaction(ctx, expense_ref: str, incomes: tuple[str, ...], clear: bool) -> None:
    """Set the incomes that fund an expense, replacing any previous links.

    Examples:
        ledgerlink transaction link 9c1e --income 3f2a --income 77b0
        ledgerlink transaction link 9c1e --clear
    """
    if clear and incomes:
        click.echo("Error: --clear cannot be combined with --income.", err=True)
        ctx.exit(1)
    if not clear and not incomes:
        click.echo("Error: Give at least one --income, or --clear to unlink.", err=True)
        ctx.exit(1)

    ledger = load_ledger_or_exit(ctx)
    expense = resolve_transaction_or_exit(ctx, ledger, expense_ref)
    income_ids = [resolve_transaction_or_exit(ctx, ledger, ref).id for ref in incomes]

    try:
        updated = ledger.link_expense_to_income(expense.id, income_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not updated.linked_income_ids:
        click.echo(f"Expense {updated.id} is no longer linked")
        return

    linked = [ledger.get_transaction(income_id) for income_id in updated.linked_income_ids]
    total, coverage = link_coverage(updated, [txn for txn in linked if txn is not None])
    click.echo(f"Linked expense {updated.id} to {len(updated.linked_income_ids)} income(s)")
    click.echo(f"  Linked income total: {format_amount(total)} ({coverage:.0f}% of the expense)")


@transaction_group.command("copy")
@click.option("--from-month", "source_month", type=click.IntRange(1, 12), required=True, help="Source month (1-12)")
@click.option("--from-year", "source_year", type=int, required=True, help="Source year")
@click.option("--to-month", "target_month", type=click.IntRange(1, 12), help="Target month (default: month after source)")
@click.option("--to-year", "target_year", type=int, help="Target year (default: year of the month after source)")
@click.option("--only-expenses", is_flag=True, help="Copy expenses only")
@click.option("--only-incomes", is_flag=True, help="Copy incomes only")
@click.option("--only-pending", is_flag=True, help="Copy pending transactions only")
@click.pass_context
def copy_transactions(
    ctx,
    source_month: int,
    source_year: int,
    target_month: int | None,
    target_year: int | None,
    only_expenses: bool,
    only_incomes: bool,
    only_pending: bool,
) -> None:
    """Copy a month's transactions into another month.

    Days are kept (clamped to shorter months) and links are not copied.

    Examples:
        ledgerlink transaction copy --from-month 1 --from-year 2024
        ledgerlink transaction copy --from-month 1 --from-year 2024 --to-month 6 --only-expenses
    """
    if only_expenses and only_incomes:
        click.echo("Error: --only-expenses and --only-incomes cannot be combined.", err=True)
        ctx.exit(1)

    default_month, default_year = next_window(source_month - 1, source_year)
    target_month0 = target_month - 1 if target_month is not None else default_month
    if target_year is None:
        target_year = default_year if target_month is None else source_year

    ledger = load_ledger_or_exit(ctx)
    try:
        created = ledger.copy_transactions(
            source_month - 1,
            source_year,
            target_month0,
            target_year,
            only_expenses=only_expenses,
            only_incomes=only_incomes,
            only_pending=only_pending,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Copied {len(created)} transaction(s) to {target_year}-{target_month0 + 1:02d}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
