"""Report commands: cash flow, savings, category breakdown and linked incomes."""

from datetime import date

import click
from ledgerlink.domain.entities import EXPENSE, TRANSACTION_TYPES
from ledgerlink.domain.linking import overall_usage_percent, usage_percent
from ledgerlink.domain.reports import ReportService
from ledgerlink.cli.date_filters import resolve_cli_window
from ledgerlink.cli.session import format_amount, load_ledger_or_exit, short_id
from ledgerlink.utils.date_parser import get_window, month_label


def window_options(command):
    """Attach the --month/--year and period flag options to a command."""
    options = [
        click.option("--month", type=int, help="Month (1-12); omit for the whole year"),
        click.option("--year", type=int, help="Year (default: current year)"),
        click.option("--this-month", is_flag=True, help="Current month (default)"),
        click.option("--last-month", is_flag=True, help="Previous month"),
        click.option("--this-year", is_flag=True, help="Current year"),
        click.option("--last-year", is_flag=True, help="Previous year"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _window_from_options(ctx, month, year, this_month, last_month, this_year, last_year):
    return resolve_cli_window(
        ctx,
        month=month,
        year=year,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
        default_window=get_window("this-month"),
    )


def _window_title(month: int | None, year: int) -> str:
    if month is None:
        return str(year)
    return f"{month_label(month)} {year}"


@click.group()
def report_group():
    """Charts and tables built from your ledger."""
    pass


@report_group.command("cashflow")
@click.option("--year", type=int, help="Year (default: current year)")
@click.pass_context
def cash_flow(ctx, year: int | None):
    """Monthly income, expenses and balance for a year."""
    year = year or date.today().year
    load_ledger_or_exit(ctx)
    reports: ReportService = ctx.obj["reports"]

    click.echo(f"\nCash flow {year}")
    click.echo("-" * 64)
    click.echo(f"{'Month':<8} {'Income':>18} {'Expenses':>18} {'Balance':>18}")
    click.echo("-" * 64)
    for row in reports.cash_flow(year):
        click.echo(
            f"{row.label:<8} {format_amount(row.income):>18} "
            f"{format_amount(row.expenses):>18} {format_amount(row.balance):>18}"
        )


@report_group.command("savings")
@click.option("--year", type=int, help="Year (default: current year)")
@click.pass_context
def savings(ctx, year: int | None):
    """Monthly savings rate and cumulative savings for a year."""
    year = year or date.today().year
    load_ledger_or_exit(ctx)
    reports: ReportService = ctx.obj["reports"]

    click.echo(f"\nSavings {year}")
    click.echo("-" * 56)
    click.echo(f"{'Month':<8} {'Balance':>18} {'Rate':>8} {'Cumulative':>18}")
    click.echo("-" * 56)
    for point in reports.savings(year):
        click.echo(
            f"{point.label:<8} {format_amount(point.balance):>18} "
            f"{point.savings_rate:>7}% {format_amount(point.cumulative_savings):>18}"
        )


@report_group.command("categories")
@window_options
@click.option("--type", "category_type", type=click.Choice(TRANSACTION_TYPES), default=EXPENSE, help="Transaction type (default: expense)")
@click.option("--exclude-pending", is_flag=True, help="Leave pending transactions out")
@click.pass_context
def categories(ctx, month, year, this_month, last_month, this_year, last_year, category_type: str, exclude_pending: bool):
    """Totals per category, largest first."""
    window_month, window_year = _window_from_options(
        ctx, month, year, this_month, last_month, this_year, last_year
    )
    load_ledger_or_exit(ctx)
    reports: ReportService = ctx.obj["reports"]
    rows = reports.categories(
        month=window_month,
        year=window_year,
        type=category_type,
        include_pending=not exclude_pending,
    )

    if not rows:
        click.echo(f"No {category_type} transactions in {_window_title(window_month, window_year)}.")
        return

    click.echo(f"\n{category_type.capitalize()} by category, {_window_title(window_month, window_year)}")
    click.echo("-" * 56)
    for row in rows:
        click.echo(f"{row.name:<24} {format_amount(row.total):>18} {row.percent:>7}% ({row.count})")


@report_group.command("linked")
@window_options
@click.option("--details", is_flag=True, help="List the expenses charged to each income")
@click.pass_context
def linked(ctx, month, year, this_month, last_month, this_year, last_year, details: bool):
    """How much of each linked income the window's expenses have used."""
    window_month, window_year = _window_from_options(
        ctx, month, year, this_month, last_month, this_year, last_year
    )
    ledger = load_ledger_or_exit(ctx)
    report = ledger.linked_incomes_report(month=window_month, year=window_year)

    if not report.incomes:
        click.echo(f"No linked expenses in {_window_title(window_month, window_year)}.")
        return

    click.echo(f"\nLinked incomes, {_window_title(window_month, window_year)}")
    click.echo("-" * 90)
    click.echo(f"{'ID':<10} {'Income':<20} {'Amount':>18} {'Used':>18} {'Remaining':>18}")
    click.echo("-" * 90)
    for item in report.incomes:
        flag = " OVER" if item.is_overallocated else ""
        click.echo(
            f"{short_id(item.id):<10} {item.label[:20]:<20} {format_amount(item.amount):>18} "
            f"{format_amount(item.expenses_linked):>18} {format_amount(item.remaining_balance):>18}"
            f"  {usage_percent(item):.0f}%{flag}"
        )
        if details:
            for expense in item.linked_expenses:
                click.echo(f"{'':<12}- {expense.date} {expense.description[:30]:<30} {format_amount(expense.amount):>16}")
    click.echo("-" * 90)
    click.echo(
        f"Total remaining: {format_amount(report.total_remaining_balance)} "
        f"({overall_usage_percent(report):.0f}% used)"
    )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
