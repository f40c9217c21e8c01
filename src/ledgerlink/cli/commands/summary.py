"""Summary command."""

import click
from ledgerlink.cli.date_filters import resolve_cli_window
from ledgerlink.cli.session import format_amount, load_ledger_or_exit
from ledgerlink.utils.date_parser import get_window, month_label


@click.command("summary")
@click.option("--month", type=int, help="Month (1-12); omit for the whole year")
@click.option("--year", type=int, help="Year (default: current year)")
@click.option("--this-month", is_flag=True, help="Current month (default)")
@click.option("--last-month", is_flag=True, help="Previous month")
@click.option("--this-year", is_flag=True, help="Current year")
@click.option("--last-year", is_flag=True, help="Previous year")
@click.pass_context
def summary(
    ctx,
    month: int | None,
    year: int | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """Show income, expense, balance and pending totals for a month or year.

    Pending expenses are left out of the expense total and shown under
    pending instead.
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
        default_window=get_window("this-month"),
    )
    ledger = load_ledger_or_exit(ctx)

    if window_month is None:
        result = ledger.year_summary(window_year)
        title = f"{window_year}"
    else:
        result = ledger.month_summary(window_month, window_year)
        title = f"{month_label(window_month)} {window_year}"

    click.echo(f"\nSummary for {title}")
    click.echo("-" * 40)
    click.echo(f"{'Income':<20} {format_amount(result.total_income):>19}")
    click.echo(f"{'Expenses':<20} {format_amount(result.total_expenses):>19}")
    click.echo(f"{'Balance':<20} {format_amount(result.net_balance):>19}")
    click.echo(f"{'Pending':<20} {format_amount(result.pending_total):>19}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
