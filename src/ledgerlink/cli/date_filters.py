"""CLI helpers for month/year window resolution."""

from datetime import date

import click

from ledgerlink.utils.date_parser import get_window

PERIOD_OPTIONS = "--this-month, --last-month, --this-year, --last-year"


def resolve_cli_window(
    ctx,
    *,
    month: int | None,
    year: int | None,
    period_flags: dict[str, bool],
    default_window: tuple[int | None, int] | None = None,
    today: date | None = None,
) -> tuple[int | None, int | None]:
    """Resolve a (zero-based month, year) window from period flags or --month/--year.

    ``month`` is entered 1-12 on the command line. A month without a year
    means that month of the current year.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({PERIOD_OPTIONS}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (month is not None or year is not None):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --month or --year.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                return get_window(period, today=today)

    if month is not None and not 1 <= month <= 12:
        click.echo(f"Error: Month must be between 1 and 12, got {month}", err=True)
        ctx.exit(1)

    if month is None and year is None:
        if default_window is not None:
            return default_window
        return None, None

    if year is None:
        year = (today or date.today()).year
    return (month - 1 if month is not None else None), year
