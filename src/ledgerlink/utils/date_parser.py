"""Date parsing utilities."""

import calendar
import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_iso_date(date_str: str) -> date:
    """Parse a literal ``YYYY-MM-DD`` string component by component.

    No timezone is involved, so "2025-01-31" is always January 31st.

    Raises:
        ValueError: If the string is not a valid calendar date in that format
    """
    match = _ISO_DATE.match(date_str.strip())
    if match is None:
        raise ValueError(f"Invalid date format '{date_str}', expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Invalid date '{date_str}': {e}")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Literal dates: "2024-01-15" (parsed without any timezone handling)
    - Free-form dates: "January 15, 2024", "15 Jan 2024"
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if _ISO_DATE.match(date_str):
        return parse_iso_date(date_str)

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # "last/this/next" + month or year resolve to the first day of that period
    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_window(period: str, today: Optional[date] = None) -> tuple[Optional[int], int]:
    """Get the (month, year) window for a named period.

    Months are zero-based (0 = January). Year periods return ``None`` as month.

    Args:
        period: One of this-month, last-month, this-year, last-year
        today: Reference date, defaults to the current date

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.month - 1, today.year
    elif period == "last-month":
        previous = today - relativedelta(months=1)
        return previous.month - 1, previous.year
    elif period == "this-year":
        return None, today.year
    elif period == "last-year":
        return None, today.year - 1

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, last-month, this-year, last-year"
    )


def next_window(month: int, year: int) -> tuple[int, int]:
    """Return the (month, year) following a zero-based month window."""
    if month == 11:
        return 0, year + 1
    return month + 1, year


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date in a zero-based month, pulling ``day`` back to the month's last day."""
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day, last_day))


def month_label(month: int) -> str:
    """Short English label for a zero-based month."""
    return MONTH_LABELS[month]
