"""Utility functions for ledgerlink."""

from ledgerlink.utils.date_parser import parse_date, parse_iso_date, get_window
from ledgerlink.utils.amount_parser import parse_amount
from ledgerlink.utils.transaction_resolver import resolve_transaction

__all__ = ["parse_date", "parse_iso_date", "get_window", "parse_amount", "resolve_transaction"]
