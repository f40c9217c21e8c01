"""CLI helpers for loading the signed-in user's data and resolving references."""

from __future__ import annotations

from decimal import Decimal

import click
from ledgerlink.domain.category import CategoryRegistry
from ledgerlink.domain.entities import Transaction
from ledgerlink.domain.errors import DomainError
from ledgerlink.domain.ledger import LedgerStore
from ledgerlink.cli.error_handling import handle_domain_error


def load_ledger_or_exit(ctx: click.Context) -> LedgerStore:
    """Return the ledger loaded for the current session, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    ledger: LedgerStore = ctx.obj["ledger"]
    try:
        ledger.load()
    except DomainError as exc:
        handle_domain_error(ctx, exc)
    return ledger


def load_categories_or_exit(ctx: click.Context) -> CategoryRegistry:
    """Return the category registry with the user's custom categories loaded."""
    registry: CategoryRegistry = ctx.obj["categories"]
    try:
        registry.load()
    except DomainError as exc:
        handle_domain_error(ctx, exc)
    return registry


def resolve_transaction_or_exit(ctx: click.Context, ledger: LedgerStore, reference: str) -> Transaction:
    """Resolve a full transaction ID or unique ID prefix, or exit."""
    try:
        return ledger.resolve(reference)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def format_amount(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def short_id(transaction_id: str) -> str:
    return transaction_id[:8]
