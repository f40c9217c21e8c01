"""Linking and reconciliation of expenses against the incomes that fund them."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Sequence

from ledgerlink.domain.entities import (
    LinkedIncome,
    LinkedIncomesReport,
    Transaction,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def income_label(income: Transaction) -> str:
    """Human identifier for an income in a report."""
    return income.category or income.description or income.id


def linked_incomes_report(
    all_transactions: Sequence[Transaction],
    window_transactions: Iterable[Transaction],
) -> LinkedIncomesReport:
    """Compute how much of each linked income the window's expenses consume.

    Only expenses from ``window_transactions`` contribute, pending ones
    included. Referenced incomes are looked up in ``all_transactions`` so an
    income dated outside the window still resolves. IDs that resolve to
    nothing are dropped. Each entry of ``linked_income_ids`` contributes once,
    so a repeated ID would be counted twice; the ledger store removes repeats
    when links are written.

    Remaining balances are never clamped and may be negative.

    Args:
        all_transactions: The whole ledger
        window_transactions: Ledger rows already filtered to the reporting window

    Returns:
        LinkedIncomesReport with one entry per resolved income, in first-link order
    """
    expenses_by_income: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expense_details_by_income: dict[str, list[Transaction]] = defaultdict(list)

    for txn in window_transactions:
        if not txn.is_expense or not txn.linked_income_ids:
            continue
        for income_id in txn.linked_income_ids:
            expenses_by_income[income_id] += txn.amount
            expense_details_by_income[income_id].append(txn)

    by_id = {txn.id: txn for txn in all_transactions}

    incomes: list[LinkedIncome] = []
    for income_id, expenses_linked in expenses_by_income.items():
        income = by_id.get(income_id)
        if income is None:
            logger.debug("Dropping dangling income reference %s", income_id)
            continue
        incomes.append(
            LinkedIncome(
                income=income,
                label=income_label(income),
                expenses_linked=expenses_linked,
                remaining_balance=income.amount - expenses_linked,
                linked_expenses=tuple(expense_details_by_income[income_id]),
            )
        )

    total_remaining = sum((item.remaining_balance for item in incomes), ZERO)
    return LinkedIncomesReport(incomes=tuple(incomes), total_remaining_balance=total_remaining)


def usage_percent(linked: LinkedIncome) -> float:
    """Share of an income consumed, capped at 100 for display."""
    if linked.amount > 0:
        return min(float(linked.expenses_linked / linked.amount * 100), 100.0)
    return 0.0


def overall_usage_percent(report: LinkedIncomesReport) -> float:
    """Share of all reported incomes consumed, capped at 100 for display."""
    total_income = sum((item.amount for item in report.incomes), ZERO)
    total_linked = sum((item.expenses_linked for item in report.incomes), ZERO)
    if total_income > 0:
        return min(float(total_linked / total_income * 100), 100.0)
    return 0.0


def link_coverage(
    expense: Transaction, incomes: Iterable[Transaction]
) -> tuple[Decimal, float]:
    """How far a set of candidate incomes covers an expense.

    Returns:
        Tuple of (sum of the income amounts, covered percentage capped at 100)
    """
    total = sum((income.amount for income in incomes), ZERO)
    if expense.amount > 0:
        return total, min(float(total / expense.amount * 100), 100.0)
    return total, 0.0
