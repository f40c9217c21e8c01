"""Report building: cash flow, savings and category breakdowns."""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from ledgerlink.domain.entities import (
    EXPENSE,
    CategoryBreakdown,
    MonthlyCashFlow,
    SavingsPoint,
    Transaction,
)
from ledgerlink.domain.ledger import LedgerStore, filter_by_window, summarize
from ledgerlink.utils.date_parser import month_label

ZERO = Decimal("0")


def _whole_percent(part: Decimal, total: Decimal) -> int:
    """Round part/total*100 half-up to an integer; 0 when total is 0."""
    if total == 0:
        return 0
    return int((part / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def group_transactions_by_period(
    transactions: Iterable[Transaction], group_by_month: bool
) -> dict[str, list[Transaction]]:
    """Group transactions by "YYYY-MM" or "YYYY" keys."""
    period_transactions: dict[str, list[Transaction]] = defaultdict(list)

    for txn in transactions:
        if group_by_month:
            period_key = f"{txn.date.year:04d}-{txn.date.month:02d}"
        else:
            period_key = f"{txn.date.year:04d}"
        period_transactions[period_key].append(txn)

    return dict(period_transactions)


def monthly_cash_flow(transactions: Sequence[Transaction], year: int) -> list[MonthlyCashFlow]:
    """One row per calendar month of ``year``, using the KPI summary rules."""
    grouped = group_transactions_by_period(
        filter_by_window(transactions, year=year), group_by_month=True
    )
    rows = []
    for month in range(12):
        summary = summarize(grouped.get(f"{year:04d}-{month + 1:02d}", []))
        rows.append(
            MonthlyCashFlow(
                month=month,
                label=month_label(month),
                income=summary.total_income,
                expenses=summary.total_expenses,
                balance=summary.net_balance,
            )
        )
    return rows


def annual_savings(rows: Iterable[MonthlyCashFlow]) -> list[SavingsPoint]:
    """Add savings rate and running cumulative savings to cash-flow rows."""
    points = []
    cumulative = ZERO
    for row in rows:
        cumulative += row.balance
        points.append(
            SavingsPoint(
                month=row.month,
                label=row.label,
                income=row.income,
                expenses=row.expenses,
                balance=row.balance,
                savings_rate=_whole_percent(row.balance, row.income),
                cumulative_savings=cumulative,
            )
        )
    return points


def category_breakdown(
    transactions: Iterable[Transaction],
    type: str = EXPENSE,
    include_pending: bool = True,
) -> list[CategoryBreakdown]:
    """Total per category name for one transaction type, largest first.

    Categories are grouped by their stored text, so transactions whose
    category was deleted still show up under the old name.
    """
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for txn in transactions:
        if txn.type != type:
            continue
        if txn.is_pending and not include_pending:
            continue
        totals[txn.category] += txn.amount
        counts[txn.category] += 1

    grand_total = sum(totals.values(), ZERO)
    results = [
        CategoryBreakdown(
            name=name,
            total=total,
            percent=_whole_percent(total, grand_total),
            count=counts[name],
        )
        for name, total in totals.items()
    ]
    results.sort(key=lambda item: (-item.total, item.name))
    return results


class ReportService:
    """Builds chart and table data from a loaded ledger."""

    def __init__(self, ledger: LedgerStore):
        """Initialize report service.

        Args:
            ledger: Loaded ledger store
        """
        self.ledger = ledger

    def cash_flow(self, year: int) -> list[MonthlyCashFlow]:
        return monthly_cash_flow(self.ledger.transactions, year)

    def savings(self, year: int) -> list[SavingsPoint]:
        return annual_savings(self.cash_flow(year))

    def categories(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        type: str = EXPENSE,
        include_pending: bool = True,
    ) -> list[CategoryBreakdown]:
        window = self.ledger.filter_by_window(month=month, year=year)
        return category_breakdown(window, type=type, include_pending=include_pending)
