"""Tests for cash flow, savings and category reports."""

from datetime import date
from decimal import Decimal

from ledgerlink.domain.entities import EXPENSE, INCOME
from ledgerlink.domain.reports import (
    annual_savings,
    category_breakdown,
    group_transactions_by_period,
    monthly_cash_flow,
)


def test_group_transactions_by_period(txn):
    items = [
        txn("a", INCOME, 1, date(2025, 1, 5)),
        txn("b", INCOME, 1, date(2025, 1, 20)),
        txn("c", INCOME, 1, date(2024, 12, 31)),
    ]

    by_month = group_transactions_by_period(items, group_by_month=True)
    by_year = group_transactions_by_period(items, group_by_month=False)

    assert sorted(by_month) == ["2024-12", "2025-01"]
    assert [t.id for t in by_month["2025-01"]] == ["a", "b"]
    assert sorted(by_year) == ["2024", "2025"]


class TestCashFlow:
    """Tests for monthly cash flow rows."""

    def test_twelve_rows_with_summary_rules(self, txn):
        items = [
            txn("a", INCOME, 1000, date(2025, 1, 5)),
            txn("b", EXPENSE, 300, date(2025, 1, 10)),
            txn("c", EXPENSE, 200, date(2025, 1, 11), is_pending=True),
            txn("d", EXPENSE, 50, date(2025, 12, 31)),
            txn("e", INCOME, 9999, date(2024, 1, 5)),
        ]

        rows = monthly_cash_flow(items, 2025)

        assert [row.label for row in rows] == [
            "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
        ]
        assert rows[0].income == Decimal("1000")
        assert rows[0].expenses == Decimal("300")
        assert rows[0].balance == Decimal("700")
        assert rows[11].balance == Decimal("-50")
        assert all(row.income == 0 and row.expenses == 0 for row in rows[1:11])


class TestSavings:
    """Tests for savings rate and cumulative savings."""

    def test_rate_and_cumulative(self, txn):
        items = [
            txn("a", INCOME, 1000, date(2025, 1, 5)),
            txn("b", EXPENSE, 333, date(2025, 1, 10)),
            txn("c", EXPENSE, 100, date(2025, 2, 10)),
        ]

        points = annual_savings(monthly_cash_flow(items, 2025))

        # 667 / 1000 = 66.7% rounds half-up to 67
        assert points[0].savings_rate == 67
        assert points[0].cumulative_savings == Decimal("667")
        # No income in February: rate is 0, cumulative keeps falling
        assert points[1].savings_rate == 0
        assert points[1].cumulative_savings == Decimal("567")
        assert points[11].cumulative_savings == Decimal("567")

    def test_half_rounds_up(self, txn):
        items = [
            txn("a", INCOME, 200, date(2025, 1, 5)),
            txn("b", EXPENSE, 199, date(2025, 1, 10)),
        ]

        assert annual_savings(monthly_cash_flow(items, 2025))[0].savings_rate == 1


class TestCategoryBreakdown:
    """Tests for per-category totals."""

    def test_totals_sorted_with_percentages(self, txn):
        items = [
            txn("a", EXPENSE, 300, date(2025, 1, 1), category="Casa"),
            txn("b", EXPENSE, 100, date(2025, 1, 2), category="Servicios"),
            txn("c", EXPENSE, 100, date(2025, 1, 3), category="Casa"),
            txn("d", EXPENSE, 100, date(2025, 1, 4), category="Celular"),
            txn("e", INCOME, 5000, date(2025, 1, 5), category="Sueldo"),
        ]

        rows = category_breakdown(items)

        assert [(r.name, r.total, r.percent, r.count) for r in rows] == [
            ("Casa", Decimal("400"), 67, 2),
            ("Celular", Decimal("100"), 17, 1),
            ("Servicios", Decimal("100"), 17, 1),
        ]

    def test_exclude_pending(self, txn):
        items = [
            txn("a", EXPENSE, 300, date(2025, 1, 1), category="Casa", is_pending=True),
            txn("b", EXPENSE, 100, date(2025, 1, 2), category="Servicios"),
        ]

        rows = category_breakdown(items, include_pending=False)

        assert [(r.name, r.percent) for r in rows] == [("Servicios", 100)]

    def test_income_breakdown(self, txn):
        items = [
            txn("a", INCOME, 100, date(2025, 1, 1), category="Sueldo"),
            txn("b", EXPENSE, 100, date(2025, 1, 2), category="Casa"),
        ]

        assert [r.name for r in category_breakdown(items, type=INCOME)] == ["Sueldo"]

    def test_empty(self):
        assert category_breakdown([]) == []


def test_report_service_uses_ledger(ledger, report_service):
    ledger.add_transaction(
        type=INCOME, amount=Decimal("100"), description="Pay", category="Sueldo", date=date(2025, 4, 1)
    )
    ledger.add_transaction(
        type=EXPENSE, amount=Decimal("40"), description="Bus", category="Transporte", date=date(2025, 4, 2)
    )

    assert report_service.cash_flow(2025)[3].balance == Decimal("60")
    assert report_service.savings(2025)[3].savings_rate == 60
    assert [r.name for r in report_service.categories(month=3, year=2025)] == ["Transporte"]
    assert report_service.categories(month=4, year=2025) == []
