"""Tests for amount parsing and transaction reference resolution."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerlink.domain.entities import EXPENSE
from ledgerlink.domain.errors import NotFoundError, ValidationError
from ledgerlink.utils.amount_parser import parse_amount
from ledgerlink.utils.transaction_resolver import resolve_transaction


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("$ 1,000,000", Decimal("1000000")),
        ("€50", Decimal("50")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "-50", "(50)", "abc", "NaN", "Infinity"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)


class TestResolveTransaction:
    """Tests for ID / ID prefix resolution."""

    @pytest.fixture
    def items(self, txn):
        return [
            txn("3f2a9c10-0000-0000-0000-000000000001", EXPENSE, 1, date(2025, 1, 1)),
            txn("3f2a9c10-0000-0000-0000-000000000002", EXPENSE, 1, date(2025, 1, 1)),
            txn("77b01234-0000-0000-0000-000000000003", EXPENSE, 1, date(2025, 1, 1)),
        ]

    def test_full_id(self, items):
        assert resolve_transaction(items, items[1].id) is items[1]

    def test_unique_prefix(self, items):
        assert resolve_transaction(items, "77b0") is items[2]

    def test_ambiguous_prefix(self, items):
        with pytest.raises(ValidationError, match="ambiguous"):
            resolve_transaction(items, "3f2a")

    def test_short_prefix(self, items):
        with pytest.raises(ValidationError, match="too short"):
            resolve_transaction(items, "77")

    def test_no_match(self, items):
        with pytest.raises(NotFoundError):
            resolve_transaction(items, "ffff")
