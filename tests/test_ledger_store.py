"""Tests for LedgerStore writes and lookups."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerlink.domain.auth import AuthService
from ledgerlink.domain.entities import EXPENSE, INCOME
from ledgerlink.domain.errors import (
    NotAuthenticatedError,
    NotFoundError,
    RemoteStoreError,
    ValidationError,
)
from ledgerlink.domain.ledger import LedgerStore


def _fail(*args, **kwargs):
    raise RemoteStoreError("store unavailable")


def _add(ledger, type=EXPENSE, amount="100", on=date(2025, 1, 15), **kwargs):
    defaults = {"description": "Item", "category": "Otros" if type == EXPENSE else "Otro"}
    defaults.update(kwargs)
    return ledger.add_transaction(type=type, amount=Decimal(amount), date=on, **defaults)


class TestAddTransaction:
    """Tests for adding transactions."""

    def test_add_persists_and_updates_memory(self, ledger, temp_db, signed_in_auth):
        txn = _add(ledger, description="  Groceries  ")

        assert txn.id
        assert txn.description == "Groceries"
        assert ledger.transactions == (txn,)
        assert temp_db.list_transactions(signed_in_auth.current_user_id) == [txn]

    def test_ledger_sorted_newest_first(self, ledger):
        older = _add(ledger, on=date(2025, 1, 1))
        newer = _add(ledger, on=date(2025, 3, 1))
        middle = _add(ledger, on=date(2025, 2, 1))

        assert [t.id for t in ledger.transactions] == [newer.id, middle.id, older.id]

    @pytest.mark.parametrize("amount", ["0", "-5", "1000000000001", "0.001", "10.005"])
    def test_invalid_amount_rejected(self, ledger, amount):
        with pytest.raises(ValidationError):
            _add(ledger, amount=amount)
        assert ledger.transactions == ()

    def test_float_amount_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.add_transaction(
                type=EXPENSE, amount=10.5, description="x", category="Otros", date=date(2025, 1, 1)
            )

    def test_missing_description_rejected(self, ledger):
        with pytest.raises(ValidationError):
            _add(ledger, description="   ")

    def test_unknown_type_rejected(self, ledger):
        with pytest.raises(ValidationError):
            _add(ledger, type="transfer", category="Otros")

    def test_datetime_string_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.add_transaction(
                type=EXPENSE, amount=Decimal("1"), description="x", category="Otros", date="2025-01-31"
            )

    def test_remote_failure_leaves_ledger_unchanged(self, ledger, temp_db, monkeypatch):
        existing = _add(ledger)
        monkeypatch.setattr(temp_db, "create_transaction", _fail)

        with pytest.raises(RemoteStoreError):
            _add(ledger, amount="999")

        assert ledger.transactions == (existing,)

    def test_decimal_amount_round_trips(self, ledger, temp_db, signed_in_auth):
        txn = _add(ledger, amount="1234.56")

        stored = temp_db.list_transactions(signed_in_auth.current_user_id)[0]
        assert stored.amount == Decimal("1234.56")
        assert txn.amount == Decimal("1234.56")


class TestLinking:
    """Tests for linking expenses to incomes."""

    def test_add_with_links_deduplicates(self, ledger):
        income = _add(ledger, type=INCOME, amount="1000")
        expense = _add(ledger, linked_income_ids=[income.id, income.id, " "])

        assert expense.linked_income_ids == (income.id,)

    def test_income_cannot_carry_links(self, ledger):
        income = _add(ledger, type=INCOME)
        with pytest.raises(ValidationError):
            _add(ledger, type=INCOME, linked_income_ids=[income.id])

    def test_link_target_must_be_income(self, ledger):
        other_expense = _add(ledger)
        with pytest.raises(ValidationError):
            _add(ledger, linked_income_ids=[other_expense.id])

    def test_link_target_must_exist(self, ledger):
        with pytest.raises(ValidationError):
            _add(ledger, linked_income_ids=["missing"])

    def test_link_replaces_set(self, ledger):
        a = _add(ledger, type=INCOME, amount="500")
        b = _add(ledger, type=INCOME, amount="700")
        expense = _add(ledger, linked_income_ids=[a.id])

        updated = ledger.link_expense_to_income(expense.id, [b.id, a.id, b.id])

        assert updated.linked_income_ids == (b.id, a.id)
        assert ledger.get_transaction(expense.id).linked_income_ids == (b.id, a.id)

    def test_unlink_with_empty_set(self, ledger):
        a = _add(ledger, type=INCOME)
        expense = _add(ledger, linked_income_ids=[a.id])

        assert ledger.link_expense_to_income(expense.id, []).linked_income_ids == ()

    def test_link_failure_leaves_links(self, ledger, temp_db, monkeypatch):
        a = _add(ledger, type=INCOME)
        b = _add(ledger, type=INCOME)
        expense = _add(ledger, linked_income_ids=[a.id])
        monkeypatch.setattr(temp_db, "update_transaction", _fail)

        with pytest.raises(RemoteStoreError):
            ledger.link_expense_to_income(expense.id, [b.id])

        assert ledger.get_transaction(expense.id).linked_income_ids == (a.id,)

    def test_deleting_income_leaves_dangling_link(self, ledger):
        income = _add(ledger, type=INCOME, amount="500", on=date(2025, 1, 1))
        expense = _add(ledger, linked_income_ids=[income.id], on=date(2025, 1, 2))

        ledger.delete_transaction(income.id)

        assert ledger.get_transaction(expense.id).linked_income_ids == (income.id,)
        assert ledger.linked_incomes_report(month=0, year=2025).incomes == ()

    def test_linked_incomes_report_uses_whole_ledger(self, ledger):
        income = _add(ledger, type=INCOME, amount="1000", on=date(2024, 12, 30))
        _add(ledger, amount="400", on=date(2025, 1, 3), linked_income_ids=[income.id])

        report = ledger.linked_incomes_report(month=0, year=2025)

        assert report.incomes[0].id == income.id
        assert report.total_remaining_balance == Decimal("600")


class TestUpdateDeleteToggle:
    """Tests for update, delete and toggle pending."""

    def test_update_fields(self, ledger, temp_db, signed_in_auth):
        txn = _add(ledger)

        updated = ledger.update_transaction(
            txn.id, amount=Decimal("250"), description="Power bill", category="Servicios", date=date(2025, 2, 1)
        )

        assert updated.amount == Decimal("250")
        assert updated.description == "Power bill"
        assert updated.category == "Servicios"
        assert updated.date == date(2025, 2, 1)
        assert updated.type == EXPENSE
        assert temp_db.list_transactions(signed_in_auth.current_user_id) == [updated]

    def test_update_with_nothing_returns_current(self, ledger):
        txn = _add(ledger)
        assert ledger.update_transaction(txn.id) == txn

    def test_update_unknown_id(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.update_transaction("missing", amount=Decimal("1"))

    def test_update_failure_leaves_ledger_unchanged(self, ledger, temp_db, monkeypatch):
        txn = _add(ledger)
        monkeypatch.setattr(temp_db, "update_transaction", _fail)

        with pytest.raises(RemoteStoreError):
            ledger.update_transaction(txn.id, amount=Decimal("5"))

        assert ledger.transactions == (txn,)

    def test_toggle_pending(self, ledger):
        txn = _add(ledger)

        assert ledger.toggle_pending(txn.id).is_pending is True
        assert ledger.toggle_pending(txn.id).is_pending is False

    def test_toggle_pending_failure(self, ledger, temp_db, monkeypatch):
        txn = _add(ledger)
        monkeypatch.setattr(temp_db, "update_transaction", _fail)

        with pytest.raises(RemoteStoreError):
            ledger.toggle_pending(txn.id)

        assert ledger.get_transaction(txn.id).is_pending is False

    def test_delete(self, ledger, temp_db, signed_in_auth):
        keep = _add(ledger)
        gone = _add(ledger)

        ledger.delete_transaction(gone.id)

        assert ledger.transactions == (keep,)
        assert temp_db.list_transactions(signed_in_auth.current_user_id) == [keep]

    def test_delete_failure_keeps_row(self, ledger, temp_db, monkeypatch):
        txn = _add(ledger)
        monkeypatch.setattr(temp_db, "delete_transaction", _fail)

        with pytest.raises(RemoteStoreError):
            ledger.delete_transaction(txn.id)

        assert ledger.transactions == (txn,)

    def test_delete_unknown_id(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.delete_transaction("missing")


class TestQueries:
    """Tests for search, pending and resolution helpers."""

    def test_search_text_type_and_status(self, ledger):
        rent = _add(ledger, description="Rent", category="Casa", is_pending=True)
        salary = _add(ledger, type=INCOME, description="Salary", category="Sueldo")
        phone = _add(ledger, description="Phone plan", category="Celular")

        assert ledger.search("casa") == [rent]
        assert ledger.search("PHONE") == [phone]
        assert ledger.search(type=INCOME) == [salary]
        assert ledger.search(status="pending") == [rent]
        assert set(t.id for t in ledger.search(status="paid")) == {salary.id, phone.id}

    def test_pending_transactions(self, ledger):
        pending = _add(ledger, is_pending=True)
        _add(ledger)

        assert ledger.pending_transactions() == [pending]

    def test_resolve_by_prefix(self, ledger):
        txn = _add(ledger)
        assert ledger.resolve(txn.id[:8]) == txn

    def test_load_restores_from_store(self, ledger, temp_db, signed_in_auth):
        txn = _add(ledger)
        fresh = LedgerStore(temp_db, signed_in_auth)

        assert fresh.is_loaded is False
        fresh.load()

        assert fresh.transactions == (txn,)

    def test_load_failure_keeps_held_list(self, ledger, temp_db, monkeypatch):
        txn = _add(ledger)
        monkeypatch.setattr(temp_db, "list_transactions", _fail)

        with pytest.raises(RemoteStoreError):
            ledger.refresh()

        assert ledger.transactions == (txn,)

    def test_users_do_not_see_each_other(self, ledger, temp_db, fast_hasher):
        _add(ledger)
        other_auth = AuthService(temp_db, hasher=fast_hasher)
        other_auth.sign_up("bo@example.com", "secret123", "Bo")

        other = LedgerStore(temp_db, other_auth)
        other.load()

        assert other.transactions == ()


class TestCopyTransactions:
    """Tests for copying a month into another month."""

    def test_copy_clamps_day_and_drops_links(self, ledger):
        income = _add(ledger, type=INCOME, amount="1000", on=date(2025, 1, 31))
        _add(ledger, amount="300", on=date(2025, 1, 30), is_pending=True, linked_income_ids=[income.id])

        created = ledger.copy_transactions(0, 2025, 1, 2025)

        assert len(created) == 2
        assert {t.date for t in created} == {date(2025, 2, 28)}
        assert all(t.linked_income_ids == () for t in created)
        assert [t.is_pending for t in created if t.type == EXPENSE] == [True]
        assert len(ledger.filter_by_window(month=1, year=2025)) == 2
        assert len(ledger.filter_by_window(month=0, year=2025)) == 2

    def test_copy_filters(self, ledger):
        _add(ledger, type=INCOME, on=date(2025, 3, 1))
        _add(ledger, on=date(2025, 3, 2))
        _add(ledger, on=date(2025, 3, 3), is_pending=True)

        assert len(ledger.copy_transactions(2, 2025, 3, 2025, only_expenses=True)) == 2
        assert len(ledger.copy_transactions(2, 2025, 4, 2025, only_incomes=True)) == 1
        assert len(ledger.copy_transactions(2, 2025, 5, 2025, only_pending=True)) == 1

    def test_copy_nothing_matches(self, ledger):
        with pytest.raises(ValidationError):
            ledger.copy_transactions(0, 2025, 1, 2025)

    def test_copy_invalid_month(self, ledger):
        _add(ledger)
        with pytest.raises(ValidationError):
            ledger.copy_transactions(0, 2025, 12, 2025)

    def test_copy_failure_writes_nothing(self, ledger, temp_db, monkeypatch):
        _add(ledger, on=date(2025, 1, 5))
        before = ledger.transactions
        monkeypatch.setattr(temp_db, "create_transactions", _fail)

        with pytest.raises(RemoteStoreError):
            ledger.copy_transactions(0, 2025, 1, 2025)

        assert ledger.transactions == before


class TestNotAuthenticated:
    """Every store operation needs a session."""

    def test_operations_fail_fast(self, temp_db, auth_service, monkeypatch):
        store = LedgerStore(temp_db, auth_service)
        monkeypatch.setattr(temp_db, "list_transactions", _fail)
        monkeypatch.setattr(temp_db, "create_transaction", _fail)

        with pytest.raises(NotAuthenticatedError):
            store.load()
        with pytest.raises(NotAuthenticatedError):
            _add(store)
        with pytest.raises(NotAuthenticatedError):
            store.delete_transaction("any")
        with pytest.raises(NotAuthenticatedError):
            store.copy_transactions(0, 2025, 1, 2025)

    def test_sign_out_then_write(self, ledger, signed_in_auth):
        signed_in_auth.sign_out()
        with pytest.raises(NotAuthenticatedError):
            _add(ledger)
