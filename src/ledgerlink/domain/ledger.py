"""Ledger store: the signed-in user's transactions and the queries over them."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerlink.database.base import Database
from ledgerlink.domain.auth import AuthService
from ledgerlink.domain.entities import (
    EXPENSE,
    INCOME,
    FinanceSummary,
    LinkedIncomesReport,
    Transaction,
)
from ledgerlink.domain.errors import (
    NotFoundError,
    ValidationError,
    link_target_not_income,
    nothing_to_copy,
    transaction_not_found,
)
from ledgerlink.domain.linking import linked_incomes_report
from ledgerlink.domain.validation import (
    normalize_link_ids,
    validate_amount,
    validate_category_label,
    validate_date,
    validate_description,
    validate_type,
)
from ledgerlink.utils.date_parser import clamp_day
from ledgerlink.utils.transaction_resolver import resolve_transaction

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

STATUS_PENDING = "pending"
STATUS_PAID = "paid"


def filter_by_window(
    transactions: Iterable[Transaction],
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> list[Transaction]:
    """Return transactions dated in the given zero-based month and/or year.

    Either bound may be None to match any value. Input order is preserved.
    Dates are plain calendar dates, so matching compares the literal year and
    month components.
    """
    return [
        txn
        for txn in transactions
        if (year is None or txn.date.year == year)
        and (month is None or txn.date.month - 1 == month)
    ]


def summarize(transactions: Iterable[Transaction]) -> FinanceSummary:
    """Compute KPI totals over a set of transactions.

    Pending expenses do not count as spent until they are settled; they are
    reported in ``pending_total`` instead (which takes pending rows of either type).
    """
    total_income = ZERO
    total_expenses = ZERO
    pending_total = ZERO
    for txn in transactions:
        if txn.type == INCOME:
            total_income += txn.amount
        elif txn.type == EXPENSE and not txn.is_pending:
            total_expenses += txn.amount
        if txn.is_pending:
            pending_total += txn.amount

    return FinanceSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_balance=total_income - total_expenses,
        pending_total=pending_total,
    )


def month_summary(transactions: Iterable[Transaction], month: int, year: int) -> FinanceSummary:
    return summarize(filter_by_window(transactions, month=month, year=year))


def year_summary(transactions: Iterable[Transaction], year: int) -> FinanceSummary:
    return summarize(filter_by_window(transactions, year=year))


def _check_month(month: int) -> int:
    if not 0 <= month <= 11:
        raise ValidationError(f"Month must be between 0 and 11, got {month}")
    return month


class LedgerStore:
    """Holds the current user's full transaction list.

    Reads are answered from memory. Every write goes to the record store
    first and is applied locally only once the store has accepted it, so a
    failed write leaves the in-memory ledger exactly as it was.
    """

    def __init__(self, db: Database, auth: AuthService):
        """Initialize ledger store.

        Args:
            db: Database instance
            auth: Auth service providing the current user
        """
        self.db = db
        self.auth = auth
        self._transactions: list[Transaction] = []
        self._loaded = False

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> list[Transaction]:
        """Fetch the user's whole ledger from the record store.

        Raises:
            NotAuthenticatedError: If there is no session
            RemoteStoreError: If the store cannot be read; the held list is kept
        """
        user_id = self.auth.require_user_id()
        rows = self.db.list_transactions(user_id)
        self._transactions = list(rows)
        self._sort()
        self._loaded = True
        logger.debug("Loaded %d transactions for %s", len(self._transactions), user_id)
        return list(self._transactions)

    def refresh(self) -> list[Transaction]:
        return self.load()

    def clear(self) -> None:
        """Forget the held ledger, e.g. after signing out."""
        self._transactions = []
        self._loaded = False

    # Queries
    def filter_by_window(self, month: Optional[int] = None, year: Optional[int] = None) -> list[Transaction]:
        return filter_by_window(self._transactions, month=month, year=year)

    def month_summary(self, month: int, year: int) -> FinanceSummary:
        return month_summary(self._transactions, month, year)

    def year_summary(self, year: int) -> FinanceSummary:
        return year_summary(self._transactions, year)

    def linked_incomes_report(self, month: Optional[int] = None, year: Optional[int] = None) -> LinkedIncomesReport:
        """Reconcile expenses in a window against incomes anywhere in the ledger."""
        window = self.filter_by_window(month=month, year=year)
        return linked_incomes_report(self._transactions, window)

    def pending_transactions(self) -> list[Transaction]:
        return [txn for txn in self._transactions if txn.is_pending]

    def incomes(self) -> list[Transaction]:
        return [txn for txn in self._transactions if txn.type == INCOME]

    def search(
        self,
        text: Optional[str] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Transaction]:
        """Filter the ledger the way the transactions list does.

        Args:
            text: Case-insensitive substring of description or category
            type: "income" or "expense"
            status: "pending" or "paid"
        """
        needle = (text or "").lower()
        results = []
        for txn in self._transactions:
            if needle and needle not in txn.description.lower() and needle not in txn.category.lower():
                continue
            if type is not None and txn.type != type:
                continue
            if status == STATUS_PENDING and not txn.is_pending:
                continue
            if status == STATUS_PAID and txn.is_pending:
                continue
            results.append(txn)
        return results

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self._transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def require_transaction(self, transaction_id: str) -> Transaction:
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def resolve(self, reference: str) -> Transaction:
        """Find a transaction by full ID or unique ID prefix."""
        return resolve_transaction(self._transactions, reference)

    # Writes
    def add_transaction(
        self,
        type: str,
        amount: Decimal,
        description: str,
        category: str,
        date: date,
        is_pending: bool = False,
        linked_income_ids: Optional[Iterable[str]] = None,
    ) -> Transaction:
        """Create a transaction.

        Raises:
            NotAuthenticatedError: If there is no session
            ValidationError: If any field is invalid
            RemoteStoreError: If the store rejects the write
        """
        user_id = self.auth.require_user_id()
        fields = {
            "type": validate_type(type),
            "amount": validate_amount(amount),
            "description": validate_description(description),
            "category": validate_category_label(category),
            "date": validate_date(date),
            "is_pending": bool(is_pending),
            "linked_income_ids": self._validate_links(type, linked_income_ids),
        }

        txn = self.db.create_transaction(user_id=user_id, **fields)
        self._transactions.insert(0, txn)
        self._sort()
        logger.info("Added %s %s (%s)", txn.type, txn.id, txn.amount)
        return txn

    def update_transaction(
        self,
        transaction_id: str,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        date: Optional[date] = None,
        is_pending: Optional[bool] = None,
        linked_income_ids: Optional[Iterable[str]] = None,
    ) -> Transaction:
        """Update the provided fields of a transaction. Its type cannot change.

        Raises:
            NotAuthenticatedError: If there is no session
            NotFoundError: If the transaction is not in the ledger
            ValidationError: If any provided field is invalid
            RemoteStoreError: If the store rejects the write
        """
        user_id = self.auth.require_user_id()
        current = self.require_transaction(transaction_id)

        updates: dict = {}
        if amount is not None:
            updates["amount"] = validate_amount(amount)
        if description is not None:
            updates["description"] = validate_description(description)
        if category is not None:
            updates["category"] = validate_category_label(category)
        if date is not None:
            updates["date"] = validate_date(date)
        if is_pending is not None:
            updates["is_pending"] = bool(is_pending)
        if linked_income_ids is not None:
            updates["linked_income_ids"] = self._validate_links(current.type, linked_income_ids)

        if not updates:
            return current

        stored = self.db.update_transaction(user_id, transaction_id, **updates)
        self._replace(stored)
        logger.info("Updated transaction %s: %s", transaction_id, ", ".join(sorted(updates)))
        return stored

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction. Expenses linked to it keep the now dangling ID."""
        user_id = self.auth.require_user_id()
        self.require_transaction(transaction_id)
        self.db.delete_transaction(user_id, transaction_id)
        self._transactions = [txn for txn in self._transactions if txn.id != transaction_id]
        logger.info("Deleted transaction %s", transaction_id)

    def toggle_pending(self, transaction_id: str) -> Transaction:
        current = self.require_transaction(transaction_id)
        return self.update_transaction(transaction_id, is_pending=not current.is_pending)

    def link_expense_to_income(self, expense_id: str, income_ids: Iterable[str]) -> Transaction:
        """Replace the set of incomes funding an expense. An empty set unlinks it."""
        return self.update_transaction(expense_id, linked_income_ids=list(income_ids))

    def copy_transactions(
        self,
        source_month: int,
        source_year: int,
        target_month: int,
        target_year: int,
        only_expenses: bool = False,
        only_incomes: bool = False,
        only_pending: bool = False,
    ) -> list[Transaction]:
        """Copy one month's transactions into another month.

        The day of month is kept, pulled back to the last day of shorter
        target months. Links are not copied. The whole batch is written in
        one store call, so either every copy exists afterwards or none does.

        Raises:
            ValidationError: If a month is out of range or nothing matches the filters
        """
        user_id = self.auth.require_user_id()
        _check_month(source_month)
        _check_month(target_month)

        source = self.filter_by_window(month=source_month, year=source_year)
        if only_expenses:
            source = [txn for txn in source if txn.type == EXPENSE]
        if only_incomes:
            source = [txn for txn in source if txn.type == INCOME]
        if only_pending:
            source = [txn for txn in source if txn.is_pending]
        if not source:
            raise ValidationError(nothing_to_copy(source_month, source_year))

        rows = [
            {
                "type": txn.type,
                "amount": txn.amount,
                "description": txn.description,
                "category": txn.category,
                "date": clamp_day(target_year, target_month, txn.date.day),
                "is_pending": txn.is_pending,
                "linked_income_ids": (),
            }
            for txn in source
        ]
        created = self.db.create_transactions(user_id, rows)
        self._transactions[:0] = created
        self._sort()
        logger.info(
            "Copied %d transactions from %d-%02d to %d-%02d",
            len(created), source_year, source_month + 1, target_year, target_month + 1,
        )
        return created

    def _validate_links(self, transaction_type: str, income_ids: Optional[Iterable[str]]) -> tuple[str, ...]:
        ids = normalize_link_ids(income_ids)
        if not ids:
            return ()
        if transaction_type != EXPENSE:
            raise ValidationError("Only expenses can be linked to incomes")
        for income_id in ids:
            target = self.get_transaction(income_id)
            if target is None or target.type != INCOME:
                raise ValidationError(link_target_not_income(income_id))
        return ids

    def _replace(self, stored: Transaction) -> None:
        self._transactions = [stored if txn.id == stored.id else txn for txn in self._transactions]
        self._sort()

    def _sort(self) -> None:
        self._transactions.sort(key=lambda txn: txn.date, reverse=True)
