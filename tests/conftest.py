"""Shared pytest fixtures for ledgerlink tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest
from argon2 import PasswordHasher

from ledgerlink.database.factories import create_sqlite_database
from ledgerlink.database.storage import LocalObjectStorage
from ledgerlink.domain.account import AccountService
from ledgerlink.domain.auth import AuthService
from ledgerlink.domain.category import CategoryRegistry
from ledgerlink.domain.entities import EXPENSE, INCOME, Transaction
from ledgerlink.domain.ledger import LedgerStore
from ledgerlink.domain.reports import ReportService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def storage(tmp_path):
    """Create a local avatar bucket in a temporary directory."""
    return LocalObjectStorage(tmp_path / "storage", secret=b"test-secret")


@pytest.fixture
def fast_hasher():
    """Argon2 hasher with minimal cost so tests stay quick."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def auth_service(temp_db, fast_hasher):
    """Create an AuthService with no session."""
    return AuthService(temp_db, hasher=fast_hasher)


@pytest.fixture
def signed_in_auth(auth_service):
    """AuthService with a freshly registered, signed-in user."""
    auth_service.sign_up("ana@example.com", "secret123", "Ana")
    return auth_service


@pytest.fixture
def ledger(temp_db, signed_in_auth):
    """Create a loaded LedgerStore for the signed-in user."""
    store = LedgerStore(temp_db, signed_in_auth)
    store.load()
    return store


@pytest.fixture
def category_registry(temp_db, signed_in_auth):
    """Create a CategoryRegistry for the signed-in user."""
    registry = CategoryRegistry(temp_db, signed_in_auth)
    registry.load()
    return registry


@pytest.fixture
def account_service(temp_db, storage, signed_in_auth):
    """Create an AccountService for the signed-in user."""
    return AccountService(temp_db, storage, signed_in_auth)


@pytest.fixture
def report_service(ledger):
    """Create a ReportService over the ledger fixture."""
    return ReportService(ledger)


@pytest.fixture
def january_ledger(ledger):
    """Ledger with a funded income, a paid expense and a pending expense in Jan 2025."""
    income = ledger.add_transaction(
        type=INCOME,
        amount=Decimal("1000000"),
        description="Salary",
        category="Sueldo",
        date=date(2025, 1, 5),
    )
    paid = ledger.add_transaction(
        type=EXPENSE,
        amount=Decimal("450000"),
        description="Rent",
        category="Casa",
        date=date(2025, 1, 10),
        linked_income_ids=[income.id],
    )
    pending = ledger.add_transaction(
        type=EXPENSE,
        amount=Decimal("800000"),
        description="Tuition",
        category="Colegio",
        date=date(2025, 1, 20),
        is_pending=True,
        linked_income_ids=[income.id],
    )
    return {"ledger": ledger, "income": income, "paid": paid, "pending": pending}


def make_transaction(
    id: str,
    type: str,
    amount,
    on: date,
    is_pending: bool = False,
    linked_income_ids: tuple[str, ...] = (),
    category: str = "Otros",
    description: str = "",
) -> Transaction:
    """Build a domain Transaction without touching the store."""
    return Transaction(
        id=id,
        type=type,
        amount=Decimal(str(amount)),
        description=description or id,
        category=category,
        date=on,
        is_pending=is_pending,
        linked_income_ids=tuple(linked_income_ids),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def txn():
    """Factory for in-memory transactions."""
    return make_transaction
