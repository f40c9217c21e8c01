"""Domain model entities for ledgerlink.

These are pure data classes representing business concepts, independent of
the record store schema. The store layer maps its rows onto them, so the
aggregation code never sees ORM objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


@dataclass(frozen=True)
class Transaction:
    """Ledger entry. Direction is carried by ``type``, never by the sign of ``amount``."""

    id: str
    type: str
    amount: Decimal
    description: str
    category: str
    date: date
    is_pending: bool = False
    linked_income_ids: tuple[str, ...] = ()

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE


@dataclass(frozen=True)
class Category:
    """Category entity. Transactions reference it by ``name``, not by ``id``."""

    id: str
    name: str
    icon: str
    type: str


@dataclass(frozen=True)
class FinanceSummary:
    """KPI figures for a reporting window."""

    total_income: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    pending_total: Decimal


@dataclass(frozen=True)
class LinkedIncome:
    """One income row in a linked-incomes report."""

    income: Transaction
    label: str
    expenses_linked: Decimal
    remaining_balance: Decimal
    linked_expenses: tuple[Transaction, ...] = ()

    @property
    def id(self) -> str:
        return self.income.id

    @property
    def amount(self) -> Decimal:
        return self.income.amount

    @property
    def is_overallocated(self) -> bool:
        return self.remaining_balance < 0


@dataclass(frozen=True)
class LinkedIncomesReport:
    """Result of reconciling linked expenses against their incomes."""

    incomes: tuple[LinkedIncome, ...]
    total_remaining_balance: Decimal


@dataclass(frozen=True)
class MonthlyCashFlow:
    """Cash-flow chart row for one calendar month."""

    month: int
    label: str
    income: Decimal
    expenses: Decimal
    balance: Decimal


@dataclass(frozen=True)
class SavingsPoint:
    """Annual savings chart row."""

    month: int
    label: str
    income: Decimal
    expenses: Decimal
    balance: Decimal
    savings_rate: int
    cumulative_savings: Decimal


@dataclass(frozen=True)
class CategoryBreakdown:
    """Total spent (or earned) under one category name."""

    name: str
    total: Decimal
    percent: int
    count: int = 0


@dataclass(frozen=True)
class AuthUser:
    """Identity known to the auth provider."""

    id: str
    email: str
    password_hash: str
    created_at: datetime


@dataclass(frozen=True)
class Profile:
    """User profile. ``avatar_path`` is a storage path, not a URL."""

    user_id: str
    display_name: str
    avatar_path: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthSession:
    """An authenticated session handed out by the auth provider."""

    token: str
    user_id: str
    email: str
    created_at: datetime = field(compare=False)
