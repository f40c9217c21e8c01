"""Abstract record store interface.

Stands in for the managed backend: auth identities and sessions, the
transactions table, the custom categories table and user profiles. Every
method either completes or raises ``RemoteStoreError``; a failed write is
never partially applied.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Any

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerlink.domain.entities import (
    AuthUser,
    Category,
    Profile,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for ledgerlink."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Auth identity operations
    @abstractmethod
    def create_user(self, email: str, password_hash: str) -> AuthUser:
        """Create an auth identity. Raises ConflictError if the email is taken."""
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[AuthUser]:
        """Get auth identity by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[AuthUser]:
        """Get auth identity by (lower-cased) email."""
        pass

    @abstractmethod
    def update_user_password(self, user_id: str, password_hash: str) -> None:
        """Replace the stored password hash."""
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        """Delete an auth identity together with its sessions and reset tokens."""
        pass

    # Session operations
    @abstractmethod
    def create_session(self, user_id: str, token: str) -> None:
        """Record a new session token for a user."""
        pass

    @abstractmethod
    def get_session_user_id(self, token: str) -> Optional[str]:
        """Return the user owning a session token, or None."""
        pass

    @abstractmethod
    def delete_session(self, token: str) -> None:
        """Invalidate a session token. Unknown tokens are ignored."""
        pass

    @abstractmethod
    def create_password_reset(self, user_id: str, token: str, expires_at: datetime) -> None:
        """Record a password reset token."""
        pass

    @abstractmethod
    def consume_password_reset(self, token: str, now: datetime) -> Optional[str]:
        """Delete a reset token and return its user ID if it was still valid."""
        pass

    # Profile operations
    @abstractmethod
    def create_profile(self, user_id: str, display_name: str) -> Profile:
        """Create the profile row for a user."""
        pass

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Profile]:
        """Get a user's profile."""
        pass

    @abstractmethod
    def update_profile(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        avatar_path: Optional[str] = None,
    ) -> Profile:
        """Update profile fields that are not None."""
        pass

    @abstractmethod
    def delete_profile(self, user_id: str) -> None:
        """Delete a user's profile."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: str,
        type: str,
        amount: Decimal,
        description: str,
        category: str,
        date: date,
        is_pending: bool = False,
        linked_income_ids: tuple[str, ...] = (),
    ) -> Transaction:
        """Create a transaction and return it with its assigned ID."""
        pass

    @abstractmethod
    def create_transactions(self, user_id: str, rows: list[dict[str, Any]]) -> list[Transaction]:
        """Create several transactions in one atomic write.

        Each row holds the keyword arguments of ``create_transaction`` minus ``user_id``.
        """
        pass

    @abstractmethod
    def list_transactions(self, user_id: str) -> list[Transaction]:
        """List all of a user's transactions, newest date first."""
        pass

    @abstractmethod
    def update_transaction(self, user_id: str, transaction_id: str, **fields: Any) -> Transaction:
        """Update the given fields of a user's transaction and return the stored row.

        Accepted fields: amount, description, category, date, is_pending,
        linked_income_ids. Raises NotFoundError when the row does not exist.
        """
        pass

    @abstractmethod
    def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        """Delete a user's transaction. Raises NotFoundError when missing."""
        pass

    @abstractmethod
    def delete_user_transactions(self, user_id: str) -> int:
        """Delete every transaction owned by a user. Returns the count removed."""
        pass

    # Custom category operations
    @abstractmethod
    def create_custom_category(self, user_id: str, name: str, icon: str, type: str) -> Category:
        """Create a custom category row."""
        pass

    @abstractmethod
    def list_custom_categories(self, user_id: str) -> list[Category]:
        """List a user's custom categories in creation order."""
        pass

    @abstractmethod
    def delete_custom_category(self, user_id: str, category_id: str) -> None:
        """Delete a custom category. Raises NotFoundError when missing."""
        pass

    @abstractmethod
    def delete_user_categories(self, user_id: str) -> int:
        """Delete every custom category owned by a user. Returns the count removed."""
        pass
