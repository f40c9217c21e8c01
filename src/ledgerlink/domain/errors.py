"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class NotAuthenticatedError(DomainError):
    """An operation needs a current user and there is no session."""


class RemoteStoreError(DomainError):
    """The record store, object storage or auth backend rejected a call."""


def no_session() -> str:
    """Return message for operations attempted without a session."""
    return "Not signed in. Run 'ledgerlink login' first."


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def duplicate_category_name(name: str) -> str:
    """Return message when a category name is already taken."""
    return f"A category named '{name}' already exists"


def builtin_category_immutable(name: str) -> str:
    """Return message when deleting a built-in category."""
    return f"Category '{name}' is built in and cannot be deleted"


def link_target_not_income(income_id: str) -> str:
    """Return message when an expense is linked to something that is not an income."""
    return f"Transaction {income_id} is not an income in this ledger"


def nothing_to_copy(month: int, year: int) -> str:
    """Return message when a copy finds no source transactions."""
    return f"No transactions to copy from {year}-{month + 1:02d} with the selected filters"
