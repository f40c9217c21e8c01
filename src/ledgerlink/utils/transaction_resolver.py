"""Utility for resolving transaction IDs typed on the command line."""

from typing import Sequence

from ledgerlink.domain.entities import Transaction
from ledgerlink.domain.errors import NotFoundError, ValidationError, transaction_not_found


def resolve_transaction(transactions: Sequence[Transaction], reference: str) -> Transaction:
    """Resolve a full transaction ID or a unique ID prefix.

    Args:
        transactions: Transactions to search
        reference: Full ID or a prefix of at least 4 characters

    Returns:
        Matching transaction

    Raises:
        NotFoundError: If nothing matches
        ValidationError: If a prefix is too short or matches several transactions
    """
    reference = reference.strip()
    for txn in transactions:
        if txn.id == reference:
            return txn

    if len(reference) < 4:
        raise ValidationError(f"ID prefix '{reference}' is too short (need at least 4 characters)")

    matches = [txn for txn in transactions if txn.id.startswith(reference)]
    if not matches:
        raise NotFoundError(transaction_not_found(reference))
    if len(matches) > 1:
        raise ValidationError(
            f"ID prefix '{reference}' is ambiguous ({len(matches)} transactions match)"
        )
    return matches[0]
