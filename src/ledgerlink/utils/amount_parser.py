"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal magnitude.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "$ 1,000,000"

    Direction comes from the transaction type, so signs and parenthesised
    negatives are rejected rather than folded into the value.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    if amount_str.startswith("-") or amount_str.startswith("("):
        raise ValueError(
            f"Amount '{amount_str}' must be a positive magnitude; use --type to set direction"
        )

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount
