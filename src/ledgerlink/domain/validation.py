"""Write-boundary validation.

Everything here runs before the record store is touched, so a rejected
input never leaves a partial change behind.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerlink.domain.entities import TRANSACTION_TYPES
from ledgerlink.domain.errors import ValidationError

MAX_AMOUNT = Decimal("1000000000000")
MAX_DESCRIPTION_LENGTH = 200
MAX_CATEGORY_NAME_LENGTH = 30
MAX_EMAIL_LENGTH = 255
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 100
MIN_DISPLAY_NAME_LENGTH = 2
MAX_DISPLAY_NAME_LENGTH = 50
MAX_AVATAR_BYTES = 5 * 1024 * 1024

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_type(transaction_type: str) -> str:
    if transaction_type not in TRANSACTION_TYPES:
        raise ValidationError(
            f"Invalid transaction type '{transaction_type}', expected one of: {', '.join(TRANSACTION_TYPES)}"
        )
    return transaction_type


def validate_amount(amount) -> Decimal:
    """Return ``amount`` as a Decimal in (0, MAX_AMOUNT] with at most two decimals."""
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int, str)):
        raise ValidationError(f"Amount must be a number, got {type(amount).__name__}")
    try:
        value = Decimal(amount)
    except ArithmeticError:
        raise ValidationError(f"Amount '{amount}' is not a valid number")
    if not value.is_finite():
        raise ValidationError(f"Amount '{amount}' is not a valid number")
    if value.as_tuple().exponent < -2:
        raise ValidationError("Amount cannot have more than 2 decimal places")
    if value <= 0:
        raise ValidationError("Amount must be greater than 0")
    if value > MAX_AMOUNT:
        raise ValidationError("Amount is too large")
    return value


def validate_description(description: Optional[str]) -> str:
    text = (description or "").strip()
    if not text:
        raise ValidationError("Description is required")
    if len(text) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f"Description is too long (max {MAX_DESCRIPTION_LENGTH} characters)")
    return text


def validate_category_label(category: Optional[str]) -> str:
    """Validate the category text stored on a transaction."""
    text = (category or "").strip()
    if not text:
        raise ValidationError("Category is required")
    return text


def validate_date(value) -> date:
    if not isinstance(value, date):
        raise ValidationError(f"Date must be a calendar date, got {value!r}")
    return value


def normalize_link_ids(income_ids: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Drop blanks and repeated IDs, keeping first-occurrence order."""
    seen: dict[str, None] = {}
    for income_id in income_ids or ():
        income_id = str(income_id).strip()
        if income_id:
            seen.setdefault(income_id, None)
    return tuple(seen)


def validate_category_name(name: Optional[str]) -> str:
    text = (name or "").strip()
    if not text:
        raise ValidationError("Category name is required")
    if len(text) > MAX_CATEGORY_NAME_LENGTH:
        raise ValidationError(
            f"Category name is too long (max {MAX_CATEGORY_NAME_LENGTH} characters)"
        )
    return text


def validate_email(email: Optional[str]) -> str:
    text = (email or "").strip()
    if not text:
        raise ValidationError("Email is required")
    if len(text) > MAX_EMAIL_LENGTH:
        raise ValidationError("Email is too long")
    if not _EMAIL.match(text):
        raise ValidationError(f"'{text}' is not a valid email address")
    return text.lower()


def validate_password(password: Optional[str], confirm: Optional[str] = None) -> str:
    password = password or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationError("Password is too long")
    if confirm is not None and confirm != password:
        raise ValidationError("Passwords do not match")
    return password


def validate_display_name(display_name: Optional[str]) -> str:
    text = (display_name or "").strip()
    if len(text) < MIN_DISPLAY_NAME_LENGTH:
        raise ValidationError(
            f"Display name must be at least {MIN_DISPLAY_NAME_LENGTH} characters"
        )
    if len(text) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationError("Display name is too long")
    return text


def validate_avatar(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Avatar must be an image file")
    if size > MAX_AVATAR_BYTES:
        raise ValidationError("Avatar must not be larger than 5MB")
