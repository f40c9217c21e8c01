"""Tests for write-boundary validation."""

from decimal import Decimal

import pytest

from ledgerlink.domain.errors import ValidationError
from ledgerlink.domain.validation import (
    MAX_AMOUNT,
    normalize_link_ids,
    validate_amount,
    validate_avatar,
    validate_category_name,
    validate_description,
    validate_email,
    validate_password,
)


def test_validate_amount_accepts_max():
    assert validate_amount(MAX_AMOUNT) == MAX_AMOUNT
    assert validate_amount("0.01") == Decimal("0.01")
    assert validate_amount(5) == Decimal("5")


@pytest.mark.parametrize("value", [0, Decimal("-1"), MAX_AMOUNT + 1, "0.001", Decimal("10.005"), "abc", 1.5, True, None])
def test_validate_amount_rejects(value):
    with pytest.raises(ValidationError):
        validate_amount(value)


def test_description_limits():
    assert validate_description(" a ") == "a"
    assert len(validate_description("x" * 200)) == 200
    with pytest.raises(ValidationError):
        validate_description("x" * 201)


def test_category_name_limits():
    assert validate_category_name("x" * 30) == "x" * 30
    with pytest.raises(ValidationError):
        validate_category_name("x" * 31)


def test_normalize_link_ids_is_ordered_set():
    assert normalize_link_ids(["b", "a", "b", "", " a "]) == ("b", "a")
    assert normalize_link_ids(None) == ()


def test_validate_email():
    assert validate_email(" Ana@Example.COM ") == "ana@example.com"
    with pytest.raises(ValidationError):
        validate_email("ana@")


def test_validate_password_confirm():
    assert validate_password("secret1", "secret1") == "secret1"
    with pytest.raises(ValidationError):
        validate_password("secret1", "secret2")


def test_validate_avatar():
    validate_avatar("image/webp", 1024)
    with pytest.raises(ValidationError):
        validate_avatar("application/pdf", 1024)
    with pytest.raises(ValidationError):
        validate_avatar(None, 1)
