"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the aggregation code never
depends on how rows are stored (e.g. linked IDs kept as a JSON list).
"""

from ledgerlink.domain import entities as domain
from ledgerlink.database.models import (
    CustomCategory as ORMCustomCategory,
    Profile as ORMProfile,
    Transaction as ORMTransaction,
    User as ORMUser,
)


def user_to_domain(orm_user: ORMUser) -> domain.AuthUser:
    """Convert SQLAlchemy User model to domain AuthUser entity."""
    return domain.AuthUser(
        id=orm_user.id,
        email=orm_user.email,
        password_hash=orm_user.password_hash,
        created_at=orm_user.created_at,
    )


def profile_to_domain(orm_profile: ORMProfile) -> domain.Profile:
    """Convert SQLAlchemy Profile model to domain Profile entity."""
    return domain.Profile(
        user_id=orm_profile.user_id,
        display_name=orm_profile.display_name,
        avatar_path=orm_profile.avatar_path,
        created_at=orm_profile.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        type=orm_transaction.type,
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        category=orm_transaction.category,
        date=orm_transaction.date,
        is_pending=bool(orm_transaction.is_pending),
        linked_income_ids=tuple(orm_transaction.linked_income_ids or ()),
    )


def custom_category_to_domain(orm_category: ORMCustomCategory) -> domain.Category:
    """Convert SQLAlchemy CustomCategory model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        icon=orm_category.icon,
        type=orm_category.type,
    )
