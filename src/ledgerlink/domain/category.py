"""Category registry: built-in categories plus the user's custom ones."""

import logging
from typing import Optional

from ledgerlink.database.base import Database
from ledgerlink.domain.auth import AuthService
from ledgerlink.domain.entities import EXPENSE, INCOME, Category
from ledgerlink.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    builtin_category_immutable,
    category_not_found,
    duplicate_category_name,
)
from ledgerlink.domain.validation import validate_category_name, validate_type

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="1", name="Sueldo", icon="Wallet", type=INCOME),
    Category(id="2", name="Bonificación", icon="Gift", type=INCOME),
    Category(id="3", name="Primas", icon="Award", type=INCOME),
    Category(id="4", name="Trabajo", icon="Briefcase", type=INCOME),
    Category(id="5", name="Otro", icon="Plus", type=INCOME),
    Category(id="6", name="Casa", icon="Home", type=EXPENSE),
    Category(id="7", name="Colegio", icon="GraduationCap", type=EXPENSE),
    Category(id="8", name="Servicios", icon="Receipt", type=EXPENSE),
    Category(id="9", name="Celular", icon="Smartphone", type=EXPENSE),
    Category(id="10", name="Créditos", icon="CreditCard", type=EXPENSE),
    Category(id="11", name="Otros", icon="MoreHorizontal", type=EXPENSE),
    Category(id="12", name="Finca", icon="Trees", type=EXPENSE),
    Category(id="13", name="Transporte", icon="Car", type=EXPENSE),
)

CUSTOM_ICONS = {INCOME: "Plus", EXPENSE: "Tag"}


class CategoryRegistry:
    """Union of the built-in categories and the user's custom categories.

    Names are unique across the whole union, regardless of type, compared
    trimmed and case-insensitively. Transactions keep their category as plain
    text, so deleting a category never touches them.
    """

    def __init__(self, db: Database, auth: AuthService, builtins: tuple[Category, ...] = DEFAULT_CATEGORIES):
        """Initialize category registry.

        Args:
            db: Database instance
            auth: Auth service providing the current user
            builtins: Fixed categories that cannot be deleted
        """
        self.db = db
        self.auth = auth
        self.builtins = builtins
        self._custom: list[Category] = []

    @property
    def custom_categories(self) -> tuple[Category, ...]:
        return tuple(self._custom)

    def load(self) -> list[Category]:
        """Fetch the user's custom categories."""
        user_id = self.auth.require_user_id()
        self._custom = list(self.db.list_custom_categories(user_id))
        return list(self._custom)

    def all_categories(self, type: Optional[str] = None) -> list[Category]:
        """List built-in then custom categories, optionally of one type."""
        categories = [*self.builtins, *self._custom]
        if type is not None:
            return [cat for cat in categories if cat.type == type]
        return categories

    def get_category(self, category_id: str) -> Optional[Category]:
        for cat in self.all_categories():
            if cat.id == category_id:
                return cat
        return None

    def get_category_by_name(self, name: str) -> Optional[Category]:
        key = name.strip().lower()
        for cat in self.all_categories():
            if cat.name.lower() == key:
                return cat
        return None

    def is_builtin(self, category_id: str) -> bool:
        return any(cat.id == category_id for cat in self.builtins)

    def add_category(self, name: str, type: str) -> Category:
        """Create a custom category.

        Raises:
            ValidationError: If the name is empty or too long, or the type is unknown
            ConflictError: If any category of any type already uses the name
        """
        user_id = self.auth.require_user_id()
        name = validate_category_name(name)
        validate_type(type)
        if self.get_category_by_name(name) is not None:
            raise ConflictError(duplicate_category_name(name))

        category = self.db.create_custom_category(
            user_id=user_id, name=name, icon=CUSTOM_ICONS[type], type=type
        )
        self._custom.append(category)
        logger.info("Category created: %s (%s)", category.name, category.type)
        return category

    def delete_category(self, category_id: str) -> None:
        """Remove a custom category.

        Raises:
            ValidationError: If the category is built in
            NotFoundError: If no custom category has that ID
        """
        user_id = self.auth.require_user_id()
        for cat in self.builtins:
            if cat.id == category_id:
                raise ValidationError(builtin_category_immutable(cat.name))
        if not any(cat.id == category_id for cat in self._custom):
            raise NotFoundError(category_not_found(category_id))

        self.db.delete_custom_category(user_id, category_id)
        self._custom = [cat for cat in self._custom if cat.id != category_id]
        logger.info("Category deleted: %s", category_id)
