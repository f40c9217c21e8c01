"""Factory functions for creating the record store and object storage."""

from ledgerlink.config import Settings
from ledgerlink.database.sqlalchemy_db import SQLAlchemyDatabase
from ledgerlink.database.storage import LocalObjectStorage


def create_sqlite_database(database_path: str) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file, as resolved by
            ``load_settings``

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_object_storage(settings: Settings) -> LocalObjectStorage:
    """Create the avatar bucket under the configured storage root."""
    return LocalObjectStorage(settings.storage_path, settings.storage_secret)
