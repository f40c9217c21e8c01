"""Database layer for ledgerlink application."""

from ledgerlink.database.base import Database
from ledgerlink.database.factories import create_object_storage, create_sqlite_database
from ledgerlink.database.storage import LocalObjectStorage, ObjectStorage

__all__ = [
    "Database",
    "ObjectStorage",
    "LocalObjectStorage",
    "create_object_storage",
    "create_sqlite_database",
]
