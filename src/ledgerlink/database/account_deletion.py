"""Server-side account deletion.

Removes everything a user owns: stored files, transactions, custom
categories and profile, then the auth identity itself. The identity goes
last so a failure part-way through still leaves the user able to sign in
and retry.
"""

import logging

from ledgerlink.database.base import Database
from ledgerlink.database.storage import ObjectStorage
from ledgerlink.domain.errors import RemoteStoreError

logger = logging.getLogger(__name__)


def delete_account(db: Database, storage: ObjectStorage, user_id: str) -> None:
    """Delete a user and all of their data.

    Failures in the intermediate steps are logged and the fan-out continues.

    Raises:
        RemoteStoreError: If the auth identity itself could not be deleted
    """
    try:
        names = storage.list(user_id)
        if names:
            storage.remove(f"{user_id}/{name}" for name in names)
    except RemoteStoreError:
        logger.error("Error deleting stored files for %s", user_id, exc_info=True)

    try:
        removed = db.delete_user_transactions(user_id)
        logger.info("Deleted %d transactions for %s", removed, user_id)
    except RemoteStoreError:
        logger.error("Error deleting transactions for %s", user_id, exc_info=True)

    try:
        db.delete_user_categories(user_id)
    except RemoteStoreError:
        logger.error("Error deleting custom categories for %s", user_id, exc_info=True)

    try:
        db.delete_profile(user_id)
    except RemoteStoreError:
        logger.error("Error deleting profile for %s", user_id, exc_info=True)

    try:
        db.delete_user(user_id)
    except RemoteStoreError as e:
        logger.error("Error deleting auth user %s", user_id, exc_info=True)
        raise RemoteStoreError("Error deleting user account") from e
    logger.info("Account %s deleted", user_id)
