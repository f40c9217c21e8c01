"""Profile, avatar and account lifecycle service."""

import logging
from pathlib import PurePosixPath
from typing import Callable, Optional

from ledgerlink.database.account_deletion import delete_account
from ledgerlink.database.base import Database
from ledgerlink.database.storage import ObjectStorage
from ledgerlink.domain.auth import AuthService
from ledgerlink.domain.entities import Profile
from ledgerlink.domain.errors import NotFoundError
from ledgerlink.domain.validation import validate_avatar, validate_display_name

logger = logging.getLogger(__name__)

DEFAULT_URL_TTL = 3600

DeletionFunction = Callable[[str], None]


class AccountService:
    """Service for the signed-in user's profile and account."""

    def __init__(
        self,
        db: Database,
        storage: ObjectStorage,
        auth: AuthService,
        deletion_function: Optional[DeletionFunction] = None,
    ):
        """Initialize account service.

        Args:
            db: Database instance
            storage: Object storage holding avatars
            auth: Auth service providing the current user
            deletion_function: Callable deleting a user and their data by ID;
                defaults to the store-side fan-out in ``account_deletion``
        """
        self.db = db
        self.storage = storage
        self.auth = auth
        self.deletion_function = deletion_function or (
            lambda user_id: delete_account(self.db, self.storage, user_id)
        )

    def get_profile(self) -> Profile:
        """Get the current user's profile.

        Raises:
            NotAuthenticatedError: If there is no session
            NotFoundError: If the profile row is missing
        """
        user_id = self.auth.require_user_id()
        profile = self.db.get_profile(user_id)
        if profile is None:
            raise NotFoundError(f"Profile for user {user_id} not found")
        return profile

    def update_display_name(self, display_name: str) -> Profile:
        user_id = self.auth.require_user_id()
        display_name = validate_display_name(display_name)
        return self.db.update_profile(user_id, display_name=display_name)

    def upload_avatar(self, filename: str, data: bytes, content_type: str) -> Profile:
        """Store an avatar at ``<user_id>/avatar.<ext>`` and record the path.

        The profile keeps the storage path; display URLs are signed on demand
        by ``avatar_url``.

        Raises:
            ValidationError: If the file is not an image or is larger than 5MB
        """
        user_id = self.auth.require_user_id()
        validate_avatar(content_type, len(data))

        extension = PurePosixPath(filename).suffix.lstrip(".").lower() or content_type.split("/", 1)[1]
        path = f"{user_id}/avatar.{extension}"

        # Other extensions left over from an earlier upload would be orphaned
        stale = [
            f"{user_id}/{name}"
            for name in self.storage.list(user_id)
            if name.startswith("avatar.") and name != f"avatar.{extension}"
        ]
        self.storage.upload(path, data, upsert=True)
        profile = self.db.update_profile(user_id, avatar_path=path)
        if stale:
            self.storage.remove(stale)
        logger.info("Avatar updated for %s", user_id)
        return profile

    def avatar_url(self, expires_in: int = DEFAULT_URL_TTL) -> Optional[str]:
        """Return a time-limited display URL for the avatar, or None.

        Profiles that still hold an absolute http(s) URL are returned as is.
        """
        profile = self.get_profile()
        path = profile.avatar_path
        if not path:
            return None
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return self.storage.create_signed_url(path, expires_in)

    def delete_account(self) -> None:
        """Delete the current user's account and everything it owns, then sign out.

        Raises:
            NotAuthenticatedError: If there is no session
            RemoteStoreError: If the deletion function fails; the session is kept
        """
        user_id = self.auth.require_user_id()
        self.deletion_function(user_id)
        self.auth.sign_out()
        logger.info("Signed out deleted account %s", user_id)
