"""Authentication and session service."""

import logging
import secrets
from datetime import datetime, timedelta, UTC
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ledgerlink.database.base import Database
from ledgerlink.domain.entities import AuthSession
from ledgerlink.domain.errors import (
    ConflictError,
    NotAuthenticatedError,
    RemoteStoreError,
    ValidationError,
    no_session,
)
from ledgerlink.domain.validation import (
    validate_display_name,
    validate_email,
    validate_password,
)

logger = logging.getLogger(__name__)

RESET_TOKEN_TTL = timedelta(hours=1)


class AuthService:
    """Holds the current session for one process.

    Construct one per process and hand it to the services that need a user
    ID; there is no module-level session.
    """

    def __init__(self, db: Database, hasher: Optional[PasswordHasher] = None):
        """Initialize auth service.

        Args:
            db: Database instance
            hasher: Password hasher, defaults to argon2 with library defaults
        """
        self.db = db
        self.hasher = hasher or PasswordHasher()
        self._session: Optional[AuthSession] = None

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def current_user_id(self) -> Optional[str]:
        return self._session.user_id if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def require_user_id(self) -> str:
        """Return the current user ID or fail fast.

        Raises:
            NotAuthenticatedError: If there is no session
        """
        if self._session is None:
            raise NotAuthenticatedError(no_session())
        return self._session.user_id

    def sign_up(self, email: str, password: str, display_name: str) -> AuthSession:
        """Create an identity with its profile and sign in.

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If the email is already registered
        """
        email = validate_email(email)
        password = validate_password(password)
        display_name = validate_display_name(display_name)

        if self.db.get_user_by_email(email) is not None:
            raise ConflictError(f"An account with email '{email}' already exists")

        user = self.db.create_user(email=email, password_hash=self.hasher.hash(password))
        try:
            self.db.create_profile(user_id=user.id, display_name=display_name)
        except RemoteStoreError:
            logger.error("Failed to create profile for %s, removing identity", user.id, exc_info=True)
            self.db.delete_user(user.id)
            raise

        logger.info("Registered user %s", user.id)
        return self._open_session(user.id, user.email)

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Verify credentials and open a session.

        Raises:
            ValidationError: If the credentials do not match
        """
        email = (email or "").strip().lower()
        user = self.db.get_user_by_email(email) if email else None
        if user is None:
            raise ValidationError("Invalid email or password")
        try:
            self.hasher.verify(user.password_hash, password or "")
        except (VerifyMismatchError, InvalidHash, VerificationError):
            raise ValidationError("Invalid email or password")

        return self._open_session(user.id, user.email)

    def restore(self, token: str) -> Optional[AuthSession]:
        """Resume a session from a stored token. Returns None if it is no longer valid."""
        user_id = self.db.get_session_user_id(token)
        if user_id is None:
            return None
        user = self.db.get_user(user_id)
        if user is None:
            return None
        self._session = AuthSession(
            token=token, user_id=user.id, email=user.email, created_at=datetime.now(UTC)
        )
        return self._session

    def sign_out(self) -> None:
        """Invalidate the current session, if any."""
        if self._session is None:
            return
        token = self._session.token
        self.db.delete_session(token)
        self._session = None

    def update_password(self, new_password: str, confirm: Optional[str] = None) -> None:
        """Change the current user's password."""
        user_id = self.require_user_id()
        password = validate_password(new_password, confirm)
        self.db.update_user_password(user_id, self.hasher.hash(password))
        logger.info("Password updated for %s", user_id)

    def request_password_reset(self, email: str) -> Optional[str]:
        """Issue a one-hour reset token.

        Returns:
            The token, or None when no account uses that email. Callers
            should show the same message either way.
        """
        email = validate_email(email)
        user = self.db.get_user_by_email(email)
        if user is None:
            return None
        token = secrets.token_urlsafe(32)
        self.db.create_password_reset(user.id, token, datetime.now(UTC) + RESET_TOKEN_TTL)
        return token

    def reset_password(self, token: str, new_password: str, confirm: Optional[str] = None) -> None:
        """Set a new password using a reset token.

        Raises:
            ValidationError: If the password is invalid or the token is unknown or expired
        """
        password = validate_password(new_password, confirm)
        user_id = self.db.consume_password_reset(token, datetime.now(UTC))
        if user_id is None:
            raise ValidationError("Reset token is invalid or has expired")
        self.db.update_user_password(user_id, self.hasher.hash(password))
        logger.info("Password reset for %s", user_id)

    def _open_session(self, user_id: str, email: str) -> AuthSession:
        token = secrets.token_urlsafe(32)
        self.db.create_session(user_id, token)
        self._session = AuthSession(
            token=token, user_id=user_id, email=email, created_at=datetime.now(UTC)
        )
        return self._session
