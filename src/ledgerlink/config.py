"""Runtime settings resolved from the environment."""

import json
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

HOME_ENV = "LEDGERLINK_HOME"
DB_PATH_ENV = "LEDGERLINK_DB_PATH"
STORAGE_PATH_ENV = "LEDGERLINK_STORAGE_PATH"
STORAGE_SECRET_ENV = "LEDGERLINK_STORAGE_SECRET"

SECRET_FILE_NAME = "storage.key"
SESSION_FILE_NAME = "session.json"


@dataclass(frozen=True)
class Settings:
    """Locations and keys used by one ledgerlink process."""

    home: Path
    db_path: Path
    storage_path: Path
    storage_secret: bytes

    @property
    def session_file(self) -> Path:
        return self.home / SESSION_FILE_NAME


def _load_storage_secret(home: Path) -> bytes:
    """Read the URL signing key, generating and persisting one on first use."""
    value = os.environ.get(STORAGE_SECRET_ENV)
    if value:
        return value.encode()

    secret_file = home / SECRET_FILE_NAME
    if secret_file.exists():
        return secret_file.read_text().strip().encode()

    value = secrets.token_hex(32)
    secret_file.write_text(value)
    secret_file.chmod(0o600)
    return value.encode()


def load_settings(home: Optional[str] = None, db_path: Optional[str] = None) -> Settings:
    """Build settings from arguments, then environment variables, then defaults.

    Args:
        home: Base directory. Falls back to LEDGERLINK_HOME, then ~/.ledgerlink
        db_path: SQLite file. Falls back to LEDGERLINK_DB_PATH, then <home>/ledgerlink.db
    """
    home_path = Path(home or os.environ.get(HOME_ENV) or Path.home() / ".ledgerlink").expanduser()
    home_path.mkdir(parents=True, exist_ok=True)

    database = Path(db_path or os.environ.get(DB_PATH_ENV) or home_path / "ledgerlink.db").expanduser()
    storage = Path(os.environ.get(STORAGE_PATH_ENV) or home_path / "storage").expanduser()

    return Settings(
        home=home_path,
        db_path=database,
        storage_path=storage,
        storage_secret=_load_storage_secret(home_path),
    )


def read_session_token(settings: Settings) -> Optional[str]:
    """Return the token saved by the last sign-in, if any."""
    try:
        data = json.loads(settings.session_file.read_text())
    except (OSError, ValueError):
        return None
    token = data.get("token") if isinstance(data, dict) else None
    return token or None


def write_session_token(settings: Settings, token: str) -> None:
    settings.session_file.write_text(json.dumps({"token": token}))
    settings.session_file.chmod(0o600)


def clear_session_token(settings: Settings) -> None:
    settings.session_file.unlink(missing_ok=True)
