"""Object storage for user files (avatars)."""

import hashlib
import hmac
import time
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional
from urllib.parse import parse_qs, quote, unquote, urlsplit

from ledgerlink.domain.errors import NotFoundError, RemoteStoreError, ValidationError


class ObjectStorage(ABC):
    """Abstract bucket interface."""

    @abstractmethod
    def upload(self, path: str, data: bytes, upsert: bool = False) -> None:
        """Store ``data`` at ``path``. Raises RemoteStoreError if it exists and upsert is False."""
        pass

    @abstractmethod
    def download(self, path: str) -> bytes:
        """Read the object at ``path``."""
        pass

    @abstractmethod
    def list(self, prefix: str) -> list[str]:
        """List object names directly under a folder prefix."""
        pass

    @abstractmethod
    def remove(self, paths: Iterable[str]) -> None:
        """Delete objects. Missing objects are ignored."""
        pass

    @abstractmethod
    def create_signed_url(self, path: str, expires_in: int = 3600) -> str:
        """Return a display URL for ``path`` valid for ``expires_in`` seconds."""
        pass

    @abstractmethod
    def verify_signed_url(self, url: str) -> str:
        """Return the object path a signed URL points at, or raise ValidationError."""
        pass


class LocalObjectStorage(ObjectStorage):
    """Filesystem bucket handing out HMAC-signed ``file://`` URLs."""

    def __init__(self, root: Path, secret: bytes, bucket: str = "avatars"):
        """Initialize local object storage.

        Args:
            root: Directory holding all buckets
            secret: Key used to sign URLs
            bucket: Bucket (sub-directory) name
        """
        self.bucket_dir = Path(root).expanduser().resolve() / bucket
        self.bucket_dir.mkdir(parents=True, exist_ok=True)
        self.secret = secret

    def _resolve(self, path: str) -> Path:
        parts = PurePosixPath(path).parts
        if not parts or PurePosixPath(path).is_absolute() or ".." in parts:
            raise ValidationError(f"Invalid storage path '{path}'")
        return self.bucket_dir.joinpath(*parts)

    def _signature(self, path: str, expires: int) -> str:
        message = f"{path}:{expires}".encode()
        return hmac.new(self.secret, message, hashlib.sha256).hexdigest()

    def upload(self, path: str, data: bytes, upsert: bool = False) -> None:
        target = self._resolve(path)
        if target.exists() and not upsert:
            raise RemoteStoreError(f"Object '{path}' already exists")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise RemoteStoreError(f"Could not store '{path}': {e}") from e

    def download(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise NotFoundError(f"Object '{path}' not found")
        try:
            return target.read_bytes()
        except OSError as e:
            raise RemoteStoreError(f"Could not read '{path}': {e}") from e

    def list(self, prefix: str) -> list[str]:
        folder = self._resolve(prefix)
        if not folder.is_dir():
            return []
        return sorted(entry.name for entry in folder.iterdir() if entry.is_file())

    def remove(self, paths: Iterable[str]) -> None:
        for path in paths:
            target = self._resolve(path)
            try:
                target.unlink(missing_ok=True)
            except OSError as e:
                raise RemoteStoreError(f"Could not remove '{path}': {e}") from e

    def create_signed_url(self, path: str, expires_in: int = 3600, now: Optional[float] = None) -> str:
        target = self._resolve(path)
        if not target.is_file():
            raise NotFoundError(f"Object '{path}' not found")
        expires = int(now if now is not None else time.time()) + expires_in
        signature = self._signature(path, expires)
        return f"{target.as_uri()}?path={quote(path, safe='')}&expires={expires}&signature={signature}"

    def verify_signed_url(self, url: str, now: Optional[float] = None) -> str:
        query = parse_qs(urlsplit(url).query)
        try:
            path = unquote(query["path"][0])
            expires = int(query["expires"][0])
            signature = query["signature"][0]
        except (KeyError, IndexError, ValueError):
            raise ValidationError("Malformed signed URL")

        if not hmac.compare_digest(signature, self._signature(path, expires)):
            raise ValidationError("Signed URL signature does not match")
        current = now if now is not None else time.time()
        if current > expires:
            raise ValidationError("Signed URL has expired")
        return path
