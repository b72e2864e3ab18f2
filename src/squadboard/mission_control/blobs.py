"""Attachment blob storage and signed URLs.

Created: 2026-03-02

Comment attachments are stored as opaque blobs, one file per storage ID:

~/.squadboard/blobs/
    {storage_id}      # raw bytes

Clients never write blobs directly. They ask for a signed upload URL,
POST the bytes to it, and get a storage ID back to reference from a
comment. Downloads use the same signing scheme.

Signature format: hex HMAC-SHA256 over ``{purpose}:{subject}:{expires_unix}``.
Rotating the signing key invalidates every outstanding URL.
"""

import hashlib
import hmac
import logging
import re
import time
import uuid
from pathlib import Path

from squadboard.mission_control.errors import InvalidSignatureError

logger = logging.getLogger(__name__)

# Storage IDs are UUID4 strings; anything else never touches the filesystem
_STORAGE_ID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")

UPLOAD_PURPOSE = "upload"
DOWNLOAD_PURPOSE = "download"


def is_valid_storage_id(storage_id: str) -> bool:
    return bool(_STORAGE_ID_PATTERN.match(storage_id))


class FileBlobStore:
    """Stores attachment bytes as individual files."""

    def __init__(self, base_path: Path | None = None):
        if base_path is None:
            base_path = Path.home() / ".squadboard" / "blobs"
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, storage_id: str) -> Path | None:
        if not is_valid_storage_id(storage_id):
            return None
        return self.base_path / storage_id

    async def put(self, data: bytes) -> str:
        """Store bytes and return a new storage ID."""
        storage_id = str(uuid.uuid4())
        path = self.base_path / storage_id
        temp_path = path.with_suffix(".tmp")
        try:
            temp_path.write_bytes(data)
            temp_path.replace(path)
        except OSError as e:
            logger.error(f"Error writing blob {storage_id}: {e}")
            if temp_path.exists():
                temp_path.unlink()
            raise
        logger.debug(f"Stored blob {storage_id} ({len(data)} bytes)")
        return storage_id

    async def get(self, storage_id: str) -> bytes | None:
        """Read stored bytes, or None when missing."""
        path = self._path(storage_id)
        if path is None or not path.exists():
            return None
        return path.read_bytes()

    async def exists(self, storage_id: str) -> bool:
        path = self._path(storage_id)
        return path is not None and path.exists()

    async def delete(self, storage_id: str) -> bool:
        """Delete a blob. Returns False when it was already gone."""
        path = self._path(storage_id)
        if path is None or not path.exists():
            return False
        path.unlink()
        return True


class UrlSigner:
    """Issues and verifies expiring HMAC signatures for storage URLs."""

    def __init__(self, key: str, ttl_seconds: int = 3600):
        self._key = key
        self.ttl_seconds = ttl_seconds

    def sign(self, purpose: str, subject: str = "") -> tuple[int, str]:
        """Return ``(expires_unix, signature)`` for *purpose* and *subject*."""
        expires = int(time.time()) + self.ttl_seconds
        return expires, self._sign(purpose, subject, expires)

    def verify(self, purpose: str, subject: str, expires: int, signature: str) -> None:
        """Raise InvalidSignatureError unless the signature is valid and unexpired."""
        if time.time() > expires:
            raise InvalidSignatureError("Storage URL has expired")
        expected = self._sign(purpose, subject, expires)
        if not hmac.compare_digest(signature.encode(), expected.encode()):
            raise InvalidSignatureError("Storage URL signature is invalid")

    def _sign(self, purpose: str, subject: str, expires: int) -> str:
        message = f"{purpose}:{subject}:{expires}"
        return hmac.new(self._key.encode(), message.encode(), hashlib.sha256).hexdigest()


# =========================================================================
# Factory Function
# =========================================================================

_blob_store_instance: FileBlobStore | None = None


def get_blob_store(base_path: Path | None = None) -> FileBlobStore:
    """Get or create the blob store singleton.

    Defaults to <settings.data_dir>/blobs.
    """
    global _blob_store_instance
    if _blob_store_instance is None:
        if base_path is None:
            from squadboard.config import get_settings

            base_path = get_settings().data_dir / "blobs"
        _blob_store_instance = FileBlobStore(base_path)
    return _blob_store_instance


def reset_blob_store() -> None:
    """Reset the blob store singleton (for testing)."""
    global _blob_store_instance
    _blob_store_instance = None
