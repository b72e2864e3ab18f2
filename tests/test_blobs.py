# Tests for attachment blob storage and URL signing
# Created: 2026-03-02

import tempfile
from pathlib import Path

import pytest

from squadboard.mission_control.blobs import (
    DOWNLOAD_PURPOSE,
    UPLOAD_PURPOSE,
    FileBlobStore,
    UrlSigner,
    is_valid_storage_id,
)
from squadboard.mission_control.errors import InvalidSignatureError


@pytest.fixture
def blobs():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield FileBlobStore(Path(tmpdir))


class TestFileBlobStore:
    @pytest.mark.asyncio
    async def test_put_get_delete(self, blobs):
        storage_id = await blobs.put(b"\x00\x01binary")

        assert is_valid_storage_id(storage_id)
        assert await blobs.exists(storage_id)
        assert await blobs.get(storage_id) == b"\x00\x01binary"

        assert await blobs.delete(storage_id) is True
        assert await blobs.get(storage_id) is None
        assert await blobs.delete(storage_id) is False

    @pytest.mark.asyncio
    async def test_path_like_ids_are_rejected(self, blobs):
        """IDs that are not UUIDs never reach the filesystem."""
        (blobs.base_path.parent / "secret").write_bytes(b"nope")

        assert await blobs.get("../secret") is None
        assert await blobs.exists("../secret") is False
        assert await blobs.delete("../secret") is False


class TestUrlSigner:
    def test_sign_and_verify(self):
        signer = UrlSigner("key")
        expires, signature = signer.sign(DOWNLOAD_PURPOSE, "abc")

        signer.verify(DOWNLOAD_PURPOSE, "abc", expires, signature)

    def test_signature_bound_to_purpose(self):
        signer = UrlSigner("key")
        expires, signature = signer.sign(DOWNLOAD_PURPOSE, "")

        with pytest.raises(InvalidSignatureError):
            signer.verify(UPLOAD_PURPOSE, "", expires, signature)

    def test_signature_bound_to_key(self):
        expires, signature = UrlSigner("key-a").sign(UPLOAD_PURPOSE)

        with pytest.raises(InvalidSignatureError):
            UrlSigner("key-b").verify(UPLOAD_PURPOSE, "", expires, signature)

    def test_tampered_expiry(self):
        signer = UrlSigner("key")
        expires, signature = signer.sign(UPLOAD_PURPOSE)

        with pytest.raises(InvalidSignatureError):
            signer.verify(UPLOAD_PURPOSE, "", expires + 60, signature)

    def test_non_ascii_signature_is_rejected(self):
        signer = UrlSigner("key")
        expires, _ = signer.sign(UPLOAD_PURPOSE)

        with pytest.raises(InvalidSignatureError):
            signer.verify(UPLOAD_PURPOSE, "", expires, "é" * 64)

    def test_expired(self):
        signer = UrlSigner("key", ttl_seconds=-10)
        expires, signature = signer.sign(UPLOAD_PURPOSE)

        with pytest.raises(InvalidSignatureError, match="expired"):
            signer.verify(UPLOAD_PURPOSE, "", expires, signature)
