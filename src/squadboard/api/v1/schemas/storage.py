# Attachment storage schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel


class UploadUrlResponse(BaseModel):
    """Signed upload URL, reusable until it expires."""

    upload_url: str


class UploadResponse(BaseModel):
    """Storage ID of an uploaded blob."""

    storage_id: str
    size: int


class AttachmentUrlResponse(BaseModel):
    """Signed download URL for a blob."""

    storage_id: str
    url: str
