# Comment schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel, Field

from squadboard.mission_control.models import ContentType


class AttachmentIn(BaseModel):
    """Metadata for an uploaded blob to attach to a comment."""

    storage_id: str = Field(..., min_length=1)
    filename: str = Field(..., min_length=1, max_length=255)
    mime_type: str = "application/octet-stream"
    size: int = Field(default=0, ge=0)


class AddCommentRequest(BaseModel):
    """Request to post a comment on a task."""

    author: str = Field(..., min_length=1)
    content: str = ""
    content_type: ContentType = ContentType.TEXT
    attachments: list[AttachmentIn] = Field(default_factory=list)
