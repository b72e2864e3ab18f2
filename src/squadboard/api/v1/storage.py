# Storage router - signed upload/download of comment attachments.
# Created: 2026-02-20
#
# Flow: POST /storage/upload-url -> POST bytes to the returned URL ->
# reference the storage_id from a comment's attachments.

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response

from squadboard.api.v1.schemas.storage import (
    AttachmentUrlResponse,
    UploadResponse,
    UploadUrlResponse,
)
from squadboard.mission_control.manager import get_mission_control_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Storage"])


@router.post("/storage/upload-url", response_model=UploadUrlResponse)
async def generate_upload_url():
    """Issue a signed upload URL, reusable until it expires."""
    manager = get_mission_control_manager()
    return UploadUrlResponse(upload_url=manager.generate_upload_url())


@router.post("/storage/upload", response_model=UploadResponse)
async def upload(request: Request, expires: int, signature: str):
    """Store the raw request body as a blob."""
    data = await request.body()
    if not data:
        raise HTTPException(status_code=400, detail="Empty upload")

    manager = get_mission_control_manager()
    storage_id = await manager.store_upload(data, expires, signature)
    return UploadResponse(storage_id=storage_id, size=len(data))


@router.get("/storage/{storage_id}/url", response_model=AttachmentUrlResponse)
async def get_attachment_url(storage_id: str):
    """Get a signed download URL for a blob."""
    manager = get_mission_control_manager()
    url = await manager.get_attachment_url(storage_id)

    if url is None:
        raise HTTPException(status_code=404, detail="Attachment not found")

    return AttachmentUrlResponse(storage_id=storage_id, url=url)


@router.get("/storage/{storage_id}")
async def download(storage_id: str, expires: int, signature: str) -> Response:
    """Return blob bytes for a signed download URL."""
    manager = get_mission_control_manager()
    data = await manager.read_attachment(storage_id, expires, signature)
    return Response(content=data, media_type="application/octet-stream")
