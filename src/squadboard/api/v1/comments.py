# Comments router - task threads with attachments.
# Created: 2026-02-20

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from squadboard.api.v1.schemas.comments import AddCommentRequest
from squadboard.api.v1.schemas.common import OkResponse
from squadboard.mission_control.manager import get_mission_control_manager
from squadboard.mission_control.models import Attachment

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Comments"])


@router.get("/tasks/{task_id}/comments")
async def list_comments(task_id: str) -> dict[str, Any]:
    """Get the comments on a task, oldest first."""
    manager = get_mission_control_manager()
    await manager.require_task(task_id)
    comments = await manager.list_comments(task_id)
    return {
        "comments": [c.to_dict() for c in comments],
        "count": len(comments),
    }


@router.post("/tasks/{task_id}/comments")
async def add_comment(task_id: str, request: AddCommentRequest) -> dict[str, Any]:
    """Post a comment, optionally with previously uploaded attachments."""
    manager = get_mission_control_manager()

    content = request.content
    if not content.strip():
        if not request.attachments:
            raise HTTPException(status_code=400, detail="Comment needs content or attachments")
        content = "📎 Attached files"

    comment = await manager.add_comment(
        task_id,
        author=request.author,
        content=content,
        content_type=request.content_type,
        attachments=[Attachment(**a.model_dump()) for a in request.attachments],
    )

    return {"comment": comment.to_dict()}


@router.delete("/comments/{comment_id}", response_model=OkResponse)
async def remove_comment(comment_id: str):
    """Delete a comment and its attachment blobs."""
    manager = get_mission_control_manager()
    deleted = await manager.remove_comment(comment_id)
    return OkResponse(message=f"Comment {comment_id} deleted ({deleted} attachment(s) removed)")
