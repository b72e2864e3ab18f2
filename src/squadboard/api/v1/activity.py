# Activity router - dashboard feed.
# Created: 2026-02-20

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Query

from squadboard.api.v1.schemas.activity import LogActivityRequest
from squadboard.mission_control.manager import get_mission_control_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Activity"])


@router.get("/activity")
async def recent_activity(limit: int = Query(20, ge=1, le=500)) -> dict[str, Any]:
    """Get the most recent activity entries."""
    manager = get_mission_control_manager()
    activities = await manager.recent_activity(limit)
    return {
        "activities": [a.to_dict() for a in activities],
        "count": len(activities),
    }


@router.get("/activity/agent/{agent}")
async def activity_by_agent(agent: str, limit: int = Query(50, ge=1, le=500)) -> dict[str, Any]:
    """Get an agent's recent activity."""
    manager = get_mission_control_manager()
    activities = await manager.activity_by_agent(agent, limit)
    return {
        "activities": [a.to_dict() for a in activities],
        "count": len(activities),
    }


@router.post("/activity")
async def log_activity(request: LogActivityRequest) -> dict[str, Any]:
    """Append an entry to the feed (used by agents reporting their own work)."""
    manager = get_mission_control_manager()
    activity = await manager.log_activity(
        request.agent,
        request.action_type,
        task_id=request.task_id,
        details=request.details,
        session_id=request.session_id,
    )
    return {"activity": activity.to_dict()}
