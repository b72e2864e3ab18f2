# Costs router - per-turn ledger and daily summary.
# Created: 2026-02-20

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from squadboard.api.v1.schemas.costs import RecordCostRequest
from squadboard.mission_control.costs import TimeWindow, today_window
from squadboard.mission_control.manager import get_mission_control_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Costs"])


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@router.get("/costs")
async def recent_costs(limit: int = Query(100, ge=1, le=1000)) -> dict[str, Any]:
    """Get the most recent cost entries."""
    manager = get_mission_control_manager()
    costs = await manager.recent_costs(limit)
    return {
        "costs": [c.to_dict() for c in costs],
        "count": len(costs),
    }


@router.get("/costs/agent/{agent}")
async def costs_by_agent(agent: str, limit: int = Query(100, ge=1, le=1000)) -> dict[str, Any]:
    """Get an agent's most recent cost entries."""
    manager = get_mission_control_manager()
    costs = await manager.costs_by_agent(agent, limit)
    return {
        "costs": [c.to_dict() for c in costs],
        "count": len(costs),
    }


@router.get("/costs/daily-summary")
async def daily_summary(
    start: datetime | None = None,
    end: datetime | None = None,
    agent: str | None = None,
) -> dict[str, Any]:
    """Aggregate costs per agent.

    Without start/end the current UTC day is used. Naive timestamps are
    read as UTC. With only start, the window is one day from start.
    """
    if start is None and end is not None:
        raise HTTPException(status_code=400, detail="end requires start")

    if start is None:
        window = today_window()
    else:
        start = _as_utc(start)
        try:
            end_at = _as_utc(end) if end else start + timedelta(days=1)
            window = TimeWindow(start=start, end=end_at)
        except (ValueError, OverflowError) as e:
            raise HTTPException(status_code=400, detail=str(e))

    manager = get_mission_control_manager()
    summary = await manager.daily_summary(window, agent=agent)
    return {"summary": summary.to_dict()}


@router.post("/costs")
async def record_cost(request: RecordCostRequest) -> dict[str, Any]:
    """Record token usage for one agent turn."""
    manager = get_mission_control_manager()
    entry = await manager.record_cost(
        request.agent,
        request.model,
        tokens_in=request.tokens_in,
        tokens_out=request.tokens_out,
        estimated_cost=request.estimated_cost,
        task_id=request.task_id,
        session_id=request.session_id,
        turn_type=request.turn_type,
    )
    return {"cost": entry.to_dict()}
