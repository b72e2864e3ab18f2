# Agents router - registry, upsert, heartbeat, presence, daily cost counters.
# Created: 2026-02-20

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from squadboard.api.v1.schemas.agents import (
    HeartbeatRequest,
    SetAgentStatusRequest,
    UpdateAgentCostsRequest,
    UpsertAgentRequest,
)
from squadboard.mission_control.manager import get_mission_control_manager
from squadboard.mission_control.models import AgentConfig

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Agents"])


@router.get("/agents")
async def list_agents() -> dict[str, Any]:
    """List all agents in the order they joined."""
    manager = get_mission_control_manager()
    agents = await manager.list_agents()
    return {
        "agents": [a.to_dict() for a in agents],
        "count": len(agents),
    }


@router.get("/agents/by-name/{name}")
async def get_agent_by_name(name: str) -> dict[str, Any]:
    """Get an agent by its unique name."""
    manager = get_mission_control_manager()
    agent = await manager.get_agent_by_name(name)

    if not agent:
        raise HTTPException(status_code=404, detail="Agent not found")

    return {"agent": agent.to_dict()}


@router.get("/agents/{agent_id}")
async def get_agent(agent_id: str) -> dict[str, Any]:
    """Get an agent by ID."""
    manager = get_mission_control_manager()
    agent = await manager.get_agent(agent_id)

    if not agent:
        raise HTTPException(status_code=404, detail="Agent not found")

    return {"agent": agent.to_dict()}


@router.post("/agents/upsert")
async def upsert_agent(request: UpsertAgentRequest) -> dict[str, Any]:
    """Create an agent on first reference, otherwise patch the supplied fields."""
    manager = get_mission_control_manager()

    agent = await manager.upsert_agent(
        request.name,
        status=request.status,
        config=AgentConfig(**request.config.model_dump()) if request.config else None,
        health_status=request.health_status,
        discord_user_id=request.discord_user_id,
    )

    return {"agent": agent.to_dict()}


@router.post("/agents/heartbeat")
async def heartbeat(request: HeartbeatRequest) -> dict[str, Any]:
    """Record an agent check-in. The agent must already be registered."""
    manager = get_mission_control_manager()
    agent = await manager.heartbeat(
        request.name,
        status=request.status,
        current_task_id=request.current_task_id,
    )
    return {"agent": agent.to_dict()}


@router.post("/agents/costs")
async def update_agent_costs(request: UpdateAgentCostsRequest) -> dict[str, Any]:
    """Overwrite an agent's daily token and cost counters."""
    manager = get_mission_control_manager()
    agent = await manager.update_agent_costs(
        request.name,
        tokens_today=request.tokens_today,
        cost_today=request.cost_today,
    )
    return {"agent": agent.to_dict()}


@router.post("/agents/reset-daily-costs")
async def reset_daily_costs() -> dict[str, Any]:
    """Zero the daily counters on every agent."""
    manager = get_mission_control_manager()
    count = await manager.reset_daily_costs()
    return {"reset": count}


@router.post("/agents/{agent_id}/status")
async def set_agent_status(agent_id: str, request: SetAgentStatusRequest) -> dict[str, Any]:
    """Change an agent's presence status."""
    manager = get_mission_control_manager()
    agent = await manager.set_agent_status(agent_id, request.status)
    return {"agent": agent.to_dict()}
