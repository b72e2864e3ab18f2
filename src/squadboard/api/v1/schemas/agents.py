# Agent schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel, Field

from squadboard.mission_control.models import AgentStatus, HealthStatus


class AgentConfigIn(BaseModel):
    """Display configuration for an agent."""

    role: str = Field(..., min_length=1, max_length=100)
    emoji: str = Field(..., min_length=1, max_length=16)


class UpsertAgentRequest(BaseModel):
    """Create an agent or patch the supplied fields."""

    name: str = Field(..., min_length=1, max_length=50)
    status: AgentStatus | None = None
    config: AgentConfigIn | None = None
    health_status: HealthStatus | None = None
    discord_user_id: str | None = None


class HeartbeatRequest(BaseModel):
    """Agent check-in."""

    name: str = Field(..., min_length=1)
    status: AgentStatus | None = None
    current_task_id: str | None = None


class SetAgentStatusRequest(BaseModel):
    """Request to change an agent's presence."""

    status: AgentStatus


class UpdateAgentCostsRequest(BaseModel):
    """Overwrite an agent's daily usage counters."""

    name: str = Field(..., min_length=1)
    tokens_today: int = Field(..., ge=0)
    cost_today: float = Field(..., ge=0)
