# Activity feed schemas.
# Created: 2026-02-20

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LogActivityRequest(BaseModel):
    """Append an entry to the activity feed."""

    agent: str = Field(..., min_length=1)
    action_type: str = Field(..., min_length=1, max_length=100)
    task_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    session_id: str | None = None
