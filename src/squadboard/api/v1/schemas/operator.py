# Operator status schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel, Field


class OperatorStatusRequest(BaseModel):
    """Full replacement of the operator status snapshot."""

    free_credits_remaining: float
    free_credits_total: float
    workspace_balance: float
    loop_running: bool
    loop_current_task: int | None = Field(default=None, ge=0)
    loop_total_tasks: int | None = Field(default=None, ge=0)
    loop_project: str | None = None
