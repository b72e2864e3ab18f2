# Cost ledger schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel, Field


class RecordCostRequest(BaseModel):
    """Token usage for one agent turn."""

    agent: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    tokens_in: int = Field(..., ge=0)
    tokens_out: int = Field(..., ge=0)
    estimated_cost: float = Field(..., ge=0)
    task_id: str | None = None
    session_id: str | None = None
    turn_type: str | None = None
