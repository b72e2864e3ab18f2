# Health schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness summary."""

    status: str = "ok"
    version: str = ""
