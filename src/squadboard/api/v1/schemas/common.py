# Common API response schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel


class APIResponse(BaseModel):
    """Base response wrapper."""

    model_config = {"from_attributes": True}


class ErrorResponse(APIResponse):
    """Standard error envelope."""

    detail: str
    code: str | None = None


class OkResponse(APIResponse):
    """Simple success response."""

    ok: bool = True
    message: str = ""
