# Health router - liveness and dashboard counts.
# Created: 2026-02-20

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Any

from fastapi import APIRouter

from squadboard.api.v1.schemas.health import HealthResponse
from squadboard.mission_control.manager import get_mission_control_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def _package_version() -> str:
    try:
        return get_version("squadboard")
    except PackageNotFoundError:
        return "unknown"


@router.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return HealthResponse(version=_package_version())


@router.get("/stats")
async def get_stats() -> dict[str, Any]:
    """Get record counts for the dashboard header."""
    manager = get_mission_control_manager()
    stats = await manager.get_stats()
    return {"stats": stats}
