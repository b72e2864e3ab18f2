# Operator status router - singleton snapshot of external tool counters.
# Created: 2026-02-20

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from squadboard.api.v1.schemas.operator import OperatorStatusRequest
from squadboard.mission_control.manager import get_mission_control_manager
from squadboard.mission_control.models import OperatorStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Operator"])


@router.get("/operator-status")
async def get_operator_status() -> dict[str, Any]:
    """Get the latest operator status, or null if none was reported."""
    manager = get_mission_control_manager()
    status = await manager.get_operator_status()
    return {"operator_status": status.to_dict() if status else None}


@router.put("/operator-status")
async def update_operator_status(request: OperatorStatusRequest) -> dict[str, Any]:
    """Replace the operator status snapshot."""
    manager = get_mission_control_manager()
    status = await manager.update_operator_status(OperatorStatus(**request.model_dump()))
    return {"operator_status": status.to_dict()}
