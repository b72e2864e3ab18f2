# Tasks router - queue listing, create, patch, status changes, assignment, history.
# Created: 2026-02-20
#
# Missing tasks surface as NotFoundError and are mapped to 404 by the
# app-level exception handlers.

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from squadboard.api.v1.schemas.tasks import (
    AssignTaskRequest,
    CreateTaskRequest,
    UpdateTaskRequest,
    UpdateTaskStatusRequest,
)
from squadboard.mission_control.manager import get_mission_control_manager
from squadboard.mission_control.models import TaskStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tasks"])


@router.get("/tasks")
async def list_tasks(include_cancelled: bool = False) -> dict[str, Any]:
    """List the task queue ordered by priority, newest first within a priority."""
    manager = get_mission_control_manager()
    tasks = await manager.list_tasks(include_cancelled=include_cancelled)
    return {
        "tasks": [t.to_dict() for t in tasks],
        "count": len(tasks),
    }


@router.get("/tasks/by-status/{status}")
async def list_tasks_by_status(status: TaskStatus) -> dict[str, Any]:
    """List tasks in one status."""
    manager = get_mission_control_manager()
    tasks = await manager.list_tasks_by_status(status)
    return {
        "tasks": [t.to_dict() for t in tasks],
        "count": len(tasks),
    }


@router.get("/tasks/by-assignee/{assignee}")
async def list_tasks_by_assignee(assignee: str) -> dict[str, Any]:
    """List tasks assigned to an agent."""
    manager = get_mission_control_manager()
    tasks = await manager.list_tasks_by_assignee(assignee)
    return {
        "tasks": [t.to_dict() for t in tasks],
        "count": len(tasks),
    }


@router.post("/tasks")
async def create_task(request: CreateTaskRequest) -> dict[str, Any]:
    """Create a new pending task."""
    manager = get_mission_control_manager()

    task = await manager.create_task(
        title=request.title,
        created_by=request.created_by,
        description=request.description,
        priority=request.priority,
        assigned_to=request.assigned_to,
        project=request.project,
        tags=request.tags,
        mentions=request.mentions,
        due_at=request.due_at,
        parent_task_id=request.parent_task_id,
    )

    return {"task": task.to_dict()}


@router.get("/tasks/{task_id}")
async def get_task(task_id: str) -> dict[str, Any]:
    """Get a task with its comments."""
    manager = get_mission_control_manager()
    task = await manager.require_task(task_id)
    comments = await manager.list_comments(task_id)

    return {
        "task": task.to_dict(),
        "comments": [c.to_dict() for c in comments],
    }


@router.patch("/tasks/{task_id}")
async def update_task(task_id: str, request: UpdateTaskRequest) -> dict[str, Any]:
    """Patch a task's details. Use /status for status changes."""
    manager = get_mission_control_manager()

    task = await manager.update_task(
        task_id,
        changed_by=request.changed_by,
        title=request.title,
        description=request.description,
        priority=request.priority,
        assigned_to=request.assigned_to,
        project=request.project,
        tags=request.tags,
        due_at=request.due_at,
    )

    return {"task": task.to_dict()}


@router.post("/tasks/{task_id}/status")
async def update_task_status(task_id: str, request: UpdateTaskStatusRequest) -> dict[str, Any]:
    """Move a task to a new status.

    Accepts JSON body: {"status": "done", "changed_by": "optional-agent-name"}
    """
    manager = get_mission_control_manager()
    task = await manager.update_task_status(task_id, request.status, request.changed_by)
    return {"task": task.to_dict()}


@router.post("/tasks/{task_id}/assign")
async def assign_task(task_id: str, request: AssignTaskRequest) -> dict[str, Any]:
    """Change or clear a task's assignee."""
    manager = get_mission_control_manager()
    task = await manager.assign_task(task_id, request.assigned_to, request.changed_by)
    return {"task": task.to_dict()}


@router.get("/tasks/{task_id}/history")
async def get_task_history(task_id: str) -> dict[str, Any]:
    """Get a task's field-level audit trail, oldest first."""
    manager = get_mission_control_manager()
    await manager.require_task(task_id)
    history = await manager.get_task_history(task_id)
    return {
        "history": [h.to_dict() for h in history],
        "count": len(history),
    }


@router.get("/tasks/{task_id}/activity")
async def get_task_activity(task_id: str, limit: int = 50) -> dict[str, Any]:
    """Get a task's activity entries, most recent first."""
    manager = get_mission_control_manager()
    await manager.require_task(task_id)
    activities = await manager.activity_for_task(task_id, limit=limit)
    return {
        "activities": [a.to_dict() for a in activities],
        "count": len(activities),
    }
