# Task schemas.
# Created: 2026-02-20

from __future__ import annotations

from pydantic import BaseModel, Field

from squadboard.mission_control.models import TaskPriority, TaskStatus


class CreateTaskRequest(BaseModel):
    """Request to create a new task."""

    title: str = Field(..., min_length=1, max_length=200)
    created_by: str = Field(..., min_length=1)
    description: str | None = None
    priority: TaskPriority = TaskPriority.NORMAL
    assigned_to: str | None = None
    project: str | None = None
    tags: list[str] = Field(default_factory=list)
    mentions: list[str] = Field(default_factory=list)
    due_at: str | None = None
    parent_task_id: str | None = None


class UpdateTaskRequest(BaseModel):
    """Partial task update. Omitted fields are left untouched."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    priority: TaskPriority | None = None
    assigned_to: str | None = None
    project: str | None = None
    tags: list[str] | None = None
    due_at: str | None = None
    changed_by: str | None = None


class UpdateTaskStatusRequest(BaseModel):
    """Request to move a task to a new status."""

    status: TaskStatus
    changed_by: str | None = None


class AssignTaskRequest(BaseModel):
    """Request to change a task's assignee. A null assignee unassigns."""

    assigned_to: str | None = None
    changed_by: str | None = None
