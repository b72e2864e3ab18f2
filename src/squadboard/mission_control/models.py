"""Mission Control data models.

Created: 2026-02-05
Updated: 2026-03-02 - Reworked around the squad dashboard:
  - Tasks carry a single assignee plus project/mentions/due date
  - Added TaskHistory (per-field audit trail) next to the activity feed
  - Comments carry attachments (blob references) and a content type
  - Added CostEntry and the OperatorStatus singleton

These models define the core data structures for:
- Agents (presence, health, daily cost counters)
- Tasks (work items with lifecycle)
- Task history (field-level audit trail)
- Activities (dashboard feed)
- Comments and attachments
- Cost entries (per-turn token usage)
- Operator status (external tool counters)

Design notes:
- Dataclasses with explicit to_dict/from_dict for JSON persistence
- All IDs are UUIDs
- Timestamps are ISO 8601 UTC strings
- Status enums are str subclasses so they serialize as their value
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# ============================================================================
# Enums
# ============================================================================


class AgentStatus(str, Enum):
    """Agent presence status."""

    ONLINE = "online"
    BUSY = "busy"
    OFFLINE = "offline"


class HealthStatus(str, Enum):
    """Agent health as last reported."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    ERROR = "error"


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    REVIEW = "review"
    DONE = "done"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    """Task priority level."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


# Lower sorts first in the queue
PRIORITY_ORDER: dict[TaskPriority, int] = {
    TaskPriority.URGENT: 0,
    TaskPriority.HIGH: 1,
    TaskPriority.NORMAL: 2,
    TaskPriority.LOW: 3,
}


class ContentType(str, Enum):
    """How a comment body should be rendered."""

    TEXT = "text"
    MARKDOWN = "markdown"


class ActivityType(str, Enum):
    """Action labels written to the activity feed."""

    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_STARTED = "task_started"
    TASK_COMPLETED = "task_completed"
    TASK_ASSIGNED = "task_assigned"
    COMMENT_ADDED = "comment_added"
    ATTACHMENT_ADDED = "attachment_added"


# ============================================================================
# Helper Functions
# ============================================================================


def generate_id() -> str:
    """Generate a unique ID."""
    return str(uuid.uuid4())


def now_iso() -> str:
    """Get current UTC time as ISO 8601 string."""
    return datetime.now(UTC).isoformat()


def parse_iso(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


# ============================================================================
# Data Models
# ============================================================================


@dataclass
class AgentConfig:
    """Display configuration for an agent."""

    role: str = "Agent"
    emoji: str = "🤖"

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "emoji": self.emoji}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentConfig":
        return cls(role=data.get("role", "Agent"), emoji=data.get("emoji", "🤖"))


@dataclass
class Agent:
    """
    Represents an agent (human or automated) on the squad.

    Agents are keyed by their unique name. They are created on first
    upsert and patched in place afterwards.

    Attributes:
        id: Unique identifier
        name: Unique handle (e.g., "nash", "dev")
        status: Presence status
        health_status: Health as of the last update
        last_heartbeat: Last time this agent checked in
        current_task_id: Task being worked on (if any)
        tokens_today: Tokens used today
        cost_today: Estimated spend today
        config: Role label and emoji
        discord_user_id: Optional chat identity
        created_at: When this agent was created
        updated_at: Last modification time
    """

    id: str = field(default_factory=generate_id)
    name: str = ""
    status: AgentStatus = AgentStatus.OFFLINE
    health_status: HealthStatus = HealthStatus.HEALTHY
    last_heartbeat: str | None = None
    current_task_id: str | None = None
    tokens_today: int = 0
    cost_today: float = 0.0
    config: AgentConfig = field(default_factory=AgentConfig)
    discord_user_id: str | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "health_status": self.health_status.value,
            "last_heartbeat": self.last_heartbeat,
            "current_task_id": self.current_task_id,
            "tokens_today": self.tokens_today,
            "cost_today": self.cost_today,
            "config": self.config.to_dict(),
            "discord_user_id": self.discord_user_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Agent":
        """Create from dictionary."""
        return cls(
            id=data.get("id", generate_id()),
            name=data.get("name", ""),
            status=AgentStatus(data.get("status", "offline")),
            health_status=HealthStatus(data.get("health_status", "healthy")),
            last_heartbeat=data.get("last_heartbeat"),
            current_task_id=data.get("current_task_id"),
            tokens_today=data.get("tokens_today", 0),
            cost_today=data.get("cost_today", 0.0),
            config=AgentConfig.from_dict(data.get("config") or {}),
            discord_user_id=data.get("discord_user_id"),
            created_at=data.get("created_at", now_iso()),
            updated_at=data.get("updated_at", now_iso()),
        )


@dataclass
class Task:
    """
    Represents a work item in the shared queue.

    Tasks start as pending and move through in_progress, blocked, review,
    done or cancelled. started_at and completed_at are stamped on the first
    transition into in_progress and done respectively, and never again.

    Attributes:
        id: Unique identifier
        title: Short summary of the task
        description: Full details (optional)
        status: Current lifecycle status
        priority: Urgency level
        created_by: Agent or person who created the task
        assigned_to: Agent name the task is assigned to
        project: Project label
        tags: Categorization tags
        mentions: Agent names mentioned on the task
        parent_task_id: For subtasks, the parent task ID
        due_at: Optional deadline (ISO 8601)
        started_at: When work began
        completed_at: When the task was done
        created_at: When the task was created
        updated_at: Last modification time
    """

    id: str = field(default_factory=generate_id)
    title: str = ""
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.NORMAL
    created_by: str = ""
    assigned_to: str | None = None
    project: str | None = None
    tags: list[str] = field(default_factory=list)
    mentions: list[str] = field(default_factory=list)
    parent_task_id: str | None = None
    due_at: str | None = None
    started_at: str | None = None
    completed_at: str | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "created_by": self.created_by,
            "assigned_to": self.assigned_to,
            "project": self.project,
            "tags": self.tags,
            "mentions": self.mentions,
            "parent_task_id": self.parent_task_id,
            "due_at": self.due_at,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create from dictionary."""
        return cls(
            id=data.get("id", generate_id()),
            title=data.get("title", ""),
            description=data.get("description"),
            status=TaskStatus(data.get("status", "pending")),
            priority=TaskPriority(data.get("priority", "normal")),
            created_by=data.get("created_by", ""),
            assigned_to=data.get("assigned_to"),
            project=data.get("project"),
            tags=data.get("tags") or [],
            mentions=data.get("mentions") or [],
            parent_task_id=data.get("parent_task_id"),
            due_at=data.get("due_at"),
            started_at=data.get("started_at"),
            completed_at=data.get("completed_at"),
            created_at=data.get("created_at", now_iso()),
            updated_at=data.get("updated_at", now_iso()),
        )


@dataclass
class TaskHistory:
    """One field-level change on a task. Never modified after insert."""

    id: str = field(default_factory=generate_id)
    task_id: str = ""
    changed_by: str = "system"
    field_changed: str = ""
    old_value: str | None = None
    new_value: str | None = None
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "changed_by": self.changed_by,
            "field_changed": self.field_changed,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskHistory":
        return cls(
            id=data.get("id", generate_id()),
            task_id=data.get("task_id", ""),
            changed_by=data.get("changed_by", "system"),
            field_changed=data.get("field_changed", ""),
            old_value=data.get("old_value"),
            new_value=data.get("new_value"),
            created_at=data.get("created_at", now_iso()),
        )


@dataclass
class Activity:
    """
    Represents an entry in the activity feed.

    The action type is a free-form string so external agents can log
    their own actions; ActivityType holds the labels the manager writes.

    Attributes:
        id: Unique identifier
        agent: Name of the agent who acted
        action_type: What happened (e.g., "task_completed")
        task_id: Related task (if applicable)
        details: Free-form payload for the dashboard
        session_id: Agent session that produced the event
        created_at: When the activity occurred
    """

    id: str = field(default_factory=generate_id)
    agent: str = ""
    action_type: str = ActivityType.TASK_CREATED.value
    task_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "agent": self.agent,
            "action_type": self.action_type,
            "task_id": self.task_id,
            "details": self.details,
            "session_id": self.session_id,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Activity":
        """Create from dictionary."""
        return cls(
            id=data.get("id", generate_id()),
            agent=data.get("agent", ""),
            action_type=data.get("action_type", ActivityType.TASK_CREATED.value),
            task_id=data.get("task_id"),
            details=data.get("details") or {},
            session_id=data.get("session_id"),
            created_at=data.get("created_at", now_iso()),
        )


@dataclass
class Attachment:
    """Metadata for a file attached to a comment. The bytes live in the blob store."""

    storage_id: str = ""
    filename: str = ""
    mime_type: str = "application/octet-stream"
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "storage_id": self.storage_id,
            "filename": self.filename,
            "mime_type": self.mime_type,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Attachment":
        return cls(
            storage_id=data.get("storage_id", ""),
            filename=data.get("filename", ""),
            mime_type=data.get("mime_type", "application/octet-stream"),
            size=data.get("size", 0),
        )


@dataclass
class TaskComment:
    """
    Represents a comment in a task thread.

    Attributes:
        id: Unique identifier
        task_id: Task this comment belongs to
        author: Agent or person who wrote it
        content: Comment body
        content_type: Plain text or markdown
        attachments: Files attached to the comment
        created_at: When the comment was posted
    """

    id: str = field(default_factory=generate_id)
    task_id: str = ""
    author: str = ""
    content: str = ""
    content_type: ContentType = ContentType.TEXT
    attachments: list[Attachment] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "task_id": self.task_id,
            "author": self.author,
            "content": self.content,
            "content_type": self.content_type.value,
            "attachments": [a.to_dict() for a in self.attachments],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskComment":
        """Create from dictionary."""
        return cls(
            id=data.get("id", generate_id()),
            task_id=data.get("task_id", ""),
            author=data.get("author", ""),
            content=data.get("content", ""),
            content_type=ContentType(data.get("content_type", "text")),
            attachments=[Attachment.from_dict(a) for a in data.get("attachments") or []],
            created_at=data.get("created_at", now_iso()),
        )


@dataclass
class CostEntry:
    """Token usage and estimated cost for one agent turn."""

    id: str = field(default_factory=generate_id)
    agent: str = ""
    model: str = ""
    tokens_in: int = 0
    tokens_out: int = 0
    estimated_cost: float = 0.0
    task_id: str | None = None
    session_id: str | None = None
    turn_type: str | None = None
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "agent": self.agent,
            "model": self.model,
            "tokens_in": self.tokens_in,
            "tokens_out": self.tokens_out,
            "estimated_cost": self.estimated_cost,
            "task_id": self.task_id,
            "session_id": self.session_id,
            "turn_type": self.turn_type,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CostEntry":
        return cls(
            id=data.get("id", generate_id()),
            agent=data.get("agent", ""),
            model=data.get("model", ""),
            tokens_in=data.get("tokens_in", 0),
            tokens_out=data.get("tokens_out", 0),
            estimated_cost=data.get("estimated_cost", 0.0),
            task_id=data.get("task_id"),
            session_id=data.get("session_id"),
            turn_type=data.get("turn_type"),
            created_at=data.get("created_at", now_iso()),
        )


@dataclass
class OperatorStatus:
    """
    Singleton snapshot of external tool usage.

    Replaced wholesale on every update; unrelated to the task model.
    """

    free_credits_remaining: float = 0.0
    free_credits_total: float = 0.0
    workspace_balance: float = 0.0
    loop_running: bool = False
    loop_current_task: int | None = None
    loop_total_tasks: int | None = None
    loop_project: str | None = None
    last_updated: str = field(default_factory=now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "free_credits_remaining": self.free_credits_remaining,
            "free_credits_total": self.free_credits_total,
            "workspace_balance": self.workspace_balance,
            "loop_running": self.loop_running,
            "loop_current_task": self.loop_current_task,
            "loop_total_tasks": self.loop_total_tasks,
            "loop_project": self.loop_project,
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OperatorStatus":
        return cls(
            free_credits_remaining=data.get("free_credits_remaining", 0.0),
            free_credits_total=data.get("free_credits_total", 0.0),
            workspace_balance=data.get("workspace_balance", 0.0),
            loop_running=data.get("loop_running", False),
            loop_current_task=data.get("loop_current_task"),
            loop_total_tasks=data.get("loop_total_tasks"),
            loop_project=data.get("loop_project"),
            last_updated=data.get("last_updated", now_iso()),
        )
