"""Mission Control storage protocols.

Created: 2026-02-05
Updated: 2026-03-02 - Reworked for the squad dashboard entities; added
transaction() and the blob store protocol for comment attachments.

Defines the interfaces for Mission Control storage backends so the
JSON-file store can be swapped for SQLite, PostgreSQL, etc.
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, runtime_checkable

from squadboard.mission_control.models import (
    Activity,
    Agent,
    CostEntry,
    OperatorStatus,
    Task,
    TaskComment,
    TaskHistory,
    TaskStatus,
)


@runtime_checkable
class MissionControlStoreProtocol(Protocol):
    """Protocol defining the interface for Mission Control storage.

    Reads return copies: mutate the returned record and save it back.
    Writes issued inside transaction() commit together or not at all.
    """

    def transaction(self) -> AbstractAsyncContextManager[Any]:
        """Group several writes into one atomic commit."""
        ...

    # =========================================================================
    # Agent Operations
    # =========================================================================

    async def save_agent(self, agent: Agent) -> str:
        """Insert or replace an agent. Returns the agent ID."""
        ...

    async def get_agent(self, agent_id: str) -> Agent | None:
        """Get an agent by ID."""
        ...

    async def get_agent_by_name(self, name: str) -> Agent | None:
        """Get an agent by its unique name (exact match)."""
        ...

    async def list_agents(self) -> list[Agent]:
        """List agents in creation order."""
        ...

    # =========================================================================
    # Task Operations
    # =========================================================================

    async def save_task(self, task: Task) -> str:
        """Insert or replace a task. Returns the task ID."""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        ...

    async def list_tasks(
        self,
        status: TaskStatus | None = None,
        assigned_to: str | None = None,
    ) -> list[Task]:
        """List tasks with optional filters, in creation order."""
        ...

    # =========================================================================
    # Task History Operations
    # =========================================================================

    async def save_history(self, entry: TaskHistory) -> str:
        """Append a history record. Returns its ID."""
        ...

    async def get_history_for_task(self, task_id: str) -> list[TaskHistory]:
        """Get the audit trail for a task, oldest first."""
        ...

    # =========================================================================
    # Activity Operations
    # =========================================================================

    async def save_activity(self, activity: Activity) -> str:
        """Append an activity entry. Returns its ID."""
        ...

    async def get_activities(
        self,
        agent: str | None = None,
        task_id: str | None = None,
        limit: int | None = 50,
    ) -> list[Activity]:
        """Get activities newest first, optionally filtered."""
        ...

    # =========================================================================
    # Comment Operations
    # =========================================================================

    async def save_comment(self, comment: TaskComment) -> str:
        """Insert a comment. Returns its ID."""
        ...

    async def get_comment(self, comment_id: str) -> TaskComment | None:
        """Get a comment by ID."""
        ...

    async def get_comments_for_task(self, task_id: str) -> list[TaskComment]:
        """Get all comments on a task, oldest first."""
        ...

    async def delete_comment(self, comment_id: str) -> bool:
        """Delete a comment record. Returns True if deleted."""
        ...

    # =========================================================================
    # Cost Operations
    # =========================================================================

    async def save_cost(self, entry: CostEntry) -> str:
        """Append a cost entry. Returns its ID."""
        ...

    async def list_costs(self, agent: str | None = None, limit: int | None = 100) -> list[CostEntry]:
        """Get cost entries newest first. limit=None returns everything."""
        ...

    # =========================================================================
    # Operator Status
    # =========================================================================

    async def get_operator_status(self) -> OperatorStatus | None:
        """Get the operator status singleton, if one was ever written."""
        ...

    async def save_operator_status(self, status: OperatorStatus) -> None:
        """Replace the operator status singleton."""
        ...

    # =========================================================================
    # Utility Operations
    # =========================================================================

    async def get_stats(self) -> dict[str, Any]:
        """Get record counts for the dashboard."""
        ...

    async def clear_all(self) -> None:
        """Clear all data. Use with caution!"""
        ...


@runtime_checkable
class BlobStoreProtocol(Protocol):
    """Protocol for attachment byte storage."""

    async def put(self, data: bytes) -> str:
        """Store bytes and return a new storage ID."""
        ...

    async def get(self, storage_id: str) -> bytes | None:
        """Read stored bytes, or None when missing."""
        ...

    async def exists(self, storage_id: str) -> bool:
        """Check whether a blob exists."""
        ...

    async def delete(self, storage_id: str) -> bool:
        """Delete a blob. Returns False when it was already gone."""
        ...
