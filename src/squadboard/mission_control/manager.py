"""Mission Control manager.

Created: 2026-02-05
Updated: 2026-03-02 - Squad dashboard semantics:
  - Status changes stamp started_at/completed_at once and write a history
    record plus an activity entry, all in one store transaction
  - Assignment changes write history and a task_assigned activity
  - Comments carry attachments; removing a comment deletes its blobs first
  - Agent upsert/heartbeat by unique name, daily cost counters
  - Cost ledger with windowed daily summary
  - Operator status singleton and seed helpers

High-level operations for Mission Control. The HTTP layer and the CLI go
through this class; nothing outside it writes to the store directly.
Missing records raise NotFoundError.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from squadboard.mission_control.blobs import (
    DOWNLOAD_PURPOSE,
    UPLOAD_PURPOSE,
    UrlSigner,
    get_blob_store,
)
from squadboard.mission_control.costs import CostSummary, TimeWindow, summarize_costs, today_window
from squadboard.mission_control.errors import NotFoundError
from squadboard.mission_control.models import (
    PRIORITY_ORDER,
    Activity,
    ActivityType,
    Agent,
    AgentConfig,
    AgentStatus,
    Attachment,
    ContentType,
    CostEntry,
    HealthStatus,
    OperatorStatus,
    Task,
    TaskComment,
    TaskHistory,
    TaskPriority,
    TaskStatus,
    now_iso,
)
from squadboard.mission_control.protocol import BlobStoreProtocol, MissionControlStoreProtocol
from squadboard.mission_control.store import get_mission_control_store

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"

# Agents created by seed_agents(): (name, role, emoji, status)
DEFAULT_AGENTS: list[tuple[str, str, str, AgentStatus]] = [
    ("mike", "Founder", "👤", AgentStatus.ONLINE),
    ("nash", "Chief of Staff", "♟️", AgentStatus.ONLINE),
    ("dev", "CTO / Developer", "⚡", AgentStatus.OFFLINE),
    ("otto", "COO / Operations", "📋", AgentStatus.OFFLINE),
]


def _status_action(status: TaskStatus) -> ActivityType:
    if status == TaskStatus.DONE:
        return ActivityType.TASK_COMPLETED
    if status == TaskStatus.IN_PROGRESS:
        return ActivityType.TASK_STARTED
    return ActivityType.TASK_UPDATED


def _history_value(value: Any) -> str | None:
    """Render a field value for the audit trail."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


class MissionControlManager:
    """High-level manager for Mission Control operations.

    Provides convenient methods that handle:
    - Task lifecycle with audit trail and activity logging
    - Comment threads and attachment cleanup
    - Agent presence and daily cost counters
    - Cost aggregation
    """

    def __init__(
        self,
        store: MissionControlStoreProtocol | None = None,
        blobs: BlobStoreProtocol | None = None,
        signer: UrlSigner | None = None,
        base_url: str | None = None,
    ):
        """Initialize the manager.

        Args:
            store: Record store. Uses the singleton if not provided.
            blobs: Attachment blob store. Uses the singleton if not provided.
            signer: Storage URL signer. Built from settings if not provided.
            base_url: Public URL prefix for storage links. From settings if not provided.
        """
        self._store = store or get_mission_control_store()
        self._blobs = blobs or get_blob_store()

        if signer is None or base_url is None:
            from squadboard.config import get_settings

            settings = get_settings()
            signer = signer or UrlSigner(
                settings.storage_signing_key, settings.upload_url_ttl_seconds
            )
            base_url = base_url or settings.public_base_url

        self._signer = signer
        self._base_url = base_url.rstrip("/")

    # =========================================================================
    # Task Operations
    # =========================================================================

    async def create_task(
        self,
        title: str,
        created_by: str,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.NORMAL,
        assigned_to: str | None = None,
        project: str | None = None,
        tags: list[str] | None = None,
        mentions: list[str] | None = None,
        due_at: str | None = None,
        parent_task_id: str | None = None,
    ) -> Task:
        """Create a pending task and log a task_created activity.

        Returns:
            The created Task
        """
        task = Task(
            title=title,
            description=description,
            status=TaskStatus.PENDING,
            priority=priority,
            created_by=created_by,
            assigned_to=assigned_to,
            project=project,
            tags=tags or [],
            mentions=mentions or [],
            due_at=due_at,
            parent_task_id=parent_task_id,
        )

        async with self._store.transaction():
            await self._store.save_task(task)
            await self._log_activity(
                created_by,
                ActivityType.TASK_CREATED,
                task_id=task.id,
                details={"title": title},
            )

        logger.info(f"Created task: {title} ({priority.value})")
        return task

    async def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        return await self._store.get_task(task_id)

    async def require_task(self, task_id: str) -> Task:
        """Get a task by ID or raise NotFoundError."""
        task = await self._store.get_task(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        return task

    async def list_tasks(self, include_cancelled: bool = False) -> list[Task]:
        """List the task queue.

        Cancelled tasks are hidden unless asked for. Ordered by priority
        (urgent first), then newest first.
        """
        tasks = await self._store.list_tasks()
        if not include_cancelled:
            tasks = [t for t in tasks if t.status != TaskStatus.CANCELLED]

        tasks = tasks[::-1]
        tasks.sort(key=lambda t: t.created_at, reverse=True)
        tasks.sort(key=lambda t: PRIORITY_ORDER[t.priority])
        return tasks

    async def list_tasks_by_status(self, status: TaskStatus) -> list[Task]:
        """List tasks in a given status."""
        return await self._store.list_tasks(status=status)

    async def list_tasks_by_assignee(self, assignee: str) -> list[Task]:
        """List tasks assigned to an agent."""
        return await self._store.list_tasks(assigned_to=assignee)

    async def update_task_status(
        self, task_id: str, status: TaskStatus, changed_by: str | None = None
    ) -> Task:
        """Move a task to a new status.

        started_at is stamped on the first move into in_progress and
        completed_at on the first move into done; neither is overwritten
        later. The task patch, one history record and one activity entry
        are committed together.

        Args:
            task_id: Task to update
            status: New status
            changed_by: Actor. Defaults to the assignee, then "system".

        Returns:
            The updated Task

        Raises:
            NotFoundError: if the task does not exist
        """
        async with self._store.transaction():
            task = await self.require_task(task_id)
            old_status = task.status
            actor = changed_by or task.assigned_to or SYSTEM_ACTOR

            task.status = status
            if status == TaskStatus.IN_PROGRESS and not task.started_at:
                task.started_at = now_iso()
            if status == TaskStatus.DONE and not task.completed_at:
                task.completed_at = now_iso()
            task.updated_at = now_iso()

            await self._store.save_task(task)
            await self._record_history(task_id, actor, "status", old_status, status)
            await self._log_activity(
                actor,
                _status_action(status),
                task_id=task_id,
                details={
                    "title": task.title,
                    "old_status": old_status.value,
                    "new_status": status.value,
                },
            )

        logger.info(f"Task '{task.title}' moved from {old_status.value} to {status.value}")
        return task

    async def assign_task(
        self, task_id: str, assigned_to: str | None, changed_by: str | None = None
    ) -> Task:
        """Change (or clear) a task's assignee.

        Writes an assigned_to history record and a task_assigned activity.

        Raises:
            NotFoundError: if the task does not exist
        """
        async with self._store.transaction():
            task = await self.require_task(task_id)
            old_assignee = task.assigned_to
            actor = changed_by or SYSTEM_ACTOR

            task.assigned_to = assigned_to
            task.updated_at = now_iso()

            await self._store.save_task(task)
            await self._record_history(task_id, actor, "assigned_to", old_assignee, assigned_to)
            await self._log_activity(
                actor,
                ActivityType.TASK_ASSIGNED,
                task_id=task_id,
                details={
                    "title": task.title,
                    "old_assignee": old_assignee,
                    "new_assignee": assigned_to,
                },
            )

        logger.info(f"Task '{task.title}' assigned to {assigned_to or 'nobody'}")
        return task

    async def update_task(
        self,
        task_id: str,
        changed_by: str | None = None,
        title: str | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
        assigned_to: str | None = None,
        project: str | None = None,
        tags: list[str] | None = None,
        due_at: str | None = None,
    ) -> Task:
        """Patch task fields. Fields left as None are untouched.

        Each field whose value actually changes gets a history record.
        Status changes go through update_task_status().

        Raises:
            NotFoundError: if the task does not exist
        """
        updates: dict[str, Any] = {
            "title": title,
            "description": description,
            "priority": priority,
            "assigned_to": assigned_to,
            "project": project,
            "tags": tags,
            "due_at": due_at,
        }
        updates = {k: v for k, v in updates.items() if v is not None}

        async with self._store.transaction():
            task = await self.require_task(task_id)
            if not updates:
                return task

            actor = changed_by or SYSTEM_ACTOR
            for name, value in updates.items():
                old_value = getattr(task, name)
                if old_value == value:
                    continue
                setattr(task, name, value)
                await self._record_history(task_id, actor, name, old_value, value)

            task.updated_at = now_iso()
            await self._store.save_task(task)

        return task

    async def get_task_history(self, task_id: str) -> list[TaskHistory]:
        """Get the audit trail for a task, oldest first."""
        return await self._store.get_history_for_task(task_id)

    # =========================================================================
    # Comment Operations
    # =========================================================================

    async def add_comment(
        self,
        task_id: str,
        author: str,
        content: str,
        content_type: ContentType = ContentType.TEXT,
        attachments: list[Attachment] | None = None,
    ) -> TaskComment:
        """Post a comment to a task thread.

        The activity entry is attachment_added when any files are attached,
        otherwise comment_added.

        Raises:
            NotFoundError: if the task does not exist
        """
        attachments = attachments or []

        async with self._store.transaction():
            task = await self.require_task(task_id)
            comment = TaskComment(
                task_id=task_id,
                author=author,
                content=content,
                content_type=content_type,
                attachments=attachments,
            )
            await self._store.save_comment(comment)

            action = ActivityType.ATTACHMENT_ADDED if attachments else ActivityType.COMMENT_ADDED
            await self._log_activity(
                author,
                action,
                task_id=task_id,
                details={"title": task.title, "attachment_count": len(attachments)},
            )

        return comment

    async def list_comments(self, task_id: str) -> list[TaskComment]:
        """Get all comments on a task, oldest first."""
        return await self._store.get_comments_for_task(task_id)

    async def remove_comment(self, comment_id: str) -> int:
        """Delete a comment and its attachment blobs.

        Blobs are deleted first, one call per attachment, then the record.
        A blob that is already gone is skipped. If a blob delete raises,
        the comment record is left in place.

        Returns:
            Number of blobs actually deleted

        Raises:
            NotFoundError: if the comment does not exist
        """
        comment = await self._store.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("comment", comment_id)

        deleted = 0
        for attachment in comment.attachments:
            if await self._blobs.delete(attachment.storage_id):
                deleted += 1
            else:
                logger.warning(
                    f"Attachment blob {attachment.storage_id} for comment {comment_id} "
                    "was already missing"
                )

        await self._store.delete_comment(comment_id)
        logger.info(f"Removed comment {comment_id} ({deleted} attachment(s) deleted)")
        return deleted

    # =========================================================================
    # Attachment Storage
    # =========================================================================

    def generate_upload_url(self) -> str:
        """Return a signed upload URL. It accepts uploads until it expires."""
        expires, signature = self._signer.sign(UPLOAD_PURPOSE)
        return f"{self._base_url}/api/v1/storage/upload?expires={expires}&signature={signature}"

    async def store_upload(self, data: bytes, expires: int, signature: str) -> str:
        """Verify an upload signature and store the bytes.

        Returns:
            The new storage ID

        Raises:
            InvalidSignatureError: if the URL is forged or expired
        """
        self._signer.verify(UPLOAD_PURPOSE, "", expires, signature)
        return await self._blobs.put(data)

    async def get_attachment_url(self, storage_id: str) -> str | None:
        """Return a signed download URL, or None when the blob does not exist."""
        if not await self._blobs.exists(storage_id):
            return None
        expires, signature = self._signer.sign(DOWNLOAD_PURPOSE, storage_id)
        return (
            f"{self._base_url}/api/v1/storage/{storage_id}"
            f"?expires={expires}&signature={signature}"
        )

    async def read_attachment(self, storage_id: str, expires: int, signature: str) -> bytes:
        """Verify a download signature and return the blob bytes.

        Raises:
            InvalidSignatureError: if the URL is forged or expired
            NotFoundError: if the blob does not exist
        """
        self._signer.verify(DOWNLOAD_PURPOSE, storage_id, expires, signature)
        data = await self._blobs.get(storage_id)
        if data is None:
            raise NotFoundError("attachment", storage_id)
        return data

    # =========================================================================
    # Agent Operations
    # =========================================================================

    async def list_agents(self) -> list[Agent]:
        """List agents in creation order."""
        return await self._store.list_agents()

    async def get_agent(self, agent_id: str) -> Agent | None:
        """Get an agent by ID."""
        return await self._store.get_agent(agent_id)

    async def get_agent_by_name(self, name: str) -> Agent | None:
        """Get an agent by its unique name."""
        return await self._store.get_agent_by_name(name)

    async def _require_agent_by_name(self, name: str) -> Agent:
        agent = await self._store.get_agent_by_name(name)
        if agent is None:
            raise NotFoundError("agent", name)
        return agent

    async def upsert_agent(
        self,
        name: str,
        status: AgentStatus | None = None,
        config: AgentConfig | None = None,
        health_status: HealthStatus | None = None,
        discord_user_id: str | None = None,
    ) -> Agent:
        """Create an agent on first reference, otherwise patch supplied fields.

        New agents default to offline, healthy, role "Agent" with a robot emoji.
        """
        async with self._store.transaction():
            agent = await self._store.get_agent_by_name(name)

            if agent is None:
                agent = Agent(
                    name=name,
                    status=status or AgentStatus.OFFLINE,
                    config=config or AgentConfig(),
                    health_status=health_status or HealthStatus.HEALTHY,
                    discord_user_id=discord_user_id,
                )
                logger.info(f"Registered agent: {name} ({agent.config.role})")
            else:
                if status is not None:
                    agent.status = status
                if config is not None:
                    agent.config = config
                if health_status is not None:
                    agent.health_status = health_status
                if discord_user_id is not None:
                    agent.discord_user_id = discord_user_id
                agent.updated_at = now_iso()

            await self._store.save_agent(agent)

        return agent

    async def heartbeat(
        self,
        name: str,
        status: AgentStatus | None = None,
        current_task_id: str | None = None,
    ) -> Agent:
        """Record an agent check-in.

        Stamps last_heartbeat, marks the agent healthy and sets status
        (default online) and current task from the call.

        Raises:
            NotFoundError: if no agent has this name
        """
        async with self._store.transaction():
            agent = await self._require_agent_by_name(name)
            agent.last_heartbeat = now_iso()
            agent.status = status or AgentStatus.ONLINE
            agent.current_task_id = current_task_id
            agent.health_status = HealthStatus.HEALTHY
            agent.updated_at = now_iso()
            await self._store.save_agent(agent)

        logger.debug(f"Heartbeat from {name} ({agent.status.value})")
        return agent

    async def set_agent_status(self, agent_id: str, status: AgentStatus) -> Agent:
        """Set an agent's presence. Offline agents are marked degraded.

        Raises:
            NotFoundError: if the agent does not exist
        """
        async with self._store.transaction():
            agent = await self._store.get_agent(agent_id)
            if agent is None:
                raise NotFoundError("agent", agent_id)

            agent.status = status
            agent.health_status = (
                HealthStatus.DEGRADED if status == AgentStatus.OFFLINE else HealthStatus.HEALTHY
            )
            agent.updated_at = now_iso()
            await self._store.save_agent(agent)

        return agent

    async def update_agent_costs(self, name: str, tokens_today: int, cost_today: float) -> Agent:
        """Overwrite an agent's daily usage counters.

        Raises:
            NotFoundError: if no agent has this name
        """
        async with self._store.transaction():
            agent = await self._require_agent_by_name(name)
            agent.tokens_today = tokens_today
            agent.cost_today = cost_today
            agent.updated_at = now_iso()
            await self._store.save_agent(agent)

        return agent

    async def reset_daily_costs(self) -> int:
        """Zero every agent's daily counters. Returns the number of agents."""
        async with self._store.transaction():
            agents = await self._store.list_agents()
            for agent in agents:
                agent.tokens_today = 0
                agent.cost_today = 0.0
                agent.updated_at = now_iso()
                await self._store.save_agent(agent)

        logger.info(f"Reset daily costs for {len(agents)} agents")
        return len(agents)

    # =========================================================================
    # Activity Operations
    # =========================================================================

    async def log_activity(
        self,
        agent: str,
        action_type: str,
        task_id: str | None = None,
        details: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> Activity:
        """Append an arbitrary entry to the activity feed."""
        return await self._log_activity(
            agent, action_type, task_id=task_id, details=details, session_id=session_id
        )

    async def recent_activity(self, limit: int = 20) -> list[Activity]:
        """Get the activity feed (most recent first)."""
        return await self._store.get_activities(limit=limit)

    async def activity_by_agent(self, agent: str, limit: int = 50) -> list[Activity]:
        """Get an agent's activity (most recent first)."""
        return await self._store.get_activities(agent=agent, limit=limit)

    async def activity_for_task(self, task_id: str, limit: int = 50) -> list[Activity]:
        """Get a task's activity (most recent first)."""
        return await self._store.get_activities(task_id=task_id, limit=limit)

    # =========================================================================
    # Cost Operations
    # =========================================================================

    async def record_cost(
        self,
        agent: str,
        model: str,
        tokens_in: int,
        tokens_out: int,
        estimated_cost: float,
        task_id: str | None = None,
        session_id: str | None = None,
        turn_type: str | None = None,
    ) -> CostEntry:
        """Record token usage for one agent turn."""
        entry = CostEntry(
            agent=agent,
            model=model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            estimated_cost=estimated_cost,
            task_id=task_id,
            session_id=session_id,
            turn_type=turn_type,
        )
        await self._store.save_cost(entry)
        return entry

    async def recent_costs(self, limit: int = 100) -> list[CostEntry]:
        """Get cost entries (most recent first)."""
        return await self._store.list_costs(limit=limit)

    async def costs_by_agent(self, agent: str, limit: int = 100) -> list[CostEntry]:
        """Get an agent's cost entries (most recent first)."""
        return await self._store.list_costs(agent=agent, limit=limit)

    async def daily_summary(
        self, window: TimeWindow | None = None, agent: str | None = None
    ) -> CostSummary:
        """Aggregate cost entries per agent inside a window.

        Args:
            window: [start, end) to aggregate. Defaults to the current UTC day.
            agent: Restrict the summary to one agent.
        """
        entries = await self._store.list_costs(agent=agent, limit=None)
        return summarize_costs(entries, window or today_window(), agent=agent)

    # =========================================================================
    # Operator Status
    # =========================================================================

    async def get_operator_status(self) -> OperatorStatus | None:
        """Get the operator status snapshot, if any was reported."""
        return await self._store.get_operator_status()

    async def update_operator_status(self, status: OperatorStatus) -> OperatorStatus:
        """Replace the operator status snapshot and stamp last_updated."""
        status.last_updated = now_iso()
        await self._store.save_operator_status(status)
        return status

    # =========================================================================
    # Seeding
    # =========================================================================

    async def seed_agents(self) -> int:
        """Register the default squad. Existing agents are left alone.

        Returns:
            Number of agents created
        """
        created = 0
        for name, role, emoji, status in DEFAULT_AGENTS:
            if await self._store.get_agent_by_name(name):
                continue
            await self.upsert_agent(
                name,
                status=status,
                config=AgentConfig(role=role, emoji=emoji),
                health_status=HealthStatus.HEALTHY,
            )
            created += 1
        return created

    async def seed_task(self) -> Task | None:
        """Insert a sample task when the queue is empty."""
        if await self._store.list_tasks():
            return None
        return await self.create_task(
            title="Cal.com API Integration",
            description=(
                "Integrate Cal.com API to automatically create team + invite link "
                "for new clients during onboarding"
            ),
            priority=TaskPriority.HIGH,
            created_by="nash",
            assigned_to="dev",
            project="Axia OS",
            tags=["integration", "api", "onboarding"],
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _log_activity(
        self,
        agent: str,
        action_type: ActivityType | str,
        task_id: str | None = None,
        details: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> Activity:
        """Create and save an activity entry."""
        if isinstance(action_type, ActivityType):
            action_type = action_type.value
        activity = Activity(
            agent=agent,
            action_type=action_type,
            task_id=task_id,
            details=details or {},
            session_id=session_id,
        )
        await self._store.save_activity(activity)
        return activity

    async def _record_history(
        self, task_id: str, changed_by: str, field_changed: str, old: Any, new: Any
    ) -> TaskHistory:
        """Append one audit-trail record."""
        entry = TaskHistory(
            task_id=task_id,
            changed_by=changed_by,
            field_changed=field_changed,
            old_value=_history_value(old),
            new_value=_history_value(new),
        )
        await self._store.save_history(entry)
        return entry

    async def get_stats(self) -> dict[str, Any]:
        """Get Mission Control statistics."""
        return await self._store.get_stats()


# =========================================================================
# Factory Function
# =========================================================================

_manager_instance: MissionControlManager | None = None


def get_mission_control_manager() -> MissionControlManager:
    """Get or create the Mission Control manager singleton."""
    global _manager_instance
    if _manager_instance is None:
        _manager_instance = MissionControlManager()
    return _manager_instance


def reset_mission_control_manager() -> None:
    """Reset the manager singleton (for testing)."""
    global _manager_instance
    _manager_instance = None
