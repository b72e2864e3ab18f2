"""File-based Mission Control store.

Created: 2026-02-05
Updated: 2026-03-02 - Squad dashboard tables and explicit transactions.
Implements MissionControlStoreProtocol using JSON files.

Storage layout:
~/.squadboard/mission_control/
    agents.json           # Agent registry
    tasks.json            # Task queue
    task_history.json     # Field-level audit trail
    activities.json       # Activity feed
    comments.json         # Task comments (attachment metadata only)
    costs.json            # Per-turn cost entries
    operator_status.json  # Singleton, stored as a one-element list

Design notes:
- Single JSON file per table
- In-memory index keyed by ID, insertion-ordered
- Reads hand out deep copies; records are replaced, never mutated in place
- Writes outside a transaction persist immediately
- transaction() snapshots touched tables and persists them once on commit
- Atomic file writes using temp file + rename
"""

import asyncio
import copy
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, TypeVar

from squadboard.mission_control.models import (
    Activity,
    Agent,
    AgentStatus,
    CostEntry,
    OperatorStatus,
    Task,
    TaskComment,
    TaskHistory,
    TaskStatus,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# table name -> record class
_TABLES: dict[str, type] = {
    "agents": Agent,
    "tasks": Task,
    "task_history": TaskHistory,
    "activities": Activity,
    "comments": TaskComment,
    "costs": CostEntry,
    "operator_status": OperatorStatus,
}

_OPERATOR_KEY = "singleton"


def _newest_first(records: list[T]) -> list[T]:
    # Equal timestamps keep reverse insertion order
    ordered = records[::-1]
    ordered.sort(key=lambda r: r.created_at, reverse=True)  # type: ignore[attr-defined]
    return ordered


def _oldest_first(records: list[T]) -> list[T]:
    ordered = list(records)
    ordered.sort(key=lambda r: r.created_at)  # type: ignore[attr-defined]
    return ordered


class FileMissionControlStore:
    """File-based implementation of Mission Control storage.

    Uses JSON files for persistence and maintains in-memory indexes
    for fast lookups. Suitable for a single dashboard process.
    """

    def __init__(self, base_path: Path | None = None):
        """Initialize the store.

        Args:
            base_path: Directory for storage files. Defaults to ~/.squadboard/mission_control/
        """
        if base_path is None:
            base_path = Path.home() / ".squadboard" / "mission_control"

        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)

        self._data: dict[str, dict[str, Any]] = {name: {} for name in _TABLES}

        # Transaction state
        self._lock = asyncio.Lock()
        self._in_transaction = False
        self._owner: asyncio.Task | None = None
        self._snapshots: dict[str, dict[str, Any]] = {}

        self._load_all()

    # =========================================================================
    # File I/O Helpers
    # =========================================================================

    def _path(self, table: str) -> Path:
        return self.base_path / f"{table}.json"

    def _load_json(self, path: Path) -> list[dict[str, Any]]:
        """Load a JSON file, returning empty list if not found."""
        if not path.exists():
            return []
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error loading {path}: {e}")
            return []

    def _save_json(self, path: Path, data: list[dict[str, Any]]) -> None:
        """Save data to JSON file atomically."""
        temp_path = path.with_suffix(".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(path)
        except OSError as e:
            logger.error(f"Error saving {path}: {e}")
            if temp_path.exists():
                temp_path.unlink()
            raise

    def _load_all(self) -> None:
        """Load all tables from files into memory."""
        for table, model in _TABLES.items():
            for data in self._load_json(self._path(table)):
                record = model.from_dict(data)
                key = _OPERATOR_KEY if table == "operator_status" else record.id
                self._data[table][key] = record

        logger.info(
            f"Mission Control loaded: {len(self._data['agents'])} agents, "
            f"{len(self._data['tasks'])} tasks, {len(self._data['comments'])} comments, "
            f"{len(self._data['costs'])} cost entries"
        )

    def _persist(self, table: str) -> None:
        data = [r.to_dict() for r in self._data[table].values()]
        self._save_json(self._path(table), data)

    # =========================================================================
    # Write path
    # =========================================================================

    def _put(self, table: str, key: str, record: Any) -> None:
        self._touch(table)
        self._data[table][key] = copy.deepcopy(record)
        if not self._in_transaction:
            self._persist(table)

    def _remove(self, table: str, key: str) -> bool:
        if key not in self._data[table]:
            return False
        self._touch(table)
        del self._data[table][key]
        if not self._in_transaction:
            self._persist(table)
        return True

    def _touch(self, table: str) -> None:
        # Records are never mutated in place, so a shallow copy is a full snapshot
        if self._in_transaction and table not in self._snapshots:
            self._snapshots[table] = dict(self._data[table])

    def _restore_written(self, tables: list[str]) -> None:
        """Put tables persisted by a failed commit back to their snapshot on disk."""
        for table in tables:
            try:
                self._persist(table)
            except OSError as e:
                logger.error(f"Could not restore {table} after failed commit: {e}")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["FileMissionControlStore"]:
        """Run several writes as one unit.

        Touched tables are persisted once when the block exits cleanly.
        If the block raises, in-memory tables are restored and nothing is
        written to disk. If persisting one table fails, tables already
        written by this commit are rewritten from their snapshots.
        Nested calls from the same asyncio task join the outer transaction;
        other tasks wait for it to finish.
        """
        if self._in_transaction and self._owner is asyncio.current_task():
            yield self
            return

        async with self._lock:
            self._in_transaction = True
            self._owner = asyncio.current_task()
            self._snapshots = {}
            written: list[str] = []
            try:
                yield self
                for table in self._snapshots:
                    self._persist(table)
                    written.append(table)
            except BaseException:
                for table, snapshot in self._snapshots.items():
                    self._data[table] = snapshot
                self._restore_written(written)
                logger.warning(f"Transaction rolled back: {sorted(self._snapshots)}")
                raise
            finally:
                self._in_transaction = False
                self._owner = None
                self._snapshots = {}

    # =========================================================================
    # Agent Operations
    # =========================================================================

    async def save_agent(self, agent: Agent) -> str:
        """Insert or replace an agent."""
        self._put("agents", agent.id, agent)
        return agent.id

    async def get_agent(self, agent_id: str) -> Agent | None:
        """Get an agent by ID."""
        return copy.deepcopy(self._data["agents"].get(agent_id))

    async def get_agent_by_name(self, name: str) -> Agent | None:
        """Get an agent by its unique name (exact match)."""
        for agent in self._data["agents"].values():
            if agent.name == name:
                return copy.deepcopy(agent)
        return None

    async def list_agents(self) -> list[Agent]:
        """List agents in creation order."""
        agents = list(self._data["agents"].values())
        return copy.deepcopy(_oldest_first(agents))

    # =========================================================================
    # Task Operations
    # =========================================================================

    async def save_task(self, task: Task) -> str:
        """Insert or replace a task."""
        self._put("tasks", task.id, task)
        return task.id

    async def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        return copy.deepcopy(self._data["tasks"].get(task_id))

    async def list_tasks(
        self,
        status: TaskStatus | None = None,
        assigned_to: str | None = None,
    ) -> list[Task]:
        """List tasks with optional filters, in creation order."""
        tasks = list(self._data["tasks"].values())

        if status:
            tasks = [t for t in tasks if t.status == status]

        if assigned_to:
            tasks = [t for t in tasks if t.assigned_to == assigned_to]

        return copy.deepcopy(_oldest_first(tasks))

    # =========================================================================
    # Task History Operations
    # =========================================================================

    async def save_history(self, entry: TaskHistory) -> str:
        """Append a history record."""
        self._put("task_history", entry.id, entry)
        return entry.id

    async def get_history_for_task(self, task_id: str) -> list[TaskHistory]:
        """Get the audit trail for a task, oldest first."""
        entries = [h for h in self._data["task_history"].values() if h.task_id == task_id]
        return copy.deepcopy(_oldest_first(entries))

    # =========================================================================
    # Activity Operations
    # =========================================================================

    async def save_activity(self, activity: Activity) -> str:
        """Append an activity entry."""
        self._put("activities", activity.id, activity)
        return activity.id

    async def get_activities(
        self,
        agent: str | None = None,
        task_id: str | None = None,
        limit: int | None = 50,
    ) -> list[Activity]:
        """Get activities newest first, optionally filtered."""
        activities = list(self._data["activities"].values())

        if agent:
            activities = [a for a in activities if a.agent == agent]

        if task_id:
            activities = [a for a in activities if a.task_id == task_id]

        activities = _newest_first(activities)
        if limit is not None:
            activities = activities[:limit]
        return copy.deepcopy(activities)

    # =========================================================================
    # Comment Operations
    # =========================================================================

    async def save_comment(self, comment: TaskComment) -> str:
        """Insert a comment."""
        self._put("comments", comment.id, comment)
        return comment.id

    async def get_comment(self, comment_id: str) -> TaskComment | None:
        """Get a comment by ID."""
        return copy.deepcopy(self._data["comments"].get(comment_id))

    async def get_comments_for_task(self, task_id: str) -> list[TaskComment]:
        """Get all comments on a task, oldest first."""
        comments = [c for c in self._data["comments"].values() if c.task_id == task_id]
        return copy.deepcopy(_oldest_first(comments))

    async def delete_comment(self, comment_id: str) -> bool:
        """Delete a comment record."""
        return self._remove("comments", comment_id)

    # =========================================================================
    # Cost Operations
    # =========================================================================

    async def save_cost(self, entry: CostEntry) -> str:
        """Append a cost entry."""
        self._put("costs", entry.id, entry)
        return entry.id

    async def list_costs(self, agent: str | None = None, limit: int | None = 100) -> list[CostEntry]:
        """Get cost entries newest first. limit=None returns everything."""
        costs = list(self._data["costs"].values())
        if agent:
            costs = [c for c in costs if c.agent == agent]
        costs = _newest_first(costs)
        if limit is not None:
            costs = costs[:limit]
        return copy.deepcopy(costs)

    # =========================================================================
    # Operator Status
    # =========================================================================

    async def get_operator_status(self) -> OperatorStatus | None:
        """Get the operator status singleton."""
        return copy.deepcopy(self._data["operator_status"].get(_OPERATOR_KEY))

    async def save_operator_status(self, status: OperatorStatus) -> None:
        """Replace the operator status singleton."""
        self._put("operator_status", _OPERATOR_KEY, status)

    # =========================================================================
    # Utility Operations
    # =========================================================================

    async def get_stats(self) -> dict[str, Any]:
        """Get record counts for the dashboard."""
        tasks = self._data["tasks"].values()
        agents = self._data["agents"].values()

        task_counts = {s.value: len([t for t in tasks if t.status == s]) for s in TaskStatus}
        agent_counts = {s.value: len([a for a in agents if a.status == s]) for s in AgentStatus}

        return {
            "agents": {"total": len(agents), "by_status": agent_counts},
            "tasks": {"total": len(tasks), "by_status": task_counts},
            "comments": {"total": len(self._data["comments"])},
            "activities": {"total": len(self._data["activities"])},
            "task_history": {"total": len(self._data["task_history"])},
            "costs": {"total": len(self._data["costs"])},
        }

    async def clear_all(self) -> None:
        """Clear all data. Use with caution!"""
        async with self.transaction():
            for table in _TABLES:
                self._touch(table)
                self._data[table] = {}

        logger.warning("Mission Control data cleared!")


# =========================================================================
# Factory Function
# =========================================================================

_store_instance: FileMissionControlStore | None = None


def get_mission_control_store(base_path: Path | None = None) -> FileMissionControlStore:
    """Get or create the Mission Control store singleton.

    Args:
        base_path: Optional custom storage path. Only used on first call.
            Defaults to <settings.data_dir>/mission_control.

    Returns:
        The FileMissionControlStore instance.
    """
    global _store_instance
    if _store_instance is None:
        if base_path is None:
            from squadboard.config import get_settings

            base_path = get_settings().data_dir / "mission_control"
        _store_instance = FileMissionControlStore(base_path)
    return _store_instance


def reset_mission_control_store() -> None:
    """Reset the store singleton (for testing)."""
    global _store_instance
    _store_instance = None
