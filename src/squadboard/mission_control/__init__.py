"""Mission Control - shared workspace for an AI agent squad.

Created: 2026-02-05

Mission Control is the backend of the squad dashboard:

- Agent registry with presence, health and daily cost counters
- Task queue with lifecycle (pending -> in_progress -> review -> done)
- Field-level task history (audit trail)
- Activity feed for real-time visibility
- Comment threads with file attachments
- Cost ledger with daily per-agent summaries
- Operator status snapshot

Usage:
    from squadboard.mission_control import get_mission_control_manager

    manager = get_mission_control_manager()

    await manager.upsert_agent("dev", config=AgentConfig(role="Developer", emoji="⚡"))

    task = await manager.create_task(
        title="Wire up onboarding API",
        created_by="nash",
        priority=TaskPriority.HIGH,
        assigned_to="dev",
    )

    await manager.update_task_status(task.id, TaskStatus.IN_PROGRESS)
    await manager.add_comment(task.id, author="dev", content="On it.")

    summary = await manager.daily_summary()
"""

from squadboard.mission_control.blobs import (
    FileBlobStore,
    UrlSigner,
    get_blob_store,
    reset_blob_store,
)
from squadboard.mission_control.costs import (
    AgentCostSummary,
    CostSummary,
    TimeWindow,
    summarize_costs,
    today_window,
)
from squadboard.mission_control.errors import (
    InvalidSignatureError,
    MissionControlError,
    NotFoundError,
)

# Manager
from squadboard.mission_control.manager import (
    MissionControlManager,
    get_mission_control_manager,
    reset_mission_control_manager,
)

# Models
from squadboard.mission_control.models import (
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
)

# Protocols
from squadboard.mission_control.protocol import BlobStoreProtocol, MissionControlStoreProtocol

# Store
from squadboard.mission_control.store import (
    FileMissionControlStore,
    get_mission_control_store,
    reset_mission_control_store,
)

__all__ = [
    # Models
    "Agent",
    "AgentConfig",
    "AgentStatus",
    "HealthStatus",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskHistory",
    "TaskComment",
    "Attachment",
    "ContentType",
    "Activity",
    "ActivityType",
    "CostEntry",
    "OperatorStatus",
    # Costs
    "TimeWindow",
    "CostSummary",
    "AgentCostSummary",
    "summarize_costs",
    "today_window",
    # Errors
    "MissionControlError",
    "NotFoundError",
    "InvalidSignatureError",
    # Store
    "MissionControlStoreProtocol",
    "BlobStoreProtocol",
    "FileMissionControlStore",
    "get_mission_control_store",
    "reset_mission_control_store",
    "FileBlobStore",
    "UrlSigner",
    "get_blob_store",
    "reset_blob_store",
    # Manager
    "MissionControlManager",
    "get_mission_control_manager",
    "reset_mission_control_manager",
]
