# API v1 router aggregation.
# Created: 2026-02-20
#
# mount_v1_routers(app) registers all domain routers at /api/v1/.

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Domain routers - imported lazily inside mount_v1_routers() to avoid circular imports.
_V1_ROUTERS: list[tuple[str, str, str]] = [
    # (module_path, attr_name, tag)
    ("squadboard.api.v1.health", "router", "Health"),
    ("squadboard.api.v1.tasks", "router", "Tasks"),
    ("squadboard.api.v1.comments", "router", "Comments"),
    ("squadboard.api.v1.agents", "router", "Agents"),
    ("squadboard.api.v1.activity", "router", "Activity"),
    ("squadboard.api.v1.costs", "router", "Costs"),
    ("squadboard.api.v1.operator", "router", "Operator"),
    ("squadboard.api.v1.storage", "router", "Storage"),
]


def mount_v1_routers(app: FastAPI) -> None:
    """Mount all v1 domain routers on *app* at ``/api/v1``.

    A router that fails to import is a packaging bug, so the error propagates.
    """
    for module_path, attr_name, tag in _V1_ROUTERS:
        mod = importlib.import_module(module_path)
        app.include_router(getattr(mod, attr_name), prefix="/api/v1")
        logger.debug("Mounted v1 router: %s (%s)", module_path, tag)
