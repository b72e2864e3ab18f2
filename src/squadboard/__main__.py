"""Squadboard entry point.

Changes:
  - 2026-03-02: Added `seed` command (default squad + sample task).
  - 2026-02-20: `serve` starts the API server.
"""

import argparse
import asyncio
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

from squadboard.config import get_settings
from squadboard.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _version() -> str:
    try:
        return get_version("squadboard")
    except PackageNotFoundError:
        return "unknown"


async def seed() -> None:
    """Register the default agents and a sample task."""
    from squadboard.mission_control import get_mission_control_manager

    manager = get_mission_control_manager()
    created = await manager.seed_agents()
    logger.info(f"Seeded {created} agent(s)")

    task = await manager.seed_task()
    if task:
        logger.info(f"Seeded sample task: {task.title}")
    else:
        logger.info("Task queue not empty, skipped sample task")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Squadboard - mission control for a squad of AI agents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  squadboard serve                   Start the API server
  squadboard serve --dev             Start with auto-reload (dev mode)
  squadboard seed                    Register the default squad and a sample task
""",
    )
    parser.add_argument(
        "command",
        choices=["serve", "seed"],
        help="'serve' starts the API server, 'seed' populates an empty board",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind (default: SQUADBOARD_WEB_HOST or 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port to bind (default: SQUADBOARD_WEB_PORT or 8888)",
    )
    parser.add_argument(
        "--dev", action="store_true", help="Development mode with auto-reload"
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {_version()}",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(level=settings.log_level)

    if args.command == "seed":
        asyncio.run(seed())
        return

    from squadboard.api.serve import run_api_server

    try:
        run_api_server(
            host=args.host or settings.web_host,
            port=args.port or settings.web_port,
            dev=args.dev,
        )
    except KeyboardInterrupt:
        logger.info("Squadboard stopped.")


if __name__ == "__main__":
    main()
