"""API server for ``squadboard serve``.

Mounts the versioned ``/api/v1/`` routers with CORS and the Mission Control
exception handlers. The dashboard frontend talks to this server over REST.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from squadboard.mission_control.errors import (
    InvalidSignatureError,
    MissionControlError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first match wins.
_ERROR_STATUS: list[tuple[type[MissionControlError], int]] = [
    (NotFoundError, 404),
    (InvalidSignatureError, 403),
    (MissionControlError, 400),
]


async def _mission_control_error_handler(request: Request, exc: MissionControlError):
    status_code = next(code for cls, code in _ERROR_STATUS if isinstance(exc, cls))
    if status_code != 404:
        logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Map Mission Control exceptions to JSON error responses."""
    app.add_exception_handler(MissionControlError, _mission_control_error_handler)


def create_api_app() -> FastAPI:
    """Build the FastAPI application with all v1 API routers."""
    from fastapi.middleware.cors import CORSMiddleware

    from squadboard.api.v1 import mount_v1_routers
    from squadboard.config import get_settings

    app = FastAPI(
        title="Squadboard API",
        description="Mission control for a squad of AI agents.",
        version="1.0.0",
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    # --- CORS -----------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().api_cors_allowed_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # --- Errors ---------------------------------------------------------
    register_exception_handlers(app)

    # --- Mount all /api/v1/ routers -------------------------------------
    mount_v1_routers(app)

    return app


def run_api_server(
    host: str = "127.0.0.1",
    port: int = 8888,
    dev: bool = False,
) -> None:
    """Start the API server."""
    import uvicorn

    logger.info(f"Squadboard API docs: http://{host}:{port}/api/v1/docs")

    if dev:
        import pathlib

        src_dir = str(pathlib.Path(__file__).resolve().parent.parent)
        uvicorn.run(
            "squadboard.api.serve:create_api_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            reload_dirs=[src_dir],
            reload_includes=["*.py"],
            log_level="debug",
        )
    else:
        app = create_api_app()
        uvicorn.run(app, host=host, port=port)
