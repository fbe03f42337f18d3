"""Challenge Management API - Main Application.

Mounts the phase timeline routers and the health endpoints on a single
FastAPI application.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from challenge_api import __version__
from challenge_api.infrastructure.database.session import close_db
from challenge_api.phases.api import router as phases_router
from challenge_api.phases.config import get_phase_settings
from challenge_api.phases.service import get_phase_timeline_service
from challenge_api.shared.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)

logger = get_logger(__name__)

APP_TITLE = "Challenge Management API"
APP_DESCRIPTION = """
Computes and maintains the phase timelines of challenges: registration,
submission, review, appeals and the rest, dated from a timeline template.
"""
API_PREFIX = "/api/v5"

TAGS_METADATA = [
    {
        "name": "health",
        "description": "Health check and status endpoints",
    },
    {
        "name": "phases",
        "description": "Phase catalog, timeline templates and phase timeline computation",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    settings = get_phase_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)
    logger.info("app_starting", title=APP_TITLE, version=__version__, catalog=settings.catalog_backend)

    yield

    logger.info("app_stopping", title=APP_TITLE)
    get_phase_timeline_service().catalog.clear()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        version=__version__,
        openapi_tags=TAGS_METADATA,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        bound = bind_request_context(request_id, method=request.method, path=request.url.path)
        start_time = time.time()
        try:
            response = await call_next(request)
        finally:
            clear_request_context(*bound)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if app.debug else "An unexpected error occurred",
            },
        )

    app.include_router(phases_router, prefix=API_PREFIX)
    register_root_endpoints(app)
    return app


def register_root_endpoints(app: FastAPI) -> None:
    """Register root-level endpoints."""

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, Any]:
        """Basic health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": time.time(),
        }


app = create_app()
