"""FastAPI application factory and lifespan management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from videomania.api.dependencies import get_settings, init_services, shutdown_services
from videomania.api.middleware.error_handler import (
    error_handler_middleware,
    request_validation_handler,
)
from videomania.api.middleware.logging import LoggingMiddleware
from videomania.api.openapi.routes import comments, health, uploads, videos
from videomania.commons.telemetry import apply_format_to_loggers, configure_logging

_THIRD_PARTY_LOGGERS = ["uvicorn", "uvicorn.error", "uvicorn.access"]


def _setup_logging() -> None:
    """Configure logging for the application.

    Runs at import time so our formatters are in place before uvicorn starts.
    """
    settings = get_settings()
    log_level = settings.telemetry.log_level or settings.app.log_level

    configure_logging(
        level=log_level,
        format_type=settings.telemetry.log_format,
        logger_name="videomania",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))


# Configure logging at module import time
_setup_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize infrastructure on startup and close it on shutdown."""
    settings = get_settings()

    # Uvicorn handlers exist only once the server is running
    apply_format_to_loggers(
        _THIRD_PARTY_LOGGERS,
        level=settings.telemetry.log_level or settings.app.log_level,
        format_type=settings.telemetry.log_format,
    )

    await init_services(settings)

    yield

    await shutdown_services()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Videomania - upload, browse and comment on videos",
        docs_url="/docs" if settings.server.docs_enabled else None,
        redoc_url="/redoc" if settings.server.docs_enabled else None,
        openapi_url="/openapi.json" if settings.server.docs_enabled else None,
        lifespan=lifespan,
    )

    _configure_middleware(app, settings)
    _register_routes(app, settings)

    return app


def _configure_middleware(app: FastAPI, settings: Any) -> None:
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)

    # Error handler (as middleware)
    app.middleware("http")(error_handler_middleware)
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )


def _register_routes(app: FastAPI, settings: Any) -> None:
    """Register API routes."""
    prefix = settings.server.api_prefix

    # Health routes (no prefix for standard health checks)
    app.include_router(health.router, tags=["Health"])

    app.include_router(uploads.router, prefix=prefix, tags=["Uploads"])
    app.include_router(videos.router, prefix=prefix, tags=["Videos"])
    app.include_router(comments.router, prefix=prefix, tags=["Comments"])


# Create default app instance
app = create_app()
