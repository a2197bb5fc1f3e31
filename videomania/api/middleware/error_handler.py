"""Error handling middleware: domain exceptions to JSON error envelopes."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from videomania.commons.infrastructure.documentdb.base import (
    DocumentConflictError,
    DocumentNotFoundError,
)
from videomania.commons.telemetry.logger import get_logger
from videomania.domain.exceptions import (
    CommentNotFoundException,
    ConfigurationException,
    DependencyException,
    DomainException,
    ValidationException,
    VideoNotFoundException,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class _ErrorMapping:
    """How one exception type is rendered."""

    exc_type: type[Exception]
    code: str
    status_code: int
    message: Callable[[Any], str] = str
    details: Callable[[Any], dict[str, Any]] = lambda _: {}
    log_level: int = logging.WARNING


# First match wins, so subclasses come before DomainException
_MAPPINGS: tuple[_ErrorMapping, ...] = (
    _ErrorMapping(
        ValidationException,
        "VALIDATION_ERROR",
        status.HTTP_400_BAD_REQUEST,
        message=lambda e: e.reason,
        details=lambda e: {"field": e.field},
    ),
    _ErrorMapping(
        VideoNotFoundException,
        "VIDEO_NOT_FOUND",
        status.HTTP_404_NOT_FOUND,
        message=lambda _: "Video not found",
        details=lambda e: {"video_id": e.video_id},
    ),
    _ErrorMapping(
        CommentNotFoundException,
        "COMMENT_NOT_FOUND",
        status.HTTP_404_NOT_FOUND,
        message=lambda _: "Comment not found",
        details=lambda e: {"comment_id": e.comment_id, "video_id": e.video_id},
    ),
    _ErrorMapping(DocumentNotFoundError, "NOT_FOUND", status.HTTP_404_NOT_FOUND),
    _ErrorMapping(DocumentConflictError, "CONFLICT", status.HTTP_409_CONFLICT),
    _ErrorMapping(
        ConfigurationException,
        "CONFIGURATION_ERROR",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        details=lambda e: {"component": e.component},
        log_level=logging.ERROR,
    ),
    _ErrorMapping(
        DependencyException,
        "DEPENDENCY_ERROR",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=lambda e: e.reason,
        details=lambda e: {"operation": e.operation},
        log_level=logging.ERROR,
    ),
    _ErrorMapping(DomainException, "DOMAIN_ERROR", status.HTTP_400_BAD_REQUEST),
)


def _build_error_response(
    request: Request,
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build the ``{"success": false, "error": {...}}`` envelope."""
    request_id = getattr(request.state, "request_id", "unknown")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
                "request_id": request_id,
            },
        },
    )


def _handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """Map an exception to its HTTP error response."""
    for mapping in _MAPPINGS:
        if isinstance(exc, mapping.exc_type):
            logger.log(
                mapping.log_level,
                f"{type(exc).__name__}: {exc}",
                extra={"error_code": mapping.code, "request_path": request.url.path},
            )
            return _build_error_response(
                request,
                mapping.code,
                mapping.message(exc),
                mapping.status_code,
                mapping.details(exc),
            )

    # Unhandled errors surface their message to the caller
    logger.exception(f"Unexpected error: {exc}")
    return _build_error_response(
        request,
        "INTERNAL_ERROR",
        str(exc) or "An unexpected error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def error_handler_middleware(
    request: Request,
    call_next: RequestResponseEndpoint,
) -> Response:
    """Catch anything a route raised and render the error envelope."""
    try:
        return await call_next(request)
    except Exception as exc:
        return _handle_exception(request, exc)


def _invalid_field(error: dict[str, Any]) -> str:
    """Last named segment of a pydantic error location, e.g. ``videoId``."""
    names = [str(part) for part in error.get("loc", ()) if not isinstance(part, int)]
    names = [name for name in names if name not in ("body", "query", "path")]
    return names[-1] if names else "request"


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request body/query validation failures as a 400 envelope."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = _invalid_field(first)
    cause = first.get("ctx", {}).get("error")
    message = str(cause) if cause else first.get("msg", "Invalid request")

    logger.warning(
        f"Request validation failed on {field}: {message}",
        extra={"error_code": "VALIDATION_ERROR", "request_path": request.url.path},
    )
    return _build_error_response(
        request,
        "VALIDATION_ERROR",
        message,
        status.HTTP_400_BAD_REQUEST,
        {"field": field, "errors": len(errors)},
    )
