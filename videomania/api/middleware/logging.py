"""Request logging middleware."""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from videomania.commons.telemetry.logger import get_logger, set_correlation_id

logger = get_logger(__name__)

# Probed every few seconds by orchestrators
_QUIET_PATHS = frozenset({"/health/live", "/health/ready"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Stamp each request with an ``X-Request-ID`` and log its outcome.

    The request id doubles as the correlation id of every log record
    emitted while the request is handled. A caller-supplied id is reused.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_correlation_id(request_id)

        path = request.url.path
        quiet = path in _QUIET_PATHS
        start = time.perf_counter()

        if not quiet:
            logger.debug(
                "Request received",
                extra={
                    "method": request.method,
                    "request_path": path,
                    "client_ip": request.client.host if request.client else "unknown",
                },
            )

        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        if not quiet:
            level = logging.ERROR if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                f"{request.method} {path} -> {response.status_code}",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
        return response
