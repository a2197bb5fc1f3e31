"""API middleware components."""

from videomania.api.middleware.error_handler import (
    error_handler_middleware,
    request_validation_handler,
)
from videomania.api.middleware.logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
    "error_handler_middleware",
    "request_validation_handler",
]
