"""Telemetry module - structured logging and timing."""

from videomania.commons.telemetry.decorators import LogContext, timed
from videomania.commons.telemetry.logger import (
    JsonFormatter,
    TextFormatter,
    apply_format_to_loggers,
    build_formatter,
    clear_log_context,
    configure_logging,
    get_correlation_id,
    get_log_context,
    get_logger,
    set_correlation_id,
    set_log_context,
)

__all__ = [
    # Decorators
    "timed",
    "LogContext",
    # Logger
    "get_logger",
    "configure_logging",
    "apply_format_to_loggers",
    "build_formatter",
    "JsonFormatter",
    "TextFormatter",
    # Correlation ID
    "get_correlation_id",
    "set_correlation_id",
    # Log Context
    "get_log_context",
    "set_log_context",
    "clear_log_context",
]
