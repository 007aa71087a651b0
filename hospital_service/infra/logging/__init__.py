"""Logging infrastructure.

Standard library logging with:
- JSONL format for log aggregation
- Automatic context injection (request_id, entity, ...)
- Lazy evaluation for expensive debug output
- OpenTelemetry trace correlation

Basic usage:
    import logging

    from hospital_service.infra.logging import get_lazy_logger, set_log_context

    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Processing search")  # includes request_id
    lazy_logger.debug(lambda: f"SQL: {sql}")  # only built if DEBUG is enabled
"""

from hospital_service.infra.logging.config import configure_logging, setup_logging
from hospital_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from hospital_service.infra.logging.formatters import JSONFormatter
from hospital_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
]
