"""Logging configuration setup.

Uses ``logging.config.dictConfig`` with every handler on the root logger;
application loggers propagate up. JSON Lines output for machine parsing,
plain text for local development.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hospital_service.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(
    log_level: str = "INFO",
    *,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    service_name: str | None = None,
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Configure root logging via dictConfig.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of plain text.
        console_enabled: Attach a stderr handler.
        include_context: Inject ContextVar log context into records.
        service_name: Static ``service`` field added to JSON records.
        logger_levels: Per-logger level overrides, e.g. {"sqlalchemy.engine": "WARNING"}.

    Example:
        configure_logging(log_level="DEBUG", json_logs=False)
    """
    formatter: dict[str, Any]
    if json_logs:
        formatter = {
            "()": "hospital_service.infra.logging.formatters.JSONFormatter",
            "static": {"service": service_name} if service_name else {},
        }
    else:
        formatter = {"format": _TEXT_FORMAT}

    filters: dict[str, Any] = {}
    handler_filters: list[str] = []
    if include_context:
        filters["context"] = {"()": "hospital_service.infra.logging.context.ContextInjectingFilter"}
        handler_filters.append("context")

    handlers: dict[str, Any] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "filters": handler_filters,
            "stream": "ext://sys.stderr",
        }

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "filters": filters,
        "handlers": handlers,
        "root": {"level": log_level, "handlers": list(handlers)},
        "loggers": {
            name: {"level": level} for name, level in (logger_levels or {}).items()
        },
    }
    logging.config.dictConfig(config)
    logger.debug("Logging configured (level=%s, json=%s)", log_level, json_logs)


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
) -> None:
    """Configure logging once across entrypoints.

    Args:
        log_settings: Logging settings; loaded via get_logging_settings() if omitted.
        force: Reconfigure even if logging was already initialized.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from hospital_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**log_settings.to_logging_kwargs())
    _LOGGING_INITIALIZED = True


__all__ = ["configure_logging", "setup_logging"]
