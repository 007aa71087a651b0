"""Application lifespan management.

Startup: logging. Database connections are opened lazily by the first
request so the service starts even while the database is still coming up.

Shutdown: dispose of the SQLAlchemy engine and close the native pool.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from hospital_service.core.settings import get_app_settings, get_db_settings
from hospital_service.infra.database.psycopg_pool import close_pool
from hospital_service.infra.database.session import close_database
from hospital_service.infra.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    _ = app

    setup_logging()
    app_settings = get_app_settings()
    logger.info(
        "Application starting",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
            "executor": get_db_settings().executor,
        },
    )

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await close_database()
        await close_pool()
        logger.info("Application shutdown complete")


__all__ = ["lifespan"]
