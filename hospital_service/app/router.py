"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hospital_service.core.settings import get_app_settings
from hospital_service.features.medications.router import router as medications_router
from hospital_service.features.metrics.router import router as metrics_router
from hospital_service.features.patients.router import router as patients_router
from hospital_service.features.procedures.router import router as procedures_router
from hospital_service.features.terminology.router import router as terminology_router
from hospital_service.features.visits.router import router as visits_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from hospital_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)

SEARCH_ROUTERS = (
    patients_router,
    visits_router,
    procedures_router,
    medications_router,
    terminology_router,
)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Search routers are mounted under the API prefix; the metrics endpoint is
    served at the root.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    settings = app_settings or get_app_settings()
    api_prefix = settings.api_prefix

    for search_router in SEARCH_ROUTERS:
        app.include_router(search_router, prefix=api_prefix)

    app.include_router(metrics_router)

    logger.debug(
        "Routers configured",
        extra={"api_prefix": api_prefix, "search_routers": len(SEARCH_ROUTERS)},
    )


__all__ = ["SEARCH_ROUTERS", "setup_routers"]
