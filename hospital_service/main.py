"""Entry point: run the search API under uvicorn."""

from __future__ import annotations

import uvicorn

from hospital_service.core.settings import get_app_settings, get_logging_settings


def run_server() -> None:
    """Run the FastAPI application server with settings from configuration."""
    settings = get_app_settings()
    log_settings = get_logging_settings()

    uvicorn.run(
        "hospital_service.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        access_log=settings.debug,
        log_level=log_settings.level.lower(),
    )


if __name__ == "__main__":
    run_server()
