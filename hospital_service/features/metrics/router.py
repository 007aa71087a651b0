"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    Search Metrics:
        - search_query_duration_seconds - Page query latency per entity
        - search_query_errors_total - Failed page queries per entity and error type
        - search_page_items - Items returned per page
        - search_pages_total - Pages served, by whether another page exists
        - search_invalid_cursors_total - Cursors that restarted pagination
        - search_rejected_filters_total - Filter values dropped as unusable

    Database Metrics:
        - database_query_duration_seconds - Statement latency with trace exemplars
        - database_connections_active - Open pooled connections
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from hospital_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics in text exposition format."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
