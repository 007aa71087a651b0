"""Prometheus metrics for search endpoints and the database layer."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Custom registry so tests and embedding applications control exposition
REGISTRY = CollectorRegistry()

# Covers query times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

PAGE_SIZE_BUCKETS = (0, 1, 5, 10, 20, 50, 100)

search_query_duration_seconds = Histogram(
    "search_query_duration_seconds",
    "Duration of keyset page queries in seconds",
    ["entity"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

search_query_errors_total = Counter(
    "search_query_errors_total",
    "Keyset page queries that raised a storage error",
    ["entity", "error_type"],
    registry=REGISTRY,
)

search_page_items = Histogram(
    "search_page_items",
    "Number of items returned per search page",
    ["entity"],
    buckets=PAGE_SIZE_BUCKETS,
    registry=REGISTRY,
)

search_pages_total = Counter(
    "search_pages_total",
    "Search pages served, labelled by whether another page exists",
    ["entity", "has_more"],
    registry=REGISTRY,
)

search_invalid_cursors_total = Counter(
    "search_invalid_cursors_total",
    "Cursors that could not be decoded and restarted pagination",
    ["entity"],
    registry=REGISTRY,
)

search_rejected_filters_total = Counter(
    "search_rejected_filters_total",
    "Filter values dropped because they failed coercion",
    ["entity", "filter"],
    registry=REGISTRY,
)

# Database layer

database_query_duration_seconds = Histogram(
    "database_query_duration_seconds",
    "Duration of statements executed through the SQLAlchemy engine",
    ["operation"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

database_connections_active = Gauge(
    "database_connections_active",
    "Open connections held by the SQLAlchemy pool",
    registry=REGISTRY,
)
