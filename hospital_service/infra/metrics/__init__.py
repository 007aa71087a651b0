"""Metrics infrastructure (Prometheus)."""

from hospital_service.infra.metrics.prometheus import REGISTRY

__all__ = ["REGISTRY"]
