"""Prometheus metrics registry and tracking helpers."""

from taskflow_service.infra.metrics.prometheus import REGISTRY

__all__ = ["REGISTRY"]
