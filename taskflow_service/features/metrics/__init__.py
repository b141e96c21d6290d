"""Prometheus scrape endpoint."""

from taskflow_service.features.metrics.router import router

__all__ = ["router"]
