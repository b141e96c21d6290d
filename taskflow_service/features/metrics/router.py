"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - scrape endpoint for the service's own registry

Metrics Exposed:
    HTTP:
        - http_requests_total, http_request_duration_seconds
    Analytics:
        - analytics_reports_total, analytics_report_duration_seconds
        - analytics_strategy_failures_total, analytics_cache_requests_total
    Rate limiting:
        - rate_limit_checks_total, rate_limit_hits_total, rate_limit_tracked_keys
    Database:
        - database_connections_active, database_query_duration_seconds
    Application Info:
        - application_info
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from taskflow_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose metrics in the Prometheus text format."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
