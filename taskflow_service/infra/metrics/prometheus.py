"""Prometheus metrics for monitoring."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Custom registry so tests and multiple app instances don't collide with the default one
REGISTRY = CollectorRegistry()

# Covers response times from 1ms to 10s
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

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

errors_total = Counter(
    "errors_total",
    "Errors returned to callers",
    ["error_type", "endpoint", "status_code"],
    registry=REGISTRY,
)

# Database metrics
database_connections_active = Gauge(
    "database_connections_active",
    "Open database connections",
    registry=REGISTRY,
)

database_query_duration_seconds = Histogram(
    "database_query_duration_seconds",
    "Database query duration in seconds",
    ["operation"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# Analytics metrics
analytics_reports_total = Counter(
    "analytics_reports_total",
    "Analytics reports generated",
    ["strategy"],
    registry=REGISTRY,
)

analytics_report_duration_seconds = Histogram(
    "analytics_report_duration_seconds",
    "Time spent computing an analytics report",
    ["strategy"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

analytics_strategy_failures_total = Counter(
    "analytics_strategy_failures_total",
    "Analytics strategy invocations that raised",
    ["strategy"],
    registry=REGISTRY,
)

analytics_cache_requests_total = Counter(
    "analytics_cache_requests_total",
    "Analytics report cache lookups",
    ["result"],
    registry=REGISTRY,
)

# Rate limiting metrics
rate_limit_checks_total = Counter(
    "rate_limit_checks_total",
    "Rate limit checks",
    ["endpoint", "result"],
    registry=REGISTRY,
)

rate_limit_hits_total = Counter(
    "rate_limit_hits_total",
    "Requests rejected by the rate limiter",
    ["endpoint"],
    registry=REGISTRY,
)

rate_limit_tracked_keys = Gauge(
    "rate_limit_tracked_keys",
    "Identities currently tracked by the in-memory rate limiter",
    registry=REGISTRY,
)

# Application info
application_info = Gauge(
    "application_info",
    "Application version and environment",
    ["version", "service", "environment"],
    registry=REGISTRY,
)
