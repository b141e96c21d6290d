"""Tests for the assembled application: probes, metrics and middleware."""

from __future__ import annotations

from taskflow_service.app.main import create_app
from taskflow_service.infra.metrics.prometheus import REGISTRY


def test_create_app_registers_routes():
    paths = {route.path for route in create_app().routes}

    assert {
        "/metrics",
        "/api/v1/health/live",
        "/api/v1/health/ready",
        "/api/v1/analytics/tasks",
        "/api/v1/tasks",
        "/api/v1/tasks/{task_id}",
    } <= paths


async def test_liveness(client):
    response = await client.get("/api/v1/health/live")

    assert response.status_code == 200
    assert response.json()["alive"] is True


async def test_readiness_reports_database(monkeypatch, client):
    async def database_up() -> bool:
        return True

    monkeypatch.setattr("taskflow_service.features.health.router.check_database", database_up)

    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 200
    assert response.json()["checks"] == {"database": True}


async def test_readiness_is_503_when_database_down(monkeypatch, client):
    async def database_down() -> bool:
        return False

    monkeypatch.setattr("taskflow_service.features.health.router.check_database", database_down)

    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 503
    assert response.json()["ready"] is False


async def test_request_id_is_echoed(client):
    response = await client.get("/api/v1/health/live", headers={"X-Request-ID": "abc-123"})

    assert response.headers["x-request-id"] == "abc-123"
    assert float(response.headers["x-process-time"]) >= 0


async def test_request_id_is_generated(client):
    response = await client.get("/api/v1/health/live")

    assert len(response.headers["x-request-id"]) == 36


async def test_problem_responses_carry_request_id(client):
    response = await client.get("/api/v1/analytics/tasks", headers={"X-Request-ID": "req-401"})

    assert response.status_code == 401
    assert response.json()["request_id"] == "req-401"


async def test_metrics_endpoint_exposes_request_counters(client):
    labels = {"method": "GET", "endpoint": "/api/v1/health/live", "status": "200"}
    before = REGISTRY.get_sample_value("http_requests_total", labels) or 0.0

    await client.get("/api/v1/health/live")
    response = await client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "http_requests_total" in response.text
    assert REGISTRY.get_sample_value("http_requests_total", labels) == before + 1
