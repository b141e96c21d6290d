"""HTTP tests for GET /api/v1/analytics/tasks."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from taskflow_service.app.exception_handlers import GENERIC_ERROR_DETAIL
from taskflow_service.core.dependencies.auth import get_auth_client
from taskflow_service.core.dependencies.ratelimit import get_analytics_rate_limiter
from taskflow_service.core.settings import AnalyticsSettings
from taskflow_service.features.analytics.service import AnalyticsService, get_analytics_service
from taskflow_service.infra.auth.testing import MockAuthClient
from tests.conftest import ALICE_ID, BOB_ID

URL = "/api/v1/analytics/tasks"

REPORT_KEYS = {
    "totalTasks",
    "completedTasks",
    "pendingTasks",
    "inProgressTasks",
    "overdueTasks",
    "completionRate",
    "averageCompletionTime",
    "productivityScore",
    "tasksByPriority",
    "tasksByTag",
    "monthlyTrends",
    "upcomingDeadlines",
}


class FailingStrategy:
    name = "fallback"
    exact = False

    async def compute(self, session, owner_id, window):
        raise RuntimeError('relation "tasks" does not exist')


async def test_report_for_authenticated_user(client, alice_headers, task_factory):
    now = datetime.now(UTC)
    await task_factory(status="done", priority="high", tags=["work"], created_at=now)
    await task_factory(status="pending", due_date=now + timedelta(days=2), tags=["work", "home"], created_at=now)
    await task_factory(owner_id=BOB_ID, status="done", created_at=now)

    response = await client.get(URL, headers=alice_headers)

    assert response.status_code == 200
    body = response.json()
    assert set(body) == REPORT_KEYS
    assert body["totalTasks"] == 2
    assert body["completedTasks"] == 1
    assert body["completionRate"] == 50
    assert body["averageCompletionTime"] == 24
    assert body["tasksByPriority"] == {"high": 1, "medium": 1, "low": 0}
    assert body["tasksByTag"] == {"work": 2, "home": 1}
    assert len(body["monthlyTrends"]) == 6
    assert body["monthlyTrends"][-1] == {"month": now.strftime("%Y-%m"), "created": 2, "completed": 1}
    assert [d["title"] for d in body["upcomingDeadlines"]] == ["Task"]
    assert set(body["upcomingDeadlines"][0]) == {"taskId", "title", "dueDate", "priority"}


async def test_empty_report(client, bob_headers):
    response = await client.get(URL, headers=bob_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["totalTasks"] == 0
    assert body["completionRate"] == 0
    assert body["productivityScore"] == 0
    assert body["tasksByTag"] == {}
    assert body["upcomingDeadlines"] == []


async def test_missing_token_is_401(client):
    response = await client.get(URL)

    assert response.status_code == 401
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.headers["www-authenticate"] == "Bearer"
    body = response.json()
    assert body["type"] == "missing-authentication"
    assert body["instance"] == URL


async def test_rejected_token_is_401(app, client, alice_headers):
    app.dependency_overrides[get_auth_client] = MockAuthClient.unauthorized

    response = await client.get(URL, headers=alice_headers)

    assert response.status_code == 401
    assert response.json()["type"] == "token-invalid"


@pytest.mark.parametrize("user_id", ["not-a-uuid", "00000000-0000-1000-8000-000000000000"])
async def test_malformed_user_id_is_400(app, client, user_id):
    app.dependency_overrides[get_auth_client] = lambda: MockAuthClient.user(user_id)

    response = await client.get(URL, headers={"Authorization": "Bearer anything"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid user ID format"


async def test_rate_limit_is_429_with_retry_after(monkeypatch, client, alice_headers, bob_headers):
    monkeypatch.setenv("ANALYTICS_RATE_LIMIT_REQUESTS", "2")
    get_analytics_rate_limiter.cache_clear()

    for _ in range(2):
        assert (await client.get(URL, headers=alice_headers)).status_code == 200
    response = await client.get(URL, headers=alice_headers)

    assert response.status_code == 429
    retry_after = int(response.headers["retry-after"])
    assert 0 < retry_after <= 60
    body = response.json()
    assert body["retry_after"] == retry_after
    assert body["limit"] == 2

    # limits are per user
    assert (await client.get(URL, headers=bob_headers)).status_code == 200


async def test_strategy_failure_is_generic_500(app, client, alice_headers):
    limiter = get_analytics_rate_limiter()
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(
        None,  # type: ignore[arg-type]
        limiter,
        settings=AnalyticsSettings(cache_enabled=False),
        strategies=[FailingStrategy()],
    )

    response = await client.get(URL, headers=alice_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == GENERIC_ERROR_DETAIL
    assert "relation" not in response.text
    assert ALICE_ID not in response.text
