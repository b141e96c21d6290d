"""Tests for TaskService."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from taskflow_service.core.exceptions import NotFoundException
from taskflow_service.core.models import TaskStatus
from taskflow_service.features.analytics.service import report_cache_key
from taskflow_service.features.tasks.schemas import TaskCreate, TaskUpdate
from taskflow_service.features.tasks.service import TaskService
from tests.conftest import ALICE_ID, BOB_ID, REFERENCE_NOW


class RecordingCache:
    def __init__(self) -> None:
        self.deleted: list[str] = []

    async def get(self, key):
        return None

    async def set(self, key, value, ttl=None):
        return True

    async def delete(self, key):
        self.deleted.append(key)
        return True


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def service(db_session, cache) -> TaskService:
    return TaskService(db_session, cache=cache)


async def test_create_keeps_tag_order(service):
    task = await service.create_task(ALICE_ID, TaskCreate(title="t", tags=["b", "a", "b"]))

    assert task.tag_names == ["b", "a", "b"]
    assert task.status == TaskStatus.PENDING


async def test_get_is_scoped_to_owner(service):
    task = await service.create_task(ALICE_ID, TaskCreate(title="mine"))

    assert (await service.get_task(ALICE_ID, task.id)).id == task.id
    with pytest.raises(NotFoundException):
        await service.get_task(BOB_ID, task.id)
    with pytest.raises(NotFoundException):
        await service.get_task(ALICE_ID, uuid4())


async def test_list_orders_newest_first(service, task_factory):
    for days, title in [(3, "old"), (2, "mid"), (1, "new")]:
        await task_factory(title=title, created_at=REFERENCE_NOW - timedelta(days=days))

    tasks, total = await service.list_tasks(ALICE_ID, limit=2)

    assert total == 3
    assert [t.title for t in tasks] == ["new", "mid"]


async def test_update_replaces_tags(service, db_session):
    task = await service.create_task(ALICE_ID, TaskCreate(title="t", tags=["a", "b", "c"]))

    updated = await service.update_task(ALICE_ID, task.id, TaskUpdate(tags=["c", "a"]))

    assert updated.tag_names == ["c", "a"]


async def test_update_ignores_null_title(service):
    task = await service.create_task(ALICE_ID, TaskCreate(title="keep"))

    updated = await service.update_task(ALICE_ID, task.id, TaskUpdate(title=None, priority="low"))

    assert updated.title == "keep"
    assert updated.priority == "low"


async def test_mutations_invalidate_cached_report(service, cache):
    task = await service.create_task(ALICE_ID, TaskCreate(title="t"))
    await service.update_task(ALICE_ID, task.id, TaskUpdate(status="done"))
    await service.delete_task(ALICE_ID, task.id)

    assert cache.deleted == [report_cache_key(ALICE_ID)] * 3
