import asyncio

import pytest

from conftest import FakePool, FakeStoreError
from todo_api.repositories import SQL_CREATE, TodoRepository


@pytest.fixture
def repo(pool) -> TodoRepository:
    return TodoRepository(pool)


@pytest.mark.asyncio
async def test_create_then_list_round_trip(repo, pool):
    created = await repo.create("Write docs")
    assert created["completed"] is False
    items = await repo.list()
    assert items.count(created) == 1
    assert pool.acquired == len(pool.released) == 2


@pytest.mark.asyncio
async def test_replace_missing_returns_none(repo):
    assert await repo.replace("42", "x", True) is None


@pytest.mark.asyncio
async def test_delete_reports_whether_a_row_was_removed(repo, pool):
    (row,) = pool.seed(("Gone soon", False))
    assert await repo.delete(str(row["id"])) is True
    assert await repo.delete(str(row["id"])) is False


@pytest.mark.asyncio
async def test_release_happens_before_error_propagates(repo, pool):
    pool.connection.fail_with = FakeStoreError("boom")
    with pytest.raises(FakeStoreError):
        await repo.create("x")
    assert pool.released == [pool.connection]


@pytest.mark.asyncio
async def test_acquire_error_propagates_without_release(repo, pool):
    pool.fail_acquire = TimeoutError("pool exhausted")
    with pytest.raises(TimeoutError):
        await repo.list()
    assert pool.released == []


@pytest.mark.asyncio
async def test_concurrent_creates_get_distinct_ids():
    pool = FakePool()
    repo = TodoRepository(pool)
    created = await asyncio.gather(*(repo.create(f"Concurrent todo {i}") for i in range(10)))
    assert len({t["id"] for t in created}) == 10
    assert sorted(t["title"] for t in created) == sorted(f"Concurrent todo {i}" for i in range(10))
    assert pool.acquired == len(pool.released) == 10
    assert all(call[0] == SQL_CREATE for call in pool.connection.calls)
