from __future__ import annotations

import pytest
from fakeredis.aioredis import FakeRedis
from retrymute.engine.store import SnapshotStore
from retrymute.models import FailureSnapshot


def _snapshot(error: str = "boom") -> FailureSnapshot:
    return FailureSnapshot(
        failed_at="2024/03/09 14:05:07",
        payload={"class": "Foo", "args": [1]},
        exception="RuntimeError",
        error=error,
        backtrace=[],
        worker="host:1",
        queue="default",
    )


@pytest.fixture
def store(fake_redis: FakeRedis) -> SnapshotStore:
    return SnapshotStore(fake_redis)


@pytest.mark.asyncio
async def test_key_exists_reflects_tracking_key(
    store: SnapshotStore, fake_redis: FakeRedis
) -> None:
    assert await store.key_exists("retry:Foo:1") is False

    await fake_redis.set("retry:Foo:1", b"1")

    assert await store.key_exists("retry:Foo:1") is True


@pytest.mark.asyncio
async def test_write_snapshot_sets_value_and_whole_second_ttl(
    store: SnapshotStore, fake_redis: FakeRedis
) -> None:
    await store.write_snapshot("failure-retry:Foo:1", _snapshot().to_json(), 60)

    assert await fake_redis.ttl("failure-retry:Foo:1") == 60
    assert await store.read_snapshot("retry:Foo:1") == _snapshot()


@pytest.mark.asyncio
async def test_write_snapshot_fractional_ttl_uses_milliseconds(
    store: SnapshotStore, fake_redis: FakeRedis
) -> None:
    await store.write_snapshot("failure-retry:Foo:1", _snapshot().to_json(), 1.5)

    pttl = await fake_redis.pttl("failure-retry:Foo:1")
    assert 1000 < pttl <= 1500


@pytest.mark.asyncio
@pytest.mark.parametrize("ttl", [0, -1, -0.5])
async def test_write_snapshot_rejects_non_positive_ttl(
    store: SnapshotStore, fake_redis: FakeRedis, ttl: float
) -> None:
    with pytest.raises(ValueError):
        await store.write_snapshot("failure-retry:Foo:1", "{}", ttl)

    assert await fake_redis.exists("failure-retry:Foo:1") == 0


@pytest.mark.asyncio
async def test_write_snapshot_overwrites_previous_value(
    store: SnapshotStore,
) -> None:
    await store.write_snapshot("failure-retry:Foo:1", _snapshot("first").to_json(), 60)
    await store.write_snapshot("failure-retry:Foo:1", _snapshot("second").to_json(), 20)

    loaded = await store.read_snapshot("retry:Foo:1")
    assert loaded is not None
    assert loaded.error == "second"
    ttl = await store.snapshot_ttl("retry:Foo:1")
    assert ttl is not None and 19 < ttl <= 20


@pytest.mark.asyncio
async def test_delete_snapshot_is_idempotent(
    store: SnapshotStore, fake_redis: FakeRedis
) -> None:
    assert await store.delete_snapshot("failure-retry:Foo:1") is False

    await store.write_snapshot("failure-retry:Foo:1", _snapshot().to_json(), 60)

    assert await store.delete_snapshot("failure-retry:Foo:1") is True
    assert await store.delete_snapshot("failure-retry:Foo:1") is False
    assert await fake_redis.exists("failure-retry:Foo:1") == 0


@pytest.mark.asyncio
async def test_read_missing_snapshot_returns_none(store: SnapshotStore) -> None:
    assert await store.read_snapshot("retry:Nope:1") is None
    assert await store.snapshot_ttl("retry:Nope:1") is None
