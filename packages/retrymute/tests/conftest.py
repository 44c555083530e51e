from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from retrymute.config import get_settings


@pytest_asyncio.fixture
async def fake_redis() -> AsyncIterator[FakeRedis]:
    client = FakeRedis(decode_responses=False)
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "RETRYMUTE_DEBUG",
        "RETRYMUTE_LOG_FORMAT",
        "RETRYMUTE_REDIS_URL",
        "RETRYMUTE_FAILED_AT_FORMAT",
        "RETRYMUTE_WEBHOOK_URL",
        "RETRYMUTE_DEAD_LETTER_STREAM",
        "RETRYMUTE_DEAD_LETTER_STREAM_MAXLEN",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
