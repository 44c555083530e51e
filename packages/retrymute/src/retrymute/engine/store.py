"""Redis accessor for tracking keys and suppressed-failure snapshots.

Key ownership:
    {tracking_key}            - written by the retry policy, read-only here
    failure-{tracking_key}    - latest suppressed failure (JSON, with TTL)
"""

from __future__ import annotations

import logging

import redis.asyncio as redis

from retrymute.config import get_settings
from retrymute.keys import failure_key
from retrymute.models import FailureSnapshot

logger = logging.getLogger(__name__)


async def connect_redis(url: str | None = None) -> redis.Redis:
    """Create a Redis client for ``url`` (defaults to RETRYMUTE_REDIS_URL)."""
    return redis.from_url(url or get_settings().redis_url)


class SnapshotStore:
    """
    Thin wrapper over the shared Redis client.

    Store errors are never caught here; callers see them as-is.
    """

    failure_key = staticmethod(failure_key)

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @property
    def client(self) -> redis.Redis:
        return self._client

    async def key_exists(self, tracking_key: str) -> bool:
        """Whether the retry policy still tracks this job instance."""
        return bool(await self._client.exists(tracking_key))

    async def write_snapshot(
        self, failure_key: str, serialized: str | bytes, ttl: float
    ) -> None:
        """Atomically set (or overwrite) a snapshot with an expiry in seconds."""
        if ttl <= 0:
            raise ValueError(f"ttl must be > 0, got {ttl}")

        if float(ttl).is_integer():
            await self._client.setex(failure_key, int(ttl), serialized)
        else:
            ttl_ms = max(1, round(ttl * 1000))
            await self._client.psetex(failure_key, ttl_ms, serialized)

    async def delete_snapshot(self, failure_key: str) -> bool:
        """Delete a snapshot if present. Returns whether one existed."""
        return bool(await self._client.delete(failure_key))

    async def read_snapshot(self, tracking_key: str) -> FailureSnapshot | None:
        """Load the suppressed failure for a tracking key, if any."""
        data = await self._client.get(failure_key(tracking_key))
        if data is None:
            return None
        return FailureSnapshot.model_validate_json(data)

    async def snapshot_ttl(self, tracking_key: str) -> float | None:
        """Remaining snapshot lifetime in seconds, or None when absent."""
        pttl = await self._client.pttl(failure_key(tracking_key))
        if pttl is None or pttl < 0:
            return None
        return pttl / 1000


__all__ = ["SnapshotStore", "connect_redis"]
