"""Backend that appends failures to a Redis dead-letter stream."""

from __future__ import annotations

import json

import redis.asyncio as redis

from retrymute.backends.base import FailureBackend
from retrymute.config import get_settings
from retrymute.models import FailureEvent


class RedisStreamBackend(FailureBackend):
    """
    XADDs each failure to a capped Redis stream.

    Entry fields mirror the suppressed-failure snapshot; ``payload`` and
    ``backtrace`` are JSON encoded. ``failed_at`` is ISO 8601.
    """

    def __init__(
        self,
        client: redis.Redis,
        *,
        stream: str | None = None,
        maxlen: int | None = None,
    ) -> None:
        settings = get_settings()
        self._client = client
        self._stream = stream or settings.dead_letter_stream
        self._maxlen = settings.dead_letter_stream_maxlen if maxlen is None else maxlen
        if self._maxlen < 0:
            raise ValueError(f"maxlen must be >= 0, got {self._maxlen}")

    @property
    def stream(self) -> str:
        return self._stream

    async def save(self, event: FailureEvent) -> None:
        fields = {
            "failed_at": event.failed_at.isoformat(),
            "payload": json.dumps(event.payload, default=str),
            "exception": event.exception_kind,
            "error": event.exception_message,
            "backtrace": json.dumps(list(event.backtrace)),
            "worker": event.worker_identity,
            "queue": event.queue_name,
        }
        if self._maxlen > 0:
            await self._client.xadd(
                self._stream, fields, maxlen=self._maxlen, approximate=True
            )
        else:
            await self._client.xadd(self._stream, fields)
