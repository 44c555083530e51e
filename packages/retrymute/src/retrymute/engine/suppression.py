"""Failure backend that suppresses reports for jobs that will be retried.

If a job can retry 5 times, the wrapped backends are not notified unless the
final attempt also fails. While the job is still retrying, the latest failure
is kept in Redis under ``failure-{tracking_key}`` for dashboards, with a TTL
of twice the retry delay.

Example:
    store = SnapshotStore(redis_client)
    backend = RetrySuppressionBackend(
        [LoggingBackend(), RedisStreamBackend(redis_client)],
        store=store,
    )

    # In the worker's failure path:
    await backend.on_job_failure(FailureEvent.from_exception(exc, payload=payload))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum

from retrymute.backends.base import FailureBackend
from retrymute.backends.multiple import MultipleBackend
from retrymute.config import get_settings
from retrymute.engine.introspection import JobIntrospector, ProbeResult
from retrymute.engine.store import SnapshotStore
from retrymute.keys import failure_key
from retrymute.models import FailureEvent, FailureSnapshot

logger = logging.getLogger(__name__)

# Snapshot TTL as a multiple of the current retry delay.
SNAPSHOT_TTL_FACTOR = 2


class Decision(StrEnum):
    """What to do with a failure event."""

    DELIVER = "deliver"
    SUPPRESS_WITH_SNAPSHOT = "suppress_with_snapshot"
    SUPPRESS_SILENT = "suppress_silent"


class RetrySuppressionBackend(FailureBackend):
    """
    Routes failures either to the wrapped backends or to a transient snapshot.

    - Not retryable, or retryable but no longer retrying: drop any stale
      snapshot (retryable jobs only), then deliver to every backend in order.
    - Retrying with a positive delay: write the snapshot, deliver nothing.
    - Retrying with a zero/negative delay: do nothing.

    Redis and backend errors propagate. A snapshot that cannot be serialized
    is logged and skipped.
    """

    failure_key = staticmethod(failure_key)

    def __init__(
        self,
        backends: Iterable[FailureBackend],
        *,
        store: SnapshotStore,
        introspector: JobIntrospector | None = None,
        failed_at_format: str | None = None,
    ) -> None:
        self._fanout = MultipleBackend(backends)
        self._store = store
        self._introspector = introspector or JobIntrospector()
        self._failed_at_format = failed_at_format or get_settings().failed_at_format

    @property
    def backends(self) -> tuple[FailureBackend, ...]:
        return self._fanout.backends

    @property
    def store(self) -> SnapshotStore:
        return self._store

    @property
    def introspector(self) -> JobIntrospector:
        return self._introspector

    async def save(self, event: FailureEvent) -> None:
        await self.on_job_failure(event)

    async def decide(self, event: FailureEvent) -> tuple[Decision, ProbeResult]:
        """Probe the job and check its retry state without mutating anything."""
        probe = self._introspector.probe(event.payload)
        capability = probe.capability
        if capability is None:
            return Decision.DELIVER, probe

        if not await self._store.key_exists(capability.tracking_key):
            return Decision.DELIVER, probe

        if capability.retry_delay > 0:
            return Decision.SUPPRESS_WITH_SNAPSHOT, probe
        return Decision.SUPPRESS_SILENT, probe

    async def on_job_failure(self, event: FailureEvent) -> None:
        """Handle one failed job attempt."""
        decision, probe = await self.decide(event)
        capability = probe.capability

        if decision == Decision.DELIVER:
            if capability is not None:
                await self._store.delete_snapshot(
                    failure_key(capability.tracking_key)
                )
            await self._fanout.save(event)
            return

        if decision == Decision.SUPPRESS_SILENT:
            logger.debug(
                f"Suppressed failure of {event.job_class} "
                f"(immediate retry, key={probe.tracking_key})"
            )
        elif capability is not None:
            await self._write_snapshot(
                event, capability.tracking_key, capability.retry_delay
            )

    async def _write_snapshot(
        self, event: FailureEvent, tracking_key: str, retry_delay: float
    ) -> None:
        try:
            serialized = FailureSnapshot.from_event(
                event, failed_at_format=self._failed_at_format
            ).to_json()
        except (TypeError, ValueError) as exc:
            logger.warning(
                f"Could not serialize suppressed failure of {event.job_class}: {exc}",
                extra={"tracking_key": tracking_key},
            )
            return

        ttl = SNAPSHOT_TTL_FACTOR * retry_delay
        await self._store.write_snapshot(failure_key(tracking_key), serialized, ttl)
        logger.debug(
            f"Suppressed failure of {event.job_class}, will retry in {retry_delay}s "
            f"(snapshot ttl={ttl}s)",
            extra={"tracking_key": tracking_key},
        )


__all__ = ["Decision", "RetrySuppressionBackend", "SNAPSHOT_TTL_FACTOR"]
