"""Retry capability probing for failed job payloads.

Job classes are heterogeneous: most do not support retry introspection, and
some payloads name classes this process cannot load. Both are normal outcomes
and are folded into "not retryable" so that failure reporting is never blocked
by introspection.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from retrymute.jobs import JobRegistry, JobResolutionError, RetryableJob

logger = logging.getLogger(__name__)


class ProbeOutcome(StrEnum):
    """Result of probing a payload's job class."""

    CAPABLE = "capable"
    NOT_CAPABLE = "not_capable"
    RESOLUTION_FAILED = "resolution_failed"


@dataclass(frozen=True)
class RetryCapability:
    """Retry view of a job instance: its tracking key and current delay."""

    tracking_key: str
    retry_delay: float


@dataclass(frozen=True)
class ProbeResult:
    """Probe outcome plus the capability view when the job is retryable."""

    outcome: ProbeOutcome
    capability: RetryCapability | None = None
    reason: str | None = None

    @property
    def supported(self) -> bool:
        return self.capability is not None

    @property
    def tracking_key(self) -> str | None:
        return self.capability.tracking_key if self.capability else None

    @property
    def retry_delay(self) -> float | None:
        return self.capability.retry_delay if self.capability else None

    @classmethod
    def capable(cls, tracking_key: str, retry_delay: float) -> ProbeResult:
        return cls(
            outcome=ProbeOutcome.CAPABLE,
            capability=RetryCapability(
                tracking_key=tracking_key, retry_delay=retry_delay
            ),
        )

    @classmethod
    def not_capable(cls, reason: str) -> ProbeResult:
        return cls(outcome=ProbeOutcome.NOT_CAPABLE, reason=reason)

    @classmethod
    def resolution_failed(cls, reason: str) -> ProbeResult:
        return cls(outcome=ProbeOutcome.RESOLUTION_FAILED, reason=reason)


class JobIntrospector:
    """
    Resolves a failure payload to its job class and asks it for retry state.

    ``probe()`` never raises.
    """

    def __init__(self, registry: JobRegistry | None = None) -> None:
        self._registry = registry or JobRegistry()

    @property
    def registry(self) -> JobRegistry:
        return self._registry

    def probe(self, payload: Mapping[str, Any]) -> ProbeResult:
        result = self._probe(payload)
        if result.outcome == ProbeOutcome.RESOLUTION_FAILED:
            logger.warning(
                f"Treating job as not retryable, resolution failed: {result.reason}"
            )
        elif result.outcome == ProbeOutcome.NOT_CAPABLE:
            logger.debug(f"Job is not retryable: {result.reason}")
        return result

    def _probe(self, payload: Mapping[str, Any]) -> ProbeResult:
        if not isinstance(payload, Mapping):
            return ProbeResult.resolution_failed(
                f"payload is {type(payload).__name__}, expected a mapping"
            )

        class_name = payload.get("class")
        try:
            job_class = self._registry.resolve(class_name)
        except JobResolutionError as exc:
            return ProbeResult.resolution_failed(str(exc))
        except Exception as exc:
            # Importing user modules can raise anything.
            return ProbeResult.resolution_failed(
                f"loading '{class_name}' raised {type(exc).__name__}: {exc}"
            )

        if not issubclass(job_class, RetryableJob):
            return ProbeResult.not_capable(
                f"'{class_name}' does not implement RetryableJob"
            )

        args = payload.get("args") or []
        kwargs = payload.get("kwargs") or {}
        if not isinstance(args, list | tuple) or not isinstance(kwargs, Mapping):
            return ProbeResult.resolution_failed(
                f"'{class_name}' payload has malformed args/kwargs"
            )

        try:
            tracking_key = job_class.retry_tracking_key(*args, **kwargs)
            retry_delay = job_class.current_retry_delay()
        except Exception as exc:
            return ProbeResult.resolution_failed(
                f"'{class_name}' retry introspection raised "
                f"{type(exc).__name__}: {exc}"
            )

        if not isinstance(tracking_key, str) or not tracking_key:
            return ProbeResult.resolution_failed(
                f"'{class_name}' returned invalid tracking key {tracking_key!r}"
            )
        if not isinstance(retry_delay, int | float) or not math.isfinite(retry_delay):
            return ProbeResult.resolution_failed(
                f"'{class_name}' returned invalid retry delay {retry_delay!r}"
            )

        return ProbeResult.capable(tracking_key, retry_delay)


__all__ = [
    "JobIntrospector",
    "ProbeOutcome",
    "ProbeResult",
    "RetryCapability",
]
