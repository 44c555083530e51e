"""Failure event and suppressed-failure snapshot models."""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from retrymute.config import DEFAULT_FAILED_AT_FORMAT


def _utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


def format_backtrace(exc: BaseException) -> list[str]:
    """Render an exception's traceback as ``file:line:in name`` frames."""
    return [
        f"{frame.filename}:{frame.lineno}:in {frame.name}"
        for frame in traceback.extract_tb(exc.__traceback__)
    ]


@dataclass(frozen=True)
class FailureEvent:
    """
    A single failed job attempt, as reported by the job queue.

    Built fresh for every failure and never persisted as a whole. The payload
    is the queue's job descriptor (``{"class": ..., "args": [...]}``) and is
    treated as read-only.
    """

    payload: dict[str, Any]
    exception_kind: str
    exception_message: str
    backtrace: list[str] = field(default_factory=list)
    worker_identity: str = ""
    queue_name: str = ""
    failed_at: datetime = field(default_factory=_utc_now)

    @property
    def job_class(self) -> Any:
        """Class identifier from the payload (unvalidated)."""
        return self.payload.get("class")

    @property
    def job_args(self) -> Any:
        """Positional job arguments from the payload (unvalidated)."""
        return self.payload.get("args", [])

    @property
    def job_kwargs(self) -> Any:
        """Keyword job arguments from the payload (unvalidated)."""
        return self.payload.get("kwargs", {})

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        payload: dict[str, Any],
        worker: str = "",
        queue: str = "",
    ) -> FailureEvent:
        """Build an event from a live exception raised by a job."""
        return cls(
            payload=payload,
            exception_kind=type(exc).__name__,
            exception_message=str(exc),
            backtrace=format_backtrace(exc),
            worker_identity=worker,
            queue_name=queue,
        )


class FailureSnapshot(BaseModel):
    """
    Serialized form of a suppressed failure.

    Stored as JSON under ``failure_key(tracking_key)``; dashboards parse it
    with ``FailureSnapshot.model_validate_json``.
    """

    failed_at: str
    payload: dict[str, Any]
    exception: str
    error: str
    backtrace: list[str] = Field(default_factory=list)
    worker: str
    queue: str

    @classmethod
    def from_event(
        cls,
        event: FailureEvent,
        *,
        failed_at_format: str = DEFAULT_FAILED_AT_FORMAT,
    ) -> FailureSnapshot:
        return cls(
            failed_at=event.failed_at.strftime(failed_at_format),
            payload=event.payload,
            exception=event.exception_kind,
            error=event.exception_message,
            backtrace=list(event.backtrace),
            worker=event.worker_identity,
            queue=event.queue_name,
        )

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json()


__all__ = ["FailureEvent", "FailureSnapshot", "format_backtrace"]
