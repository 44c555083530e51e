"""Backend that writes failures to the standard logging system."""

from __future__ import annotations

import logging

from retrymute.backends.base import FailureBackend
from retrymute.models import FailureEvent

logger = logging.getLogger(__name__)


class LoggingBackend(FailureBackend):
    """Logs each failure as a single record, backtrace included."""

    def __init__(
        self, *, log: logging.Logger | None = None, level: int = logging.ERROR
    ) -> None:
        self._log = log or logger
        self._level = level

    async def save(self, event: FailureEvent) -> None:
        lines = [
            f"Job {event.job_class} failed on queue {event.queue_name or '-'} "
            f"(worker {event.worker_identity or '-'}): "
            f"{event.exception_kind}: {event.exception_message}"
        ]
        lines.extend(f"    {frame}" for frame in event.backtrace)
        self._log.log(
            self._level,
            "\n".join(lines),
            extra={"job_class": event.job_class, "queue": event.queue_name},
        )
