"""Backend that POSTs failures to an HTTP webhook."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx

from retrymute.backends.base import FailureBackend
from retrymute.config import get_settings
from retrymute.models import FailureEvent


class WebhookBackend(FailureBackend):
    """
    Sends each failure as a JSON document to a webhook (Slack relay, pager, ...).

    Non-2xx responses raise ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        timeout_seconds: float | None = None,
        source: str = "retrymute",
    ) -> None:
        settings = get_settings()
        self._url = url or settings.webhook_url
        if not self._url:
            raise ValueError("webhook url must be configured")
        timeout = (
            settings.webhook_timeout_seconds
            if timeout_seconds is None
            else timeout_seconds
        )
        self._timeout = max(0.1, timeout)
        self._source = source

    def build_payload(self, event: FailureEvent) -> dict[str, Any]:
        return {
            "source": self._source,
            "at": datetime.now(UTC).isoformat(),
            "failure": {
                "failed_at": event.failed_at.isoformat(),
                "payload": event.payload,
                "exception": event.exception_kind,
                "error": event.exception_message,
                "backtrace": list(event.backtrace),
                "worker": event.worker_identity,
                "queue": event.queue_name,
            },
        }

    async def save(self, event: FailureEvent) -> None:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(self._url, json=self.build_payload(event))
            response.raise_for_status()
