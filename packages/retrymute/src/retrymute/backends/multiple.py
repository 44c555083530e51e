"""Fan-out of a failure to an ordered set of backends."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from retrymute.backends.base import FailureBackend
from retrymute.models import FailureEvent

logger = logging.getLogger(__name__)


class MultipleBackend(FailureBackend):
    """
    Delivers every failure to each backend in registration order.

    The backend list is fixed at construction. A backend that raises stops the
    fan-out and the error propagates to the caller.
    """

    def __init__(self, backends: Iterable[FailureBackend] = ()) -> None:
        self._backends: tuple[FailureBackend, ...] = tuple(backends)

    @property
    def backends(self) -> tuple[FailureBackend, ...]:
        return self._backends

    def __len__(self) -> int:
        return len(self._backends)

    async def save(self, event: FailureEvent) -> None:
        for backend in self._backends:
            await backend.save(event)
        logger.debug(
            f"Delivered {event.exception_kind} failure to "
            f"{len(self._backends)} backend(s)"
        )
