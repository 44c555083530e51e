"""Base failure backend abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod

from retrymute.models import FailureEvent


class FailureBackend(ABC):
    """
    A sink that records job failures (logs, dead-letter streams, alerting).

    Backends must let delivery errors propagate; callers decide what to do
    with them.
    """

    @abstractmethod
    async def save(self, event: FailureEvent) -> None:
        """Record a failure."""
        ...
