"""retrymute engine - failure routing and retry introspection."""

from retrymute.engine.introspection import (
    JobIntrospector,
    ProbeOutcome,
    ProbeResult,
    RetryCapability,
)
from retrymute.engine.store import SnapshotStore, connect_redis
from retrymute.engine.suppression import Decision, RetrySuppressionBackend

__all__ = [
    # Decision engine
    "Decision",
    "RetrySuppressionBackend",
    # Introspection
    "JobIntrospector",
    "ProbeOutcome",
    "ProbeResult",
    "RetryCapability",
    # Store
    "SnapshotStore",
    "connect_redis",
]
