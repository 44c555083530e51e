"""retrymute - retry-aware failure routing for background job queues."""

from retrymute._version import __version__
from retrymute.backends import (
    FailureBackend,
    LoggingBackend,
    MultipleBackend,
    RedisStreamBackend,
    WebhookBackend,
)
from retrymute.engine import (
    Decision,
    JobIntrospector,
    ProbeOutcome,
    ProbeResult,
    RetryCapability,
    RetrySuppressionBackend,
    SnapshotStore,
    connect_redis,
)
from retrymute.jobs import JobRegistry, JobResolutionError, RetryableJob
from retrymute.keys import FAILURE_KEY_PREFIX, failure_key, retry_tracking_key
from retrymute.models import FailureEvent, FailureSnapshot

__all__ = [
    "__version__",
    # Keys
    "FAILURE_KEY_PREFIX",
    "failure_key",
    "retry_tracking_key",
    # Models
    "FailureEvent",
    "FailureSnapshot",
    # Jobs
    "JobRegistry",
    "JobResolutionError",
    "RetryableJob",
    # Engine
    "Decision",
    "JobIntrospector",
    "ProbeOutcome",
    "ProbeResult",
    "RetryCapability",
    "RetrySuppressionBackend",
    "SnapshotStore",
    "connect_redis",
    # Backends
    "FailureBackend",
    "LoggingBackend",
    "MultipleBackend",
    "RedisStreamBackend",
    "WebhookBackend",
]
