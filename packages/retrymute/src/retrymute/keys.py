"""Redis key helpers shared by the suppression engine and dashboards."""

import re
from collections.abc import Iterable
from typing import Any

# Prefix partitioning snapshot keys from the retry policy's tracking keys.
FAILURE_KEY_PREFIX = "failure-"

# Prefix used by the default tracking key of RetryableJob.
RETRY_KEY_PREFIX = "retry"

_WHITESPACE_RE = re.compile(r"\s")


def failure_key(tracking_key: str) -> str:
    """Redis key holding the latest suppressed failure for a tracking key."""
    return FAILURE_KEY_PREFIX + tracking_key


def retry_tracking_key(job_name: str, args: Iterable[Any] = ()) -> str:
    """Default tracking key for a job instance.

    The key is deterministic in (job name, args) and contains no whitespace,
    e.g. ``retry:billing.Charge:42-eur``.
    """
    identifier = "-".join(str(arg) for arg in args)
    key = ":".join([RETRY_KEY_PREFIX, job_name, identifier])
    return _WHITESPACE_RE.sub("", key)
