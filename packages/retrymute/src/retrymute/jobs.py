"""Job classes and the registry used to resolve them from failure payloads."""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import Any, ClassVar, TypeVar

from retrymute.keys import retry_tracking_key

JobT = TypeVar("JobT", bound=type)


class JobResolutionError(LookupError):
    """Raised when a payload's class identifier cannot be resolved."""


class RetryableJob:
    """
    Base class for jobs that expose retry introspection.

    Inheriting from this class is how a job declares that its failures may be
    retried by the retry policy. The policy owns the tracking key in Redis;
    the suppression engine only reads whether it exists.

    Example:
        class ChargeCard(RetryableJob):
            retry_delay = 30

            def perform(self, order_id): ...
    """

    # Seconds between attempts; <= 0 means an immediate retry.
    retry_delay: ClassVar[float] = 0

    @classmethod
    def job_name(cls) -> str:
        """Stable name used in the default tracking key."""
        return f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def retry_tracking_key(cls, *args: Any, **kwargs: Any) -> str:
        """Tracking key of the job instance identified by ``args``."""
        return retry_tracking_key(cls.job_name(), args)

    @classmethod
    def current_retry_delay(cls) -> float:
        """Delay in seconds before the next attempt."""
        return float(cls.retry_delay)


class JobRegistry:
    """
    Explicit mapping from payload class identifiers to job classes.

    Names that are not registered fall back to an importable dotted path
    (``pkg.module.Class`` or ``pkg.module:Class``). Dashed class names such
    as ``charge-card`` are looked up as ``ChargeCard``.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, type] = {}

    def register(
        self, job: JobT | None = None, *, name: str | None = None
    ) -> JobT | Callable[[JobT], JobT]:
        """Register a job class, directly or as a decorator."""

        def decorator(cls: JobT) -> JobT:
            key = name or cls.__name__
            existing = self._jobs.get(key)
            if existing is not None and existing is not cls:
                raise ValueError(f"Job name '{key}' is already registered")
            self._jobs[key] = cls
            return cls

        if job is not None:
            return decorator(job)
        return decorator

    def __contains__(self, name: object) -> bool:
        return name in self._jobs

    @property
    def names(self) -> list[str]:
        return sorted(self._jobs)

    def resolve(self, name: str) -> type:
        """Return the job class for ``name``."""
        if not isinstance(name, str) or not name.strip():
            raise JobResolutionError(f"Invalid job class identifier: {name!r}")

        if "-" in name:
            name = classify(name)

        if name in self._jobs:
            return self._jobs[name]

        return import_job_class(name)


def classify(dashed: str) -> str:
    """Turn a dashed class name into CamelCase, e.g. ``charge-card`` -> ``ChargeCard``.

    Only the class segment after the last ``.`` or ``:`` is rewritten.
    """
    cut = max(dashed.rfind("."), dashed.rfind(":")) + 1
    head, tail = dashed[:cut], dashed[cut:]
    return head + "".join(part[:1].upper() + part[1:] for part in tail.split("-"))


def import_job_class(path: str) -> type:
    """Import ``pkg.module.Class`` / ``pkg.module:Class`` and return the class."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")

    if not module_name or not attr_path:
        raise JobResolutionError(f"Job class '{path}' is not an importable path")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise JobResolutionError(
            f"Cannot import module '{module_name}': {exc}"
        ) from exc

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise JobResolutionError(
                f"Module '{module_name}' has no job class '{attr_path}'"
            ) from exc

    if not isinstance(obj, type):
        raise JobResolutionError(f"'{path}' does not name a class")
    return obj


__all__ = [
    "JobRegistry",
    "JobResolutionError",
    "RetryableJob",
    "classify",
    "import_job_class",
]
