"""Failure backends."""

from retrymute.backends.base import FailureBackend
from retrymute.backends.logger import LoggingBackend
from retrymute.backends.multiple import MultipleBackend
from retrymute.backends.redis_stream import RedisStreamBackend
from retrymute.backends.webhook import WebhookBackend

__all__ = [
    "FailureBackend",
    "LoggingBackend",
    "MultipleBackend",
    "RedisStreamBackend",
    "WebhookBackend",
]
