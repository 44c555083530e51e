"""retrymute configuration with sensible defaults for development."""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FAILED_AT_FORMAT = "%Y/%m/%d %H:%M:%S"


class LogFormat(StrEnum):
    """Output format for the root log handler."""

    TEXT = "text"
    JSON = "json"


class Settings(BaseSettings):
    """
    retrymute configuration.

    All settings can be overridden via environment variables with RETRYMUTE_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYMUTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    log_format: LogFormat = LogFormat.TEXT

    # Redis shared with the retry policy (tracking keys) and dashboards (snapshots)
    redis_url: str = "redis://localhost:6379/0"

    # strftime format of the snapshot's failed_at field
    failed_at_format: str = DEFAULT_FAILED_AT_FORMAT

    # RedisStreamBackend defaults
    dead_letter_stream: str = "retrymute:failures"
    dead_letter_stream_maxlen: int = 10_000

    # WebhookBackend defaults
    webhook_url: str | None = None
    webhook_timeout_seconds: float = 5.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
