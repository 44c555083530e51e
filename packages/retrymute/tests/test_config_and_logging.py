from __future__ import annotations

import json
import logging
import sys

import pytest
from retrymute.config import DEFAULT_FAILED_AT_FORMAT, LogFormat, get_settings
from retrymute.logging import JSONFormatter, configure_logging


def test_settings_defaults() -> None:
    settings = get_settings()

    assert settings.redis_url == "redis://localhost:6379/0"
    assert settings.failed_at_format == DEFAULT_FAILED_AT_FORMAT == "%Y/%m/%d %H:%M:%S"
    assert settings.log_format == LogFormat.TEXT
    assert settings.webhook_url is None
    assert settings.dead_letter_stream_maxlen == 10_000


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYMUTE_REDIS_URL", "redis://cache:6380/2")
    monkeypatch.setenv("RETRYMUTE_LOG_FORMAT", "json")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.redis_url == "redis://cache:6380/2"
    assert settings.log_format == LogFormat.JSON
    assert get_settings() is settings


def test_json_formatter_includes_error_and_tracking_key() -> None:
    try:
        raise ValueError("bad payload")
    except ValueError:
        record = logging.getLogger("retrymute.test").makeRecord(
            "retrymute.test",
            logging.WARNING,
            __file__,
            1,
            "snapshot skipped",
            (),
            exc_info=sys.exc_info(),
            extra={"tracking_key": "retry:Foo:1"},
        )

    entry = json.loads(JSONFormatter().format(record))

    assert entry["level"] == "WARNING"
    assert entry["logger"] == "retrymute.test"
    assert entry["message"] == "snapshot skipped"
    assert entry["tracking_key"] == "retry:Foo:1"
    assert entry["error"]["type"] == "ValueError"
    assert entry["error"]["message"] == "bad payload"


@pytest.mark.parametrize(
    ("log_format", "formatter_type"),
    [("json", JSONFormatter), ("text", logging.Formatter)],
)
def test_configure_logging_replaces_root_handlers(
    log_format: str, formatter_type: type[logging.Formatter]
) -> None:
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    try:
        configure_logging(log_format=log_format, debug=True)

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert type(root.handlers[0].formatter) is formatter_type
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
