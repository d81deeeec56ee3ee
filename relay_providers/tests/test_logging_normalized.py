"""Focused tests for relay_providers.base.logging.

Covers:
- _parse_level string parsing
- normalized_log_event emits required keys and mirrors error codes
- loggers live under the shared ``relay`` tree
"""
from __future__ import annotations

import json
import logging

from relay_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    LogContext,
    _parse_level,  # type: ignore[attr-defined]
    get_logger,
    log_event,
    normalized_log_event,
)


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []
        self.levels: list[int] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.messages.append(record.getMessage())
        self.levels.append(record.levelno)


def _capture(name: str):
    logger = get_logger(name, json_mode=False)
    handler = _ListHandler()
    logger.handlers[:] = [handler]
    return logger, handler


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_logger_names_are_prefixed():
    assert get_logger("anthropic").name == "relay.anthropic"  # nosec B101
    assert get_logger("relay.gemini").name == "relay.gemini"  # nosec B101
    assert get_logger().propagate is False  # nosec B101


def test_normalized_log_event_emits_required_keys_and_code_alias():
    logger, handler = _capture("providers.test.logging")
    ctx = LogContext(provider="p", model="m", request_id="task-1")
    normalized_log_event(
        logger,
        "stream.error",
        ctx,
        phase="finalize",
        attempt=None,
        error_code="timeout",
        emitted=3,
        tokens={"prompt": 10, "completion": 5},
        total_duration_ms=12.3,
    )
    payload = json.loads(handler.messages[-1])
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert payload["code"] == "timeout" and payload["error_code"] == "timeout"  # nosec B101
    assert payload["provider"] == "p" and payload["request_id"] == "task-1"  # nosec B101
    assert payload["total_duration_ms"] == 12.3  # nosec B101
    assert handler.levels[-1] == logging.WARNING  # nosec B101


def test_normalized_log_event_without_error_omits_code():
    logger, handler = _capture("providers.test.logging.ok")
    normalized_log_event(logger, "stream.end", None, phase="finalize", tokens=[("prompt", 1)], ignored=None)
    payload = json.loads(handler.messages[-1])
    assert "error_code" not in payload and "code" not in payload  # nosec B101
    assert payload["tokens"] == {"prompt": 1}  # nosec B101
    assert payload["attempt"] is None and "ignored" not in payload  # nosec B101
    assert handler.levels[-1] == logging.INFO  # nosec B101


def test_log_event_drops_none_fields():
    logger, handler = _capture("providers.test.logging.plain")
    log_event(logger, "catalog.fetched", LogContext(provider="x", extra={"region": "eu"}), count=2, error=None)
    payload = json.loads(handler.messages[-1])
    assert payload == {"event": "catalog.fetched", "provider": "x", "region": "eu", "count": 2}  # nosec B101
