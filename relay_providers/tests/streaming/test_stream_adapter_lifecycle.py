"""Lifecycle tests for ``BaseStreamingAdapter``.

Uses an in-memory starter and translator; no vendor SDK is involved. Logging
is captured with a list handler attached to the adapter's child logger because
the ``relay`` base logger does not propagate to the root.
"""
from __future__ import annotations

import json
import logging
from typing import List

import pytest

from relay_providers.base.cancellation import CancellationToken
from relay_providers.base.errors import ErrorCode, ProviderError
from relay_providers.base.logging import LogContext, get_logger
from relay_providers.base.streaming import BaseStreamingAdapter, TextEvent, UsageEvent, run_event_stream


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - trivial
        self.records.append(record)

    def events(self) -> List[dict]:
        return [json.loads(r.getMessage()) for r in self.records]


class _ClosingStream:
    """Iterable stream that records ``close`` calls."""

    def __init__(self, chunks) -> None:
        self._chunks = list(chunks)
        self.closed = 0

    def __iter__(self):
        return iter(self._chunks)

    def close(self) -> None:
        self.closed += 1


@pytest.fixture()
def logger_with_handler():
    logger = get_logger("relay.tests.adapter")
    handler = _ListHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield logger, handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def _text_translator(chunk):
    yield TextEvent(text=chunk)


def _adapter(logger, starter, **kwargs):
    return BaseStreamingAdapter(
        ctx=LogContext(provider="fake", model="fake-1"),
        provider_name="fake",
        label="Fake",
        model="fake-1",
        starter=starter,
        translator=kwargs.pop("translator", _text_translator),
        logger=logger,
        **kwargs,
    )


def test_events_flow_then_finalizer_runs(logger_with_handler):
    logger, handler = logger_with_handler
    stream = _ClosingStream(["a", "b"])

    def finalizer():
        yield UsageEvent(input_tokens=3, output_tokens=2)
        yield UsageEvent(total_cost=0.01)

    adapter = _adapter(logger, lambda: stream, finalizer=finalizer)
    events = list(adapter.run())

    assert [type(e).__name__ for e in events] == ["TextEvent", "TextEvent", "UsageEvent", "UsageEvent"]  # nosec B101
    assert adapter.metrics.emitted == 4  # nosec B101
    assert adapter.metrics.input_tokens == 3 and adapter.metrics.output_tokens == 2  # nosec B101
    assert adapter.metrics.total_cost == 0.01  # nosec B101
    assert adapter.metrics.time_to_first_token_ms is not None  # nosec B101
    assert stream.closed == 1  # nosec B101

    names = [e["event"] for e in handler.events()]
    assert names == ["stream.start", "stream.end"]  # nosec B101
    end = handler.events()[-1]
    assert end["tokens"]["total"] == 5 and end["emitted"] is True  # nosec B101


def test_translator_failure_is_wrapped(logger_with_handler):
    logger, handler = logger_with_handler

    def translator(chunk):
        raise RuntimeError("rate limit reached")
        yield  # pragma: no cover

    with pytest.raises(ProviderError) as info:
        list(_adapter(logger, lambda: iter(["x"]), translator=translator).run())

    err = info.value
    assert err.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert err.message == "Fake completion error: rate limit reached"  # nosec B101
    assert err.provider == "fake" and err.model == "fake-1"  # nosec B101
    assert err.retryable is True  # nosec B101
    assert isinstance(err.raw, RuntimeError)  # nosec B101
    last = handler.events()[-1]
    assert last["event"] == "stream.error" and last["error_code"] == "rate_limit"  # nosec B101


def test_starter_failure_is_wrapped(logger_with_handler):
    logger, _ = logger_with_handler

    class _Status(Exception):
        status_code = 401

    def starter():
        raise _Status("bad key")

    with pytest.raises(ProviderError) as info:
        list(_adapter(logger, starter).run())
    assert info.value.code is ErrorCode.AUTH  # nosec B101
    assert info.value.message.startswith("Fake authentication failed")  # nosec B101
    assert info.value.status == 401  # nosec B101


def test_provider_error_passes_through_unchanged(logger_with_handler):
    logger, _ = logger_with_handler
    original = ProviderError(code=ErrorCode.VALIDATION, message="Fake API Error: bad", provider="fake")

    def translator(chunk):
        raise original
        yield  # pragma: no cover

    with pytest.raises(ProviderError) as info:
        list(_adapter(logger, lambda: iter(["x"]), translator=translator).run())
    assert info.value is original  # nosec B101


def test_custom_error_wrapper_is_used(logger_with_handler):
    logger, _ = logger_with_handler
    custom = ProviderError(code=ErrorCode.INTERNAL, message="custom", provider="fake")

    def starter():
        raise ValueError("x")

    with pytest.raises(ProviderError) as info:
        list(_adapter(logger, starter, error_wrapper=lambda exc: custom).run())
    assert info.value is custom  # nosec B101


def test_pre_cancelled_token_yields_nothing(logger_with_handler):
    logger, handler = logger_with_handler
    token = CancellationToken()
    token.cancel("stop")
    started = []

    def starter():
        started.append(True)
        return iter(["a"])

    assert list(_adapter(logger, starter, cancellation_token=token).run()) == []  # nosec B101
    assert started == []  # nosec B101
    assert handler.events()[-1]["event"] == "stream.cancelled"  # nosec B101


def test_mid_stream_cancel_stops_without_error(logger_with_handler):
    logger, handler = logger_with_handler
    token = CancellationToken()
    stream = _ClosingStream(["a", "b", "c"])
    finalized = []

    def finalizer():
        finalized.append(True)
        return iter(())

    out = []
    for evt in _adapter(logger, lambda: stream, cancellation_token=token, finalizer=finalizer).run():
        out.append(evt)
        token.cancel("user")

    assert out == [TextEvent("a")]  # nosec B101
    assert finalized == []  # nosec B101
    assert stream.closed >= 1  # nosec B101
    assert handler.events()[-1]["event"] == "stream.cancelled"  # nosec B101


def test_transport_error_after_cancel_is_swallowed(logger_with_handler):
    logger, _ = logger_with_handler
    token = CancellationToken()

    def chunks():
        yield "a"
        token.cancel("abort")
        raise OSError("connection closed")

    assert list(_adapter(logger, chunks, cancellation_token=token).run()) == [TextEvent("a")]  # nosec B101


def test_run_event_stream_shortcut(logger_with_handler):
    logger, _ = logger_with_handler
    events = list(
        run_event_stream(
            ctx=LogContext(provider="fake", model="m"),
            provider_name="fake",
            label="Fake",
            model="m",
            starter=lambda: iter(["only"]),
            translator=_text_translator,
            logger=logger,
        )
    )
    assert events == [TextEvent("only")]  # nosec B101
