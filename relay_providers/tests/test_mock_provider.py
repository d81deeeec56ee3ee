"""Tests for the fixture-backed mock handler."""
from __future__ import annotations

import json

import pytest

from relay_providers.base.errors import ErrorCode, ProviderError
from relay_providers.base.streaming import (
    ReasoningEvent,
    StreamController,
    TextEvent,
    ToolCallEvent,
    ToolCallPartialEvent,
    UsageEvent,
)
from relay_providers.mock.client import MockHandler, event_from_dict, load_fixture_catalog


class TestMockStreaming:
    """Event streams replayed from the bundled fixture catalog."""

    def test_ping_streams_text_then_usage_then_cost(self, user_turn):
        events = list(MockHandler().create_message("sys", user_turn("ping")))
        assert events == [  # nosec B101
            TextEvent("pong"),
            UsageEvent(input_tokens=1, output_tokens=1),
            UsageEvent(total_cost=0.0),
        ]

    def test_reasoning_precedes_text(self, user_turn):
        events = list(MockHandler().create_message("sys", user_turn("think")))
        assert isinstance(events[0], ReasoningEvent) and isinstance(events[1], TextEvent)  # nosec B101
        assert events[-2] == UsageEvent(input_tokens=5, output_tokens=7)  # nosec B101

    def test_tool_call_fragments_are_completed(self, user_turn):
        events = list(MockHandler().create_message("sys", user_turn("read a file")))
        partials = [e for e in events if isinstance(e, ToolCallPartialEvent)]
        calls = [e for e in events if isinstance(e, ToolCallEvent)]
        assert len(partials) == 3 and len(calls) == 1  # nosec B101
        assert events.index(calls[0]) > events.index(partials[-1])  # nosec B101
        assert calls[0].id == "call_1" and calls[0].name == "read_file"  # nosec B101
        assert json.loads(calls[0].arguments) == {"path": "README.md"}  # nosec B101

    def test_fallback_text_is_chunked(self, user_turn):
        events = list(MockHandler().create_message("sys", user_turn("anything else")))
        texts = [e.text for e in events if isinstance(e, TextEvent)]
        assert "".join(texts) == "This is a deterministic mock response."  # nosec B101
        assert all(len(t) <= 16 for t in texts) and len(texts) > 1  # nosec B101

    def test_block_content_matches_fixture_key(self):
        messages = [{"role": "user", "content": [{"type": "text", "text": "PING"}]}]
        events = list(MockHandler().create_message("sys", messages))
        assert events[0] == TextEvent("pong")  # nosec B101

    def test_exactly_one_cost_event_and_it_is_last_usage(self, user_turn):
        events = list(MockHandler().create_message("sys", user_turn("think")))
        usage = [e for e in events if isinstance(e, UsageEvent)]
        assert [u.total_cost is not None for u in usage] == [False, True]  # nosec B101


class TestMockErrors:
    """Error fixtures surface as classified provider errors."""

    def test_rate_limit_fixture_raises(self, user_turn):
        with pytest.raises(ProviderError) as info:
            list(MockHandler().create_message("sys", user_turn("rate limit")))
        assert info.value.code is ErrorCode.RATE_LIMIT  # nosec B101
        assert info.value.status == 429 and info.value.retryable  # nosec B101
        assert info.value.message == "Too many requests"  # nosec B101

    def test_complete_prompt_error(self, relay_events):
        with pytest.raises(ProviderError):
            MockHandler().complete_prompt("rate limit")
        assert relay_events("complete_prompt.error")[0]["provider"] == "mock"  # nosec B101

    def test_unknown_event_type_rejected(self):
        with pytest.raises(ValueError):
            event_from_dict({"type": "telepathy"})


class TestMockMisc:
    def test_complete_prompt(self):
        assert MockHandler().complete_prompt("ping") == "pong"  # nosec B101

    def test_model_id_echo(self):
        from relay_providers.base.models import ProviderSettings

        assert MockHandler().get_model().id == "mock-model"  # nosec B101
        assert MockHandler(ProviderSettings(model_id="m2")).get_model().id == "m2"  # nosec B101

    def test_injected_catalog_and_estimated_usage(self, user_turn):
        catalog = {"providers": {"*": {"model": "tiny", "responses": {"*": {"text": "ok"}}}}}
        handler = MockHandler(catalog=catalog)
        events = list(handler.create_message("abcd", user_turn("efgh")))
        assert handler.get_model().id == "tiny"  # nosec B101
        assert events[1] == UsageEvent(input_tokens=2, output_tokens=410)  # nosec B101

    def test_event_from_dict_tool_call_serializes_arguments(self):
        evt = event_from_dict({"type": "tool_call", "id": "c", "name": "n", "arguments": {"a": 1}})
        assert evt == ToolCallEvent(id="c", name="n", arguments='{"a": 1}')  # nosec B101

    def test_bundled_catalog_shape(self):
        catalog = load_fixture_catalog()
        assert "ping" in catalog["providers"]["*"]["responses"]  # nosec B101

    def test_stream_controller_cancel(self, user_turn):
        ctl = StreamController(MockHandler(), "sys", user_turn("anything else"))
        seen = []
        for evt in ctl:
            seen.append(evt)
            ctl.cancel("stop")
        assert len(seen) == 1 and ctl.cancelled and ctl.final_usage is None  # nosec B101
