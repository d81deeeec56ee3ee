"""OpenRouterHandler request shaping, embedded errors and reasoning details."""
from __future__ import annotations

import pytest

from relay_providers.base.catalog import ModelCatalogCache
from relay_providers.base.errors import ErrorCode, ProviderError
from relay_providers.base.models import ProviderSettings
from relay_providers.base.streaming import ReasoningEvent, TextEvent, UsageEvent
from relay_providers.openrouter.client import OpenRouterHandler, endpoints_key, openrouter_usage_cost
from relay_providers.openrouter.helpers import (
    GEMINI_SKIP_SIGNATURE,
    add_anthropic_cache_breakpoints,
    add_gemini_cache_breakpoints,
    attach_reasoning_details,
    inject_gemini_signature_placeholders,
    provider_routing,
)
from relay_providers.openrouter.models import OPENROUTER_DEFAULT_MODEL_INFO
from relay_providers.openrouter.stream_helpers import ReasoningDetailsAccumulator

_EPHEMERAL = {"type": "ephemeral"}

_LISTING = {
    "deepseek/deepseek-r1": {"context_window": 163_840, "max_tokens": 32_768},
    "google/gemini-2.5-pro": {
        "context_window": 1_048_576,
        "max_tokens": 65_536,
        "supports_native_tools": True,
        "supports_prompt_cache": True,
    },
    "openai/gpt-4o-mini": {"context_window": 128_000, "max_tokens": 16_384},
}


def _catalog(extra=None) -> ModelCatalogCache:
    fetchers = {"openrouter": lambda: _LISTING}
    fetchers.update(extra or {})
    return ModelCatalogCache(fetchers)


def _handler(client, **settings):
    return OpenRouterHandler(ProviderSettings(**settings), client=client, catalog=_catalog())


def test_default_model_request(fake_openai_client, chat_chunk, user_turn):
    client = fake_openai_client([chat_chunk("ok")])
    handler = _handler(client)
    list(handler.create_message("sys", user_turn("hi")))
    call = client.calls[0]
    assert call["model"] == "anthropic/claude-sonnet-4.5"  # nosec B101
    assert call["max_tokens"] == 8192 and call["temperature"] == 0.0  # nosec B101
    assert call["transforms"] == ["middle-out"]  # nosec B101
    assert "provider" not in call and "reasoning" not in call  # nosec B101
    assert call["extra_headers"] == {"x-anthropic-beta": "fine-grained-tool-streaming-2025-05-14"}  # nosec B101
    system, user = call["messages"]
    assert system["content"] == [{"type": "text", "text": "sys", "cache_control": _EPHEMERAL}]  # nosec B101
    assert user["content"] == [{"type": "text", "text": "hi", "cache_control": _EPHEMERAL}]  # nosec B101


def test_budget_reasoning_forces_temperature(fake_openai_client, user_turn):
    handler = _handler(
        fake_openai_client(), enable_reasoning_effort=True, model_max_tokens=16_000, model_max_thinking_tokens=4096
    )
    params = handler.build_params(handler.get_model(), "sys", user_turn("hi"))
    assert params["reasoning"] == {"max_tokens": 4096}  # nosec B101
    assert params["temperature"] == 1.0 and params["max_tokens"] == 16_000  # nosec B101


def test_middle_out_can_be_disabled(fake_openai_client, user_turn):
    handler = _handler(fake_openai_client(), openrouter_use_middle_out=False)
    assert "transforms" not in handler.build_params(handler.get_model(), "sys", user_turn("hi"))  # nosec B101


def test_r1_family_shaping(fake_openai_client, chat_chunk, user_turn):
    client = fake_openai_client([chat_chunk("x")])
    handler = _handler(client, model_id="deepseek/deepseek-r1")
    list(handler.create_message("sys", user_turn("hi")))
    call = client.calls[0]
    assert call["messages"] == [{"role": "user", "content": "sys\nhi"}]  # nosec B101
    assert call["top_p"] == 0.95 and call["temperature"] == 0.6  # nosec B101
    assert "extra_headers" not in call  # nosec B101


def test_gemini_pro_excludes_reasoning_by_default(fake_openai_client, user_turn):
    handler = _handler(fake_openai_client(), model_id="google/gemini-2.5-pro")
    handler.fetch_model()
    params = handler.build_params(handler.get_model(), "sys", user_turn("hi"))
    assert params["reasoning"] == {"exclude": True}  # nosec B101
    assert params["messages"][0]["content"][0]["cache_control"] == _EPHEMERAL  # nosec B101


def test_unknown_model_keeps_id(fake_openai_client):
    selection = _handler(fake_openai_client(), model_id="vendor/brand-new").fetch_model()
    assert selection.id == "vendor/brand-new" and selection.info == OPENROUTER_DEFAULT_MODEL_INFO  # nosec B101


def test_provider_pinning_uses_endpoint_descriptor(fake_openai_client, user_turn):
    model_id = "openai/gpt-4o-mini"
    endpoints = {endpoints_key(model_id): lambda: {"Azure": {"context_window": 64_000, "max_tokens": 4_000}}}
    handler = OpenRouterHandler(
        ProviderSettings(model_id=model_id, openrouter_specific_provider="Azure"),
        client=fake_openai_client(),
        catalog=_catalog(endpoints),
    )
    selection = handler.fetch_model()
    assert selection.info.context_window == 64_000  # nosec B101
    params = handler.build_params(selection, "sys", user_turn("hi"))
    assert params["provider"] == {"order": ["Azure"], "only": ["Azure"], "allow_fallbacks": False}  # nosec B101
    assert params["max_tokens"] == 4_000  # nosec B101


def test_default_provider_sentinel_means_no_pinning():
    assert provider_routing("[default]") is None  # nosec B101
    assert provider_routing(None) is None  # nosec B101


def test_stream_reasoning_details_and_cost(fake_openai_client, chat_chunk, user_turn):
    chunks = [
        chat_chunk(reasoning_details=[{"type": "reasoning.text", "text": "Think", "index": 0}]),
        chat_chunk(reasoning_details=[{"type": "reasoning.text", "text": "ing", "index": 0, "signature": "sig"}]),
        chat_chunk(reasoning_details=[{"type": "reasoning.encrypted", "data": "opaque", "index": 1}]),
        {"choices": [{"index": 0, "delta": {"reasoning": "legacy"}, "finish_reason": None}]},
        chat_chunk("Done"),
        chat_chunk(
            usage={
                "prompt_tokens": 12,
                "completion_tokens": 3,
                "cost": 0.01,
                "cost_details": {"upstream_inference_cost": 0.002},
            }
        ),
    ]
    handler = _handler(fake_openai_client(chunks), model_id="openai/gpt-4o-mini")
    events = list(handler.create_message("sys", user_turn("hi")))

    assert events[:4] == [  # nosec B101
        ReasoningEvent("Think"),
        ReasoningEvent("ing"),
        ReasoningEvent("legacy"),
        TextEvent("Done"),
    ]
    assert events[4] == UsageEvent(input_tokens=12, output_tokens=3)  # nosec B101
    assert events[5].total_cost == pytest.approx(0.012)  # nosec B101
    assert handler.get_reasoning_details() == [  # nosec B101
        {"type": "reasoning.text", "index": 0, "text": "Thinking", "signature": "sig"},
        {"type": "reasoning.encrypted", "index": 1, "data": "opaque"},
    ]


def test_reasoning_details_reset_per_stream(fake_openai_client, chat_chunk, user_turn):
    handler = _handler(
        fake_openai_client([chat_chunk(reasoning_details=[{"type": "reasoning.text", "text": "a", "index": 0}])]),
        model_id="openai/gpt-4o-mini",
    )
    list(handler.create_message("sys", user_turn("hi")))
    assert handler.get_reasoning_details() is not None  # nosec B101
    handler._client = fake_openai_client([chat_chunk("plain")])
    list(handler.create_message("sys", user_turn("hi")))
    assert handler.get_reasoning_details() is None  # nosec B101


def test_embedded_error_chunk_raises(fake_openai_client, chat_chunk, user_turn):
    client = fake_openai_client([chat_chunk("partial"), {"error": {"code": 429, "message": "Rate limited"}}])
    seen = []
    with pytest.raises(ProviderError) as info:
        for evt in _handler(client).create_message("sys", user_turn("hi")):
            seen.append(evt)
    assert seen == [TextEvent("partial")]  # nosec B101
    assert info.value.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert info.value.message == "OpenRouter API Error 429: Rate limited"  # nosec B101
    assert info.value.status == 429  # nosec B101


def test_complete_prompt(fake_openai_client):
    client = fake_openai_client(response={"choices": [{"message": {"content": "short"}}]})
    assert _handler(client).complete_prompt("q") == "short"  # nosec B101
    call = client.calls[0]
    assert call["messages"] == [{"role": "user", "content": "q"}]  # nosec B101
    assert call["extra_headers"]["x-anthropic-beta"]  # nosec B101
    assert "stream" not in call  # nosec B101


def test_complete_prompt_error_payload(fake_openai_client):
    client = fake_openai_client(response={"error": {"code": "server_error", "message": "boom"}})
    with pytest.raises(ProviderError) as info:
        _handler(client).complete_prompt("q")
    assert info.value.message == "OpenRouter API Error server_error: boom"  # nosec B101
    assert info.value.status is None  # nosec B101


def test_usage_cost_without_raw_usage():
    assert openrouter_usage_cost(OPENROUTER_DEFAULT_MODEL_INFO, UsageEvent(), None) == 0.0  # nosec B101


class TestCacheBreakpoints:
    def test_anthropic_marks_system_and_last_two_user_turns(self):
        messages = [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "u1"},
            {"role": "assistant", "content": "a1"},
            {"role": "user", "content": "u2"},
            {"role": "assistant", "content": "a2"},
            {"role": "user", "content": [{"type": "text", "text": "u3"}, {"type": "image_url", "image_url": {"url": "x"}}]},
        ]
        out = add_anthropic_cache_breakpoints("sys", messages)
        assert out[0]["content"][0]["cache_control"] == _EPHEMERAL  # nosec B101
        assert out[1]["content"] == "u1"  # nosec B101
        assert out[3]["content"][0]["cache_control"] == _EPHEMERAL  # nosec B101
        assert out[5]["content"][0]["cache_control"] == _EPHEMERAL  # nosec B101
        assert "cache_control" not in out[5]["content"][1]  # nosec B101
        assert messages[1]["content"] == "u1" and messages[3]["content"] == "u2"  # nosec B101

    def test_gemini_marks_every_tenth_user_turn(self):
        messages = [{"role": "system", "content": "sys"}]
        for i in range(1, 21):
            messages.append({"role": "user", "content": f"u{i}"})
            messages.append({"role": "assistant", "content": f"a{i}"})
        out = add_gemini_cache_breakpoints("sys", messages)
        marked = [m["content"][0]["text"] for m in out[1:] if isinstance(m["content"], list)]
        assert marked == ["u10", "u20"]  # nosec B101


def test_signature_placeholders_for_foreign_tool_calls():
    messages = [
        {"role": "user", "content": "go"},
        {"role": "assistant", "content": None, "tool_calls": [{"id": "c1"}, {"id": "c2"}]},
        {
            "role": "assistant",
            "tool_calls": [{"id": "c3"}],
            "reasoning_details": [{"type": "reasoning.encrypted", "data": "real"}],
        },
    ]
    out = inject_gemini_signature_placeholders(messages)
    details = out[1]["reasoning_details"]
    assert [d["id"] for d in details] == ["c1", "c2"]  # nosec B101
    assert all(d["data"] == GEMINI_SKIP_SIGNATURE for d in details)  # nosec B101
    assert [d["index"] for d in details] == [0, 1]  # nosec B101
    assert out[2] is messages[2] and out[0] is messages[0]  # nosec B101


def test_reasoning_details_carried_to_assistant_turns():
    history = [
        {"role": "user", "content": "q"},
        {"role": "assistant", "content": "a", "reasoning_details": [{"type": "reasoning.text", "text": "r"}]},
    ]
    converted = [{"role": "user", "content": "q"}, {"role": "assistant", "content": "a"}]
    out = attach_reasoning_details(history, converted)
    assert out[1]["reasoning_details"] == [{"type": "reasoning.text", "text": "r"}]  # nosec B101


def test_accumulator_displays_summary_but_not_encrypted():
    acc = ReasoningDetailsAccumulator()
    assert acc.update({"type": "reasoning.summary", "summary": "sum"}) == "sum"  # nosec B101
    assert acc.update({"type": "reasoning.encrypted", "data": "x", "index": 1}) is None  # nosec B101
    assert len(acc) == 2  # nosec B101
