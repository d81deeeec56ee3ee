"""MistralHandler over ``httpx.MockTransport`` server-sent events."""
from __future__ import annotations

import json

import httpx
import pytest

from relay_providers.base.errors import ErrorCode, ProviderError
from relay_providers.base.models import ProviderSettings
from relay_providers.base.streaming import ReasoningEvent, TextEvent, ToolCallEvent, UsageEvent
from relay_providers.mistral.client import MistralHandler, MistralStreamState, translate_mistral_chunk

TOOL = {"type": "function", "function": {"name": "ls", "description": "List", "parameters": {"type": "object"}}}


def _sse(*payloads) -> bytes:
    lines = [f"data: {json.dumps(p)}\n\n" for p in payloads]
    lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler), base_url="https://test")


def _recording(body: bytes, status: int = 200, content_type: str = "text/event-stream"):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, content=body, headers={"content-type": content_type})

    return handler, seen


def _mistral(client, **settings) -> MistralHandler:
    return MistralHandler(ProviderSettings(api_key="mk", **settings), client=client)


def test_missing_key_rejected():
    with pytest.raises(ProviderError) as info:
        MistralHandler()
    assert info.value.code is ErrorCode.AUTH  # nosec B101


def test_default_request_body(user_turn):
    handler = _mistral(None)
    selection = handler.get_model()
    body = handler.build_params(selection, "sys", user_turn("hi"), {"tools": [TOOL], "tool_choice": "auto"})
    assert selection.id == "codestral-latest"  # nosec B101
    assert body["messages"] == [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}]  # nosec B101
    assert body["temperature"] == 1.0 and body["stream"] is True  # nosec B101
    assert "max_tokens" not in body  # nosec B101
    assert body["tools"][0]["function"]["name"] == "ls" and body["tool_choice"] == "any"  # nosec B101


def test_max_tokens_opt_in(user_turn):
    handler = _mistral(None, include_max_tokens=True, model_id="mistral-small-latest")
    body = handler.build_params(handler.get_model(), "sys", user_turn("hi"))
    assert body["max_tokens"] == 32_000  # nosec B101


@pytest.mark.parametrize(
    "model_id, base_url, expected",
    [
        ("codestral-latest", None, "https://codestral.mistral.ai"),
        ("mistral-large-latest", None, "https://api.mistral.ai"),
        ("codestral-latest", "https://proxy.example", "https://proxy.example"),
    ],
)
def test_codestral_routing(model_id, base_url, expected):
    assert _mistral(None, base_url=base_url)._base_url(model_id) == expected  # nosec B101


def test_stream_translation_and_cost(user_turn):
    body = _sse(
        {"choices": [{"delta": {"content": [{"type": "thinking", "thinking": [{"type": "text", "text": "hmm"}]}]}}]},
        {"choices": [{"delta": {"content": "Hel"}}]},
        {"choices": [{"delta": {"content": [{"type": "text", "text": "lo"}]}}]},
        {"choices": [{"delta": {"tool_calls": [{"id": "t1", "function": {"name": "ls", "arguments": "{}"}}]}, "finish_reason": "tool_calls"}]},
        {"choices": [], "usage": {"prompt_tokens": 1000, "completion_tokens": 100}},
    )
    transport, seen = _recording(body)
    handler = _mistral(_client(transport), model_id="mistral-large-latest")
    out = list(handler.create_message("sys", user_turn("hi")))

    assert out[:3] == [ReasoningEvent("hmm"), TextEvent("Hel"), TextEvent("lo")]  # nosec B101
    assert out[4] == ToolCallEvent(id="t1", name="ls", arguments="{}")  # nosec B101
    assert out[5] == UsageEvent(input_tokens=1000, output_tokens=100)  # nosec B101
    assert out[6].total_cost == pytest.approx((2.0 * 1000 + 6.0 * 100) / 1_000_000)  # nosec B101
    request = seen[0]
    assert request.url.path == "/v1/chat/completions"  # nosec B101
    assert request.headers["Authorization"] == "Bearer mk"  # nosec B101
    assert json.loads(request.content)["model"] == "mistral-large-latest"  # nosec B101


def test_usage_estimated_when_absent(user_turn):
    transport, _ = _recording(_sse({"choices": [{"delta": {"content": "x"}}]}))
    out = list(_mistral(_client(transport)).create_message("sys", user_turn("hi")))
    assert out[1] == UsageEvent(input_tokens=2, output_tokens=0)  # nosec B101
    assert out[2].total_cost == pytest.approx(0.3 * 2 / 1_000_000)  # nosec B101


def test_http_error_classified(user_turn):
    transport, _ = _recording(b'{"message": "Unauthorized"}', status=401, content_type="application/json")
    with pytest.raises(ProviderError) as info:
        list(_mistral(_client(transport)).create_message("sys", user_turn("hi")))
    assert info.value.code is ErrorCode.AUTH and info.value.status == 401  # nosec B101
    assert "Unauthorized" in info.value.message  # nosec B101


def test_tool_index_defaults_to_position():
    state = MistralStreamState()
    chunk = {
        "choices": [
            {
                "delta": {
                    "tool_calls": [
                        {"id": "a", "function": {"name": "one", "arguments": "{}"}},
                        {"id": "b", "function": {"name": "two", "arguments": "{}"}},
                    ]
                },
                "finish_reason": "tool_calls",
            }
        ]
    }
    calls = [e for e in translate_mistral_chunk(chunk, state) if isinstance(e, ToolCallEvent)]
    assert [c.name for c in calls] == ["one", "two"]  # nosec B101


def test_complete_prompt_drops_thinking():
    payload = {
        "choices": [
            {
                "message": {
                    "content": [
                        {"type": "thinking", "thinking": [{"type": "text", "text": "no"}]},
                        {"type": "text", "text": "yes"},
                    ]
                }
            }
        ]
    }
    transport, seen = _recording(json.dumps(payload).encode(), content_type="application/json")
    assert _mistral(_client(transport)).complete_prompt("q") == "yes"  # nosec B101
    assert seen[0].headers["Accept"] == "application/json"  # nosec B101


def test_complete_prompt_http_error_logged(relay_events):
    transport, _ = _recording(b'{"error": {"message": "bad model"}}', status=400, content_type="application/json")
    with pytest.raises(ProviderError) as info:
        _mistral(_client(transport)).complete_prompt("q")
    assert info.value.code is ErrorCode.VALIDATION  # nosec B101
    (logged,) = relay_events("complete_prompt.error")
    assert logged["provider"] == "mistral" and logged["model"] == "codestral-latest"  # nosec B101
    assert "bad model" in logged["error"]  # nosec B101
