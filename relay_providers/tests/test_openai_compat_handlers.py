"""OpenAI-compatible Chat Completions handlers (DeepSeek, xAI, MiniMax, Z AI, Chutes, Baseten, Unbound).

A fake ``openai`` client replays dict chunks so the full
request -> stream -> finalize path runs without network access.
"""
from __future__ import annotations

import json

import httpx
import pytest

from relay_providers.base.catalog import ModelCatalogCache
from relay_providers.base.errors import ErrorCode, ProviderError
from relay_providers.base.factory import ProviderFactory
from relay_providers.base.models import ProviderSettings
from relay_providers.base.streaming import (
    ReasoningEvent,
    StreamController,
    TextEvent,
    ToolCallEvent,
    ToolCallPartialEvent,
    UsageEvent,
)
from relay_providers.baseten.client import BasetenHandler
from relay_providers.chutes.client import ChutesHandler, is_deepseek_r1
from relay_providers.deepseek.client import DeepSeekHandler, parse_deepseek_usage
from relay_providers.minimax.client import MiniMaxHandler
from relay_providers.unbound import get_unbound_models
from relay_providers.unbound.client import UnboundHandler, parse_unbound_usage, upstream_model_id
from relay_providers.xai.client import XAIHandler
from relay_providers.zai.client import ZAiHandler, resolve_api_line

TOOL = {
    "type": "function",
    "function": {
        "name": "read_file",
        "description": "Read a file",
        "parameters": {"type": "object", "properties": {"path": {"type": "string"}}},
    },
}

KEY = ProviderSettings(api_key="sk-live")


class TestDeepSeek:
    def test_missing_key_rejected(self):
        with pytest.raises(ProviderError) as info:
            DeepSeekHandler()
        assert info.value.code is ErrorCode.AUTH  # nosec B101
        assert info.value.message == "DeepSeek API key is required"  # nosec B101

    def test_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "env-key")
        assert DeepSeekHandler().settings.api_key == "env-key"  # nosec B101

    def test_build_params(self, fake_openai_client, user_turn):
        handler = DeepSeekHandler(KEY, client=fake_openai_client())
        selection = handler.get_model()
        params = handler.build_params(
            selection,
            "sys",
            user_turn("hi"),
            {"tools": [TOOL], "tool_choice": "auto", "parallel_tool_calls": False},
        )
        assert params["model"] == "deepseek-chat"  # nosec B101
        assert params["messages"][0] == {"role": "system", "content": "sys"}  # nosec B101
        assert params["messages"][1] == {"role": "user", "content": "hi"}  # nosec B101
        assert params["stream"] is True  # nosec B101
        assert params["stream_options"] == {"include_usage": True}  # nosec B101
        assert params["max_tokens"] == 8192  # nosec B101
        assert params["temperature"] == 0.6  # nosec B101
        assert params["tools"][0]["function"]["strict"] is True  # nosec B101
        assert params["tools"][0]["function"]["parameters"]["required"] == ["path"]  # nosec B101
        assert params["tool_choice"] == "auto" and params["parallel_tool_calls"] is False  # nosec B101

    def test_reasoner_uses_r1_messages(self, fake_openai_client, user_turn):
        handler = DeepSeekHandler(ProviderSettings(api_key="k", model_id="deepseek-reasoner"), client=fake_openai_client())
        params = handler.build_params(handler.get_model(), "sys", user_turn("hi"))
        assert params["messages"] == [{"role": "user", "content": "sys\nhi"}]  # nosec B101

    def test_unknown_model_falls_back_to_default(self, fake_openai_client):
        handler = DeepSeekHandler(ProviderSettings(api_key="k", model_id="deepseek-v9"), client=fake_openai_client())
        assert handler.get_model().id == "deepseek-chat"  # nosec B101

    def test_stream_translation_and_cost(self, fake_openai_client, chat_chunk, user_turn):
        chunks = [
            chat_chunk(reasoning="plan"),
            chat_chunk(reasoning="   "),
            chat_chunk("Hel"),
            chat_chunk("lo"),
            chat_chunk(tool_calls=[{"index": 0, "id": "call_1", "function": {"name": "read_file", "arguments": '{"pa'}}]),
            chat_chunk(tool_calls=[{"index": 0, "function": {"arguments": 'th": "a"}'}}]),
            chat_chunk(finish_reason="tool_calls"),
            chat_chunk(
                usage={
                    "prompt_tokens": 100,
                    "completion_tokens": 20,
                    "prompt_cache_hit_tokens": 40,
                    "prompt_cache_miss_tokens": 60,
                }
            ),
        ]
        client = fake_openai_client(chunks)
        events = list(DeepSeekHandler(KEY, client=client).create_message("sys", user_turn("hi")))

        assert events[0] == ReasoningEvent("plan")  # nosec B101
        assert events[1:3] == [TextEvent("Hel"), TextEvent("lo")]  # nosec B101
        assert isinstance(events[3], ToolCallPartialEvent) and events[3].id == "call_1"  # nosec B101
        call = events[5]
        assert isinstance(call, ToolCallEvent) and json.loads(call.arguments) == {"path": "a"}  # nosec B101
        assert events[6] == UsageEvent(  # nosec B101
            input_tokens=100, output_tokens=20, cache_write_tokens=60, cache_read_tokens=40
        )
        expected = (0.28 * 60 + 0.028 * 40 + 0.42 * 20) / 1_000_000
        assert events[7].total_cost == pytest.approx(expected)  # nosec B101
        assert len(events) == 8  # nosec B101
        assert client.calls[0]["stream"] is True  # nosec B101

    def test_usage_parser(self):
        assert parse_deepseek_usage(None) is None  # nosec B101
        usage = parse_deepseek_usage({"prompt_tokens": 5, "completion_tokens": 1})
        assert usage.cache_write_tokens is None and usage.cache_read_tokens is None  # nosec B101

    def test_sdk_error_is_classified(self, fake_openai_client, user_turn):
        class _AuthError(Exception):
            status_code = 401

        client = fake_openai_client(error=_AuthError("invalid key"))
        with pytest.raises(ProviderError) as info:
            list(DeepSeekHandler(KEY, client=client).create_message("sys", user_turn("hi")))
        assert info.value.code is ErrorCode.AUTH  # nosec B101
        assert info.value.message.startswith("DeepSeek authentication failed")  # nosec B101
        assert info.value.provider == "deepseek" and info.value.model == "deepseek-chat"  # nosec B101

    def test_complete_prompt(self, fake_openai_client):
        client = fake_openai_client(response={"choices": [{"message": {"content": "answer"}}]})
        assert DeepSeekHandler(KEY, client=client).complete_prompt("q") == "answer"  # nosec B101
        assert "stream" not in client.calls[0] and client.calls[0]["model"] == "deepseek-chat"  # nosec B101

    def test_complete_prompt_error_is_logged(self, fake_openai_client, relay_events):
        class _Throttled(Exception):
            status_code = 429

        client = fake_openai_client(error=_Throttled("slow down"))
        with pytest.raises(ProviderError) as info:
            DeepSeekHandler(KEY, client=client).complete_prompt("q")
        assert info.value.code is ErrorCode.RATE_LIMIT  # nosec B101
        (logged,) = relay_events("complete_prompt.error")
        assert logged["provider"] == "deepseek" and logged["model"] == "deepseek-chat"  # nosec B101
        assert logged["code"] == "rate_limit" and logged["status"] == 429 and logged["retryable"] is True  # nosec B101

    def test_cancellation_mid_stream(self, fake_openai_client, chat_chunk, user_turn):
        client = fake_openai_client([chat_chunk("a"), chat_chunk("b"), chat_chunk("c")])
        ctl = StreamController(DeepSeekHandler(KEY, client=client), "sys", user_turn("hi"))
        seen = []
        for evt in ctl:
            seen.append(evt)
            ctl.cancel("user")
        assert seen == [TextEvent("a")] and ctl.final_usage is None  # nosec B101


class TestXAI:
    def test_content_not_scanned_for_think_tags(self, fake_openai_client, chat_chunk, user_turn):
        client = fake_openai_client([chat_chunk("<think>x</think>y")])
        events = list(XAIHandler(KEY, client=client).create_message("sys", user_turn("hi")))
        assert events[0] == TextEvent("<think>x</think>y")  # nosec B101

    def test_usage_estimated_when_vendor_sends_none(self, fake_openai_client, chat_chunk, user_turn):
        client = fake_openai_client([chat_chunk("ok")])
        events = list(XAIHandler(KEY, client=client).create_message("sys", user_turn("hi")))
        assert events[1] == UsageEvent(input_tokens=2, output_tokens=1639)  # nosec B101
        assert events[2].total_cost == pytest.approx((0.2 * 2 + 1.5 * 1639) / 1_000_000)  # nosec B101

    def test_default_model_and_effort(self, fake_openai_client, user_turn):
        assert XAIHandler(KEY, client=fake_openai_client()).get_model().id == "grok-code-fast-1"  # nosec B101
        handler = XAIHandler(ProviderSettings(api_key="k", model_id="grok-3-mini"), client=fake_openai_client())
        params = handler.build_params(handler.get_model(), "sys", user_turn("hi"))
        assert params["reasoning_effort"] == "low"  # nosec B101


class TestMiniMax:
    def test_think_tags_split_across_chunks(self, fake_openai_client, chat_chunk, user_turn):
        client = fake_openai_client([chat_chunk("<thi"), chat_chunk("nk>r</think>ans")])
        handler = MiniMaxHandler(KEY, client=client)
        events = list(handler.create_message("sys", user_turn("hi")))
        assert events[:2] == [ReasoningEvent("r"), TextEvent("ans")]  # nosec B101
        assert client.calls[0]["temperature"] == 1.0  # nosec B101
        assert handler.get_model().id == "MiniMax-M2"  # nosec B101

    def test_dangling_partial_flushed_at_end(self, fake_openai_client, chat_chunk, user_turn):
        client = fake_openai_client([chat_chunk("a <th")])
        events = list(MiniMaxHandler(KEY, client=client).create_message("sys", user_turn("hi")))
        texts = [e.text for e in events if isinstance(e, TextEvent)]
        assert "".join(texts) == "a <th"  # nosec B101


class TestZAi:
    def test_api_lines(self):
        assert resolve_api_line("international_coding") == ("https://api.z.ai/api/coding/paas/v4", False)  # nosec B101
        assert resolve_api_line(None)[1] is False  # nosec B101
        assert resolve_api_line("china_coding")[1] is True  # nosec B101
        with pytest.raises(ProviderError) as info:
            resolve_api_line("mars")
        assert info.value.code is ErrorCode.VALIDATION  # nosec B101

    def test_keyless_and_international_by_default(self, fake_openai_client):
        handler = ZAiHandler(client=fake_openai_client())
        assert not handler.is_china  # nosec B101
        assert handler._base_url() == "https://api.z.ai/api/coding/paas/v4"  # nosec B101
        assert handler.get_model().info.context_window == 200_000  # nosec B101

    def test_china_line_uses_mainland_catalog(self, fake_openai_client):
        handler = ZAiHandler(ProviderSettings(extra={"zai_api_line": "china_coding"}), client=fake_openai_client())
        assert handler.is_china  # nosec B101
        assert handler.get_model().info.context_window == 204_800  # nosec B101

    def test_unknown_line_rejected_at_construction(self, fake_openai_client):
        with pytest.raises(ProviderError):
            ZAiHandler(ProviderSettings(extra={"zai_api_line": "mars"}), client=fake_openai_client())

    def test_thinking_enabled_for_binary_models(self, fake_openai_client, user_turn):
        settings = ProviderSettings(enable_reasoning_effort=True)
        client = fake_openai_client(response={"choices": [{"message": {"content": "done"}}]})
        handler = ZAiHandler(settings, client=client)
        params = handler.build_params(handler.get_model(), "sys", user_turn("hi"))
        assert params["thinking"] == {"type": "enabled"} and params["temperature"] == 0.6  # nosec B101
        assert handler.complete_prompt("q") == "done"  # nosec B101
        assert client.calls[0]["thinking"] == {"type": "enabled"}  # nosec B101

    def test_thinking_absent_without_opt_in(self, fake_openai_client, user_turn):
        handler = ZAiHandler(client=fake_openai_client())
        assert "thinking" not in handler.build_params(handler.get_model(), "sys", user_turn("hi"))  # nosec B101


def _chutes_catalog() -> ModelCatalogCache:
    return ModelCatalogCache(
        {"chutes": lambda: {"openai/o3-mini-high": {"contextWindow": 200_000, "maxTokens": 100_000}}}
    )


class TestChutes:
    def test_r1_default_path(self, fake_openai_client, chat_chunk, user_turn):
        client = fake_openai_client([chat_chunk("<think>a</think>b")])
        handler = ChutesHandler(KEY, client=client, catalog=_chutes_catalog())
        events = list(handler.create_message("sys", user_turn("hi")))
        assert events[:2] == [ReasoningEvent("a"), TextEvent("b")]  # nosec B101
        params = client.calls[0]
        assert params["model"] == "deepseek-ai/DeepSeek-R1-0528"  # nosec B101
        assert params["temperature"] == 0.6  # nosec B101
        assert params["messages"] == [{"role": "user", "content": "sys\nhi"}]  # nosec B101
        assert events[-1] == UsageEvent(total_cost=0.0)  # nosec B101

    def test_non_r1_model_streams_verbatim(self, fake_openai_client, chat_chunk, user_turn):
        client = fake_openai_client([chat_chunk("<think>a</think>b")])
        settings = ProviderSettings(api_key="k", model_id="deepseek-ai/DeepSeek-V3")
        events = list(ChutesHandler(settings, client=client, catalog=_chutes_catalog()).create_message("s", user_turn("hi")))
        assert events[0] == TextEvent("<think>a</think>b")  # nosec B101
        assert client.calls[0]["temperature"] == 0.5  # nosec B101

    def test_catalog_model_without_temperature(self, fake_openai_client, user_turn):
        settings = ProviderSettings(api_key="k", model_id="openai/o3-mini-high", model_temperature=0.2)
        handler = ChutesHandler(settings, client=fake_openai_client(), catalog=_chutes_catalog())
        selection = handler.fetch_model()
        assert selection.id == "openai/o3-mini-high"  # nosec B101
        assert selection.info.max_tokens == 100_000  # nosec B101
        assert "temperature" not in handler.build_params(selection, "sys", user_turn("hi"))  # nosec B101

    def test_is_deepseek_r1(self):
        assert is_deepseek_r1("deepseek-ai/DeepSeek-R1-0528")  # nosec B101
        assert not is_deepseek_r1("deepseek-ai/DeepSeek-V3")  # nosec B101


class TestBaseten:
    def test_missing_key_rejected(self):
        with pytest.raises(ProviderError) as info:
            BasetenHandler()
        assert info.value.message == "Baseten API key is required"  # nosec B101

    def test_registered_in_factory(self, monkeypatch, fake_openai_client):
        monkeypatch.setenv("BASETEN_API_KEY", "bt-key")
        handler = ProviderFactory.create("baseten", client=fake_openai_client())
        assert isinstance(handler, BasetenHandler) and handler.settings.api_key == "bt-key"  # nosec B101
        assert handler._base_url() == "https://inference.baseten.co/v1"  # nosec B101

    def test_default_model_and_temperature(self, fake_openai_client, user_turn):
        handler = BasetenHandler(KEY, client=fake_openai_client())
        params = handler.build_params(handler.get_model(), "sys", user_turn("hi"))
        assert params["model"] == "zai-org/GLM-4.6"  # nosec B101
        assert params["temperature"] == 0.5  # nosec B101
        assert params["max_tokens"] == 40_000  # nosec B101

    def test_user_temperature_wins(self, fake_openai_client, user_turn):
        settings = ProviderSettings(api_key="k", model_temperature=0.1)
        handler = BasetenHandler(settings, client=fake_openai_client())
        assert handler.build_params(handler.get_model(), "s", user_turn("hi"))["temperature"] == 0.1  # nosec B101

    def test_unknown_model_falls_back_to_default(self, fake_openai_client):
        settings = ProviderSettings(api_key="k", model_id="not-hosted/model")
        assert BasetenHandler(settings, client=fake_openai_client()).get_model().id == "zai-org/GLM-4.6"  # nosec B101

    def test_think_tags_become_reasoning(self, fake_openai_client, chat_chunk, user_turn):
        chunks = [
            chat_chunk("<think>a"),
            chat_chunk("</think>b"),
            chat_chunk(usage={"prompt_tokens": 1000, "completion_tokens": 100}),
        ]
        settings = ProviderSettings(api_key="k", model_id="deepseek-ai/DeepSeek-R1")
        events = list(BasetenHandler(settings, client=fake_openai_client(chunks)).create_message("s", user_turn("hi")))
        assert events[:3] == [ReasoningEvent("a"), TextEvent("b"), UsageEvent(1000, 100)]  # nosec B101
        assert events[3].total_cost == pytest.approx((2.55 * 1000 + 5.95 * 100) / 1_000_000)  # nosec B101


def _unbound_catalog() -> ModelCatalogCache:
    return ModelCatalogCache(
        {
            "unbound": lambda: {
                "openai/gpt-4.1": {"contextWindow": 1_047_576, "maxTokens": 32_768, "inputPrice": 2.0},
                "google/gemini-2.5-pro": {
                    "contextWindow": 1_048_576,
                    "maxTokens": 65_536,
                    "supportsPromptCache": True,
                },
            }
        }
    )


def _unbound(fake_openai_client, chunks=None, response=None, **settings) -> UnboundHandler:
    client = fake_openai_client(chunks, response)
    return UnboundHandler(ProviderSettings(api_key="ub-key", **settings), client=client, catalog=_unbound_catalog())


class TestUnbound:
    def test_upstream_model_id(self):
        assert upstream_model_id("anthropic/claude-sonnet-4-5") == "claude-sonnet-4-5"  # nosec B101
        assert upstream_model_id("plain") == "plain"  # nosec B101

    def test_registered_in_factory(self, monkeypatch, fake_openai_client):
        monkeypatch.setenv("UNBOUND_API_KEY", "ub-env")
        handler = ProviderFactory.create("unbound", client=fake_openai_client(), catalog=_unbound_catalog())
        assert isinstance(handler, UnboundHandler) and handler.settings.api_key == "ub-env"  # nosec B101
        assert handler._base_url() == "https://api.getunbound.ai/v1"  # nosec B101

    def test_default_anthropic_request(self, fake_openai_client, user_turn):
        handler = _unbound(fake_openai_client)
        params = handler.build_params(handler.fetch_model(), "sys", user_turn("hi"))
        assert params["model"] == "claude-sonnet-4-5"  # nosec B101
        assert params["max_tokens"] == 8192 and params["temperature"] == 0.0  # nosec B101
        system, user = params["messages"]
        assert system["content"] == [{"type": "text", "text": "sys", "cache_control": {"type": "ephemeral"}}]  # nosec B101
        assert user["content"][-1]["cache_control"] == {"type": "ephemeral"}  # nosec B101

    def test_non_anthropic_model_sends_no_max_tokens(self, fake_openai_client, user_turn):
        handler = _unbound(fake_openai_client, model_id="openai/gpt-4.1", model_temperature=0.3)
        params = handler.build_params(handler.fetch_model(), "sys", user_turn("hi"))
        assert params["model"] == "gpt-4.1" and "max_tokens" not in params  # nosec B101
        assert params["temperature"] == 0.3  # nosec B101
        assert params["messages"][0] == {"role": "system", "content": "sys"}  # nosec B101

    def test_gemini_models_get_gemini_breakpoints(self, fake_openai_client, user_turn):
        handler = _unbound(fake_openai_client, model_id="google/gemini-2.5-pro")
        params = handler.build_params(handler.fetch_model(), "sys", user_turn("hi"))
        assert params["model"] == "gemini-2.5-pro"  # nosec B101
        assert params["messages"][0]["content"][0]["cache_control"] == {"type": "ephemeral"}  # nosec B101
        assert params["messages"][1] == {"role": "user", "content": "hi"}  # nosec B101

    def test_unknown_model_falls_back_to_default(self, fake_openai_client):
        handler = _unbound(fake_openai_client, model_id="nobody/unknown")
        assert handler.fetch_model().id == "anthropic/claude-sonnet-4-5"  # nosec B101

    def test_tools_default_to_sequential_calls(self, fake_openai_client, user_turn):
        handler = _unbound(fake_openai_client)
        params = handler.build_params(handler.fetch_model(), "sys", user_turn("hi"), {"tools": [TOOL]})
        assert params["tools"][0]["function"]["name"] == "read_file"  # nosec B101
        assert params["parallel_tool_calls"] is False  # nosec B101

    def test_stream_sends_metadata_and_prices_cache_usage(self, fake_openai_client, chat_chunk, user_turn):
        chunks = [
            chat_chunk("Hi"),
            chat_chunk(
                usage={
                    "prompt_tokens": 100,
                    "completion_tokens": 20,
                    "cache_creation_input_tokens": 10,
                    "cache_read_input_tokens": 30,
                }
            ),
        ]
        handler = _unbound(fake_openai_client, chunks)
        events = list(handler.create_message("sys", user_turn("hi"), {"task_id": "task-1", "mode": "code"}))

        assert events[0] == TextEvent("Hi")  # nosec B101
        assert events[1] == UsageEvent(  # nosec B101
            input_tokens=100, output_tokens=20, cache_write_tokens=10, cache_read_tokens=30
        )
        expected = (3.0 * 60 + 15.0 * 20 + 3.75 * 10 + 0.3 * 30) / 1_000_000
        assert events[2].total_cost == pytest.approx(expected)  # nosec B101

        call = handler.client.calls[0]
        assert json.loads(call["extra_headers"]["X-Unbound-Metadata"]) == {  # nosec B101
            "labels": [{"key": "app", "value": "roo-code"}]
        }
        assert call["extra_body"] == {  # nosec B101
            "unbound_metadata": {"originApp": "roo-code", "taskId": "task-1", "mode": "code"}
        }

    def test_usage_parser(self):
        assert parse_unbound_usage(None) is None  # nosec B101
        usage = parse_unbound_usage({"prompt_tokens": 5, "completion_tokens": 1})
        assert usage.cache_write_tokens is None and usage.cache_read_tokens is None  # nosec B101

    def test_complete_prompt(self, fake_openai_client):
        handler = _unbound(fake_openai_client, response={"choices": [{"message": {"content": "answer"}}]})
        assert handler.complete_prompt("q") == "answer"  # nosec B101
        call = handler.client.calls[0]
        assert call["model"] == "claude-sonnet-4-5" and call["max_tokens"] == 8192  # nosec B101
        assert call["temperature"] == 0.0 and "stream" not in call  # nosec B101
        assert call["extra_body"] == {"unbound_metadata": {"originApp": "roo-code"}}  # nosec B101
        assert "X-Unbound-Metadata" in call["extra_headers"]  # nosec B101


class TestUnboundCatalog:
    def _serve(self, monkeypatch, respond):
        client = httpx.Client(transport=httpx.MockTransport(respond))
        monkeypatch.setattr(get_unbound_models, "get_httpx_client", lambda base_url, purpose: client)

    def test_listing_parsed_and_anthropic_output_capped(self, monkeypatch):
        seen = []

        def respond(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "anthropic/claude-3-5-haiku": {"contextWindow": 200_000, "maxTokens": 4096},
                    "anthropic/claude-opus-4-1": {
                        "contextWindow": 200_000,
                        "maxTokens": 32_000,
                        "supportsPromptCaching": True,
                        "inputTokenPrice": "15",
                        "cacheReadPrice": "1.5",
                    },
                    "mistral/codestral": {"contextWindow": 256_000, "maxTokens": 32_000, "supportsImages": False},
                },
            )

        self._serve(monkeypatch, respond)
        models = get_unbound_models.fetch_unbound_models("ub-key")
        assert str(seen[0].url) == "https://api.getunbound.ai/models"  # nosec B101
        assert seen[0].headers["Authorization"] == "Bearer ub-key"  # nosec B101
        assert models["anthropic/claude-3-5-haiku"].max_tokens == 4096  # nosec B101
        opus = models["anthropic/claude-opus-4-1"]
        assert opus.max_tokens == 8192 and opus.supports_prompt_cache  # nosec B101
        assert opus.input_price == 15.0 and opus.cache_reads_price == 1.5  # nosec B101
        assert models["mistral/codestral"].max_tokens == 32_000  # nosec B101
        assert "anthropic/claude-sonnet-4-5" in models  # nosec B101

    def test_failure_keeps_static_table(self, monkeypatch):
        self._serve(monkeypatch, lambda request: httpx.Response(503, json={"error": "down"}))
        models = get_unbound_models.fetch_unbound_models()
        assert list(models) == ["anthropic/claude-sonnet-4-5"]  # nosec B101
