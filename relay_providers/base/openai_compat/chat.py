"""Reusable OpenAI-compatible Chat Completions streaming.

DeepSeek, xAI, MiniMax, Z AI, Chutes, Baseten, Unbound, Roo and OpenRouter all speak the Chat
Completions protocol through the ``openai`` SDK with small request
differences. Their handlers own an :class:`OpenAICompatibleChat` and call
into it: the handler decides the client, model and extra request fields;
this helper builds the common body, translates chunks and appends the
terminal cost event.

Chunk translation:
    * ``delta.content`` goes through a ``<think>`` :class:`TagMatcher` when
      think tags are enabled, else straight to ``text``;
    * non-blank ``delta.reasoning_content`` / ``delta.reasoning`` -> ``reasoning``;
    * ``delta.tool_calls`` -> ``tool_call_partial`` per fragment; a choice
      ``finish_reason`` completes every open slot as ``tool_call``;
    * ``chunk.usage`` -> ``usage`` (token counts).

After the transport ends the matcher is flushed and one cost-only usage event
is emitted (estimated counts are emitted first when the vendor never sent
usage).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from ..cancellation import CancellationToken
from ..errors import handle_openai_error
from ..logging import LogContext, log_provider_error
from ..models import ModelInfo, ProviderSettings
from ..params import get_model_max_output_tokens
from ..pricing import calculate_api_cost_openai
from ..streaming import (
    ReasoningEvent,
    StreamEvent,
    TagMatcher,
    TextEvent,
    ToolCallAccumulator,
    ToolCallPartialEvent,
    UsageEvent,
    run_event_stream,
    spans_to_events,
)
from ..tools import convert_tools_for_openai
from ..transform import convert_to_openai_messages
from ..usage import estimate_usage
from ..utils import attr_or_key
from .usage import parse_chat_usage

UsageParser = Callable[[Any], Optional[UsageEvent]]
# (model info, parsed usage, raw vendor usage or None) -> total cost
CostFn = Callable[[ModelInfo, UsageEvent, Any], float]
ChunkHook = Callable[[Any], Iterable[StreamEvent]]
ReasoningExtractor = Callable[[Any], Iterable[StreamEvent]]


def openai_usage_cost(info: ModelInfo, usage: UsageEvent, raw_usage: Any = None) -> float:
    """Default cost: cache-inclusive pricing of the parsed counts."""
    return calculate_api_cost_openai(
        info,
        usage.input_tokens,
        usage.output_tokens,
        usage.cache_write_tokens or 0,
        usage.cache_read_tokens or 0,
    ).total_cost


def chat_reasoning(delta: Any) -> Iterator[StreamEvent]:
    """Default reasoning extraction: ``reasoning_content`` or ``reasoning``."""
    reasoning = attr_or_key(delta, "reasoning_content") or attr_or_key(delta, "reasoning")
    if isinstance(reasoning, str) and reasoning.strip():
        yield ReasoningEvent(text=reasoning)


@dataclass
class ChatStreamState:
    """Per-request translation state; created fresh by each ``stream`` call."""

    matcher: Optional[TagMatcher] = None
    tools: ToolCallAccumulator = field(default_factory=ToolCallAccumulator)
    usage: Optional[UsageEvent] = None
    raw_usage: Any = None


def translate_chat_chunk(
    chunk: Any,
    state: ChatStreamState,
    usage_parser: UsageParser = parse_chat_usage,
    reasoning_extractor: ReasoningExtractor = chat_reasoning,
) -> Iterator[StreamEvent]:
    """Translate one Chat Completions chunk into uniform events."""
    choices = attr_or_key(chunk, "choices") or []
    choice = choices[0] if choices else None
    delta = attr_or_key(choice, "delta") if choice is not None else None
    if delta is not None:
        yield from reasoning_extractor(delta)
        content = attr_or_key(delta, "content")
        if content:
            if state.matcher is not None:
                yield from spans_to_events(state.matcher.update(content))
            else:
                yield TextEvent(text=content)
        for call in attr_or_key(delta, "tool_calls") or []:
            fn = attr_or_key(call, "function")
            partial = ToolCallPartialEvent(
                index=attr_or_key(call, "index", 0),
                id=attr_or_key(call, "id"),
                name=attr_or_key(fn, "name"),
                arguments=attr_or_key(fn, "arguments"),
            )
            state.tools.update(partial)
            yield partial
    if choice is not None and attr_or_key(choice, "finish_reason"):
        yield from state.tools.complete_all()
    raw_usage = attr_or_key(chunk, "usage")
    usage = usage_parser(raw_usage)
    if usage is not None:
        state.usage = usage
        state.raw_usage = raw_usage
        yield usage


class OpenAICompatibleChat:
    """Request building and streaming shared by Chat Completions handlers.

    Args:
        provider_name: Provider key used in logs and errors.
        label: Human provider name used in error messages.
        client_getter: Returns the ``openai.OpenAI`` client for this call.
            Called per request so handlers can rotate credentials.
        logger: Handler logger.
        think_tags: Split ``<think>`` spans out of content by default.
        usage_parser: Maps ``chunk.usage`` to a usage event.
        schema_transform: Extra tool-schema normalization after strict mode.
    """

    def __init__(
        self,
        *,
        provider_name: str,
        label: str,
        client_getter: Callable[[], Any],
        logger,
        think_tags: bool = True,
        usage_parser: UsageParser = parse_chat_usage,
        schema_transform: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self.provider_name = provider_name
        self.label = label
        self._client_getter = client_getter
        self._logger = logger
        self._think_tags = think_tags
        self._usage_parser = usage_parser
        self._schema_transform = schema_transform

    def build_params(
        self,
        *,
        model_id: str,
        info: ModelInfo,
        settings: ProviderSettings,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
        default_temperature: Optional[float] = 0.0,
        converted_messages: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Build the streaming request body.

        ``converted_messages`` replaces the default system-first OpenAI
        conversion (R1-format vendors pass their own list). ``max_tokens`` is
        left out when the resolver has no limit to send; ``temperature`` when
        neither settings nor the handler provide one.
        """
        if converted_messages is None:
            converted_messages = [{"role": "system", "content": system_prompt}, *convert_to_openai_messages(messages)]
        params: Dict[str, Any] = {
            "model": model_id,
            "messages": converted_messages,
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        max_tokens = get_model_max_output_tokens(model_id, info, settings, "openai")
        if max_tokens:
            params["max_tokens"] = max_tokens
        temperature = settings.model_temperature if settings.model_temperature is not None else default_temperature
        if temperature is not None:
            params["temperature"] = temperature
        meta = metadata or {}
        tools = meta.get("tools")
        if tools:
            params["tools"] = convert_tools_for_openai(tools, self._schema_transform)
            if meta.get("tool_choice"):
                params["tool_choice"] = meta["tool_choice"]
            if meta.get("parallel_tool_calls") is not None:
                params["parallel_tool_calls"] = meta["parallel_tool_calls"]
        return params

    def stream(
        self,
        params: Dict[str, Any],
        *,
        info: ModelInfo,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
        request_options: Optional[Dict[str, Any]] = None,
        think_tags: Optional[bool] = None,
        chunk_hook: Optional[ChunkHook] = None,
        cost_fn: CostFn = openai_usage_cost,
        reasoning_extractor: ReasoningExtractor = chat_reasoning,
    ) -> Iterator[StreamEvent]:
        """Open the stream and yield uniform events.

        Args:
            think_tags: Per-request override of the constructor default.
            chunk_hook: Runs on every raw chunk before standard translation;
                may yield events or raise for vendor error payloads.
            cost_fn: Computes the terminal cost from the final usage.
            reasoning_extractor: Maps a delta to reasoning events (vendors
                with structured reasoning payloads replace the default).
        """
        meta = metadata or {}
        token: Optional[CancellationToken] = meta.get("cancellation_token")
        use_tags = self._think_tags if think_tags is None else think_tags
        state = ChatStreamState(matcher=TagMatcher("think") if use_tags else None)
        model = params.get("model", "")

        def _start():
            client = self._client_getter()
            return client.chat.completions.create(**params, **(request_options or {}))

        def _translate(chunk: Any) -> Iterator[StreamEvent]:
            if chunk_hook is not None:
                yield from chunk_hook(chunk)
            yield from translate_chat_chunk(chunk, state, self._usage_parser, reasoning_extractor)

        def _finalize() -> Iterator[StreamEvent]:
            if state.matcher is not None:
                yield from spans_to_events(state.matcher.final())
            yield from state.tools.complete_all()
            usage = state.usage
            if usage is None:
                usage = estimate_usage(system_prompt, messages, params.get("max_tokens"))
                yield usage
            yield UsageEvent(total_cost=cost_fn(info, usage, state.raw_usage))

        return run_event_stream(
            ctx=LogContext(provider=self.provider_name, model=model, request_id=meta.get("task_id")),
            provider_name=self.provider_name,
            label=self.label,
            model=model,
            starter=_start,
            translator=_translate,
            finalizer=_finalize,
            logger=self._logger,
            cancellation_token=token,
            error_wrapper=lambda e: handle_openai_error(e, self.label, provider=self.provider_name, model=model),
        )

    def complete(self, params: Dict[str, Any], request_options: Optional[Dict[str, Any]] = None) -> str:
        """Non-streaming completion; returns the first choice's content."""
        body = {k: v for k, v in params.items() if k not in ("stream", "stream_options")}
        try:
            response = self._client_getter().chat.completions.create(**body, **(request_options or {}))
        except Exception as e:
            err = handle_openai_error(e, self.label, provider=self.provider_name, model=body.get("model"))
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err from e
        choices = attr_or_key(response, "choices") or []
        message = attr_or_key(choices[0], "message") if choices else None
        return attr_or_key(message, "content") or ""


__all__ = [
    "ChatStreamState",
    "CostFn",
    "ReasoningExtractor",
    "chat_reasoning",
    "OpenAICompatibleChat",
    "openai_usage_cost",
    "translate_chat_chunk",
]
