"""CerebrasHandler adapter.

Cerebras exposes an OpenAI-compatible Chat Completions endpoint but with its
own limits, so requests go over plain ``httpx`` SSE rather than the OpenAI
SDK:

* ``max_completion_tokens`` replaces ``max_tokens`` and is omitted above the
  API ceiling;
* temperature is clamped to the accepted range and omitted at the default;
* strict tool schemas lose ``minItems``/``maxItems``;
* every request carries the third-party integration header.

Content goes through a ``<think>`` tag matcher. Usage is reported once after
the stream ends; counts the vendor never sent are estimated.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional, Sequence

from ..base.errors import ErrorCode, ProviderError, completion_error, payload_error
from ..base.http import get_httpx_client, iter_sse_response, post_json
from ..base.logging import LogContext, get_logger, log_provider_error
from ..base.models import ModelSelection, ProviderSettings, resolve_settings, select_model
from ..base.pricing import calculate_api_cost_openai
from ..base.streaming import (
    StreamEvent,
    TagMatcher,
    ToolCallAccumulator,
    ToolCallPartialEvent,
    UsageEvent,
    run_event_stream,
    spans_to_events,
)
from ..base.tools import convert_tools_for_openai, strip_unsupported_schema_fields
from ..base.transform import convert_to_openai_messages
from ..base.usage import estimate_usage
from ..config.defaults import (
    CEREBRAS_DEFAULT_BASE_URL,
    CEREBRAS_DEFAULT_TEMPERATURE,
    CEREBRAS_INTEGRATION_HEADER,
    CEREBRAS_MAX_COMPLETION_TOKENS,
    CEREBRAS_TEMPERATURE_RANGE,
)
from .models import CEREBRAS_DEFAULT_MODEL_ID, CEREBRAS_MODELS

_CHAT_PATH = "/chat/completions"
# output estimate base when the model declares no limit
_FALLBACK_ESTIMATE_MAX_TOKENS = 1000


def clamp_temperature(value: float) -> float:
    low, high = CEREBRAS_TEMPERATURE_RANGE
    return max(low, min(high, value))


class CerebrasStreamState:
    """Tag matcher, tool slots and token counts for one stream."""

    def __init__(self) -> None:
        self.matcher = TagMatcher("think")
        self.tools = ToolCallAccumulator()
        self.input_tokens = 0
        self.output_tokens = 0


def translate_cerebras_chunk(
    chunk: Mapping[str, Any], state: CerebrasStreamState, model: Optional[str] = None
) -> Iterator[StreamEvent]:
    """Map one decoded SSE payload to uniform events.

    Raises:
        ProviderError: the payload carries an ``error`` object.
    """
    err = chunk.get("error")
    if err:
        message = err.get("message") if isinstance(err, Mapping) else str(err)
        status = err.get("code") if isinstance(err, Mapping) else None
        raise payload_error(
            f"Cerebras API Error: {message}",
            provider="cerebras",
            model=model,
            status=status if isinstance(status, int) else None,
        )
    choices = chunk.get("choices") or []
    choice = choices[0] if choices else {}
    delta = choice.get("delta") or {}
    content = delta.get("content")
    if content:
        yield from spans_to_events(state.matcher.update(content))
    for call in delta.get("tool_calls") or []:
        fn = call.get("function") or {}
        partial = ToolCallPartialEvent(
            index=call.get("index", 0),
            id=call.get("id"),
            name=fn.get("name"),
            arguments=fn.get("arguments"),
        )
        state.tools.update(partial)
        yield partial
    if choice.get("finish_reason"):
        yield from state.tools.complete_all()
    usage = chunk.get("usage")
    if usage:
        state.input_tokens = usage.get("prompt_tokens") or 0
        state.output_tokens = usage.get("completion_tokens") or 0


class CerebrasHandler:
    """Streaming handler for Cerebras inference.

    Args:
        settings: Per-handler settings; an API key is required.
        client: Optional ``httpx.Client`` for tests.
    """

    provider_name = "cerebras"
    label = "Cerebras"

    def __init__(self, settings: Optional[ProviderSettings] = None, client: Any = None) -> None:
        self.settings = resolve_settings(self.provider_name, settings)
        if not self.settings.api_key:
            raise ProviderError(
                code=ErrorCode.AUTH,
                message="Cerebras API key is required",
                provider=self.provider_name,
            )
        self._client = client
        self._logger = get_logger("providers.cerebras")

    def get_model(self) -> ModelSelection:
        return select_model(self.settings.model_id, CEREBRAS_MODELS, CEREBRAS_DEFAULT_MODEL_ID)

    @property
    def http(self):
        if self._client is not None:
            return self._client
        return get_httpx_client(self.settings.base_url or CEREBRAS_DEFAULT_BASE_URL, purpose="cerebras.stream")

    def _headers(self) -> Dict[str, str]:
        name, value = CEREBRAS_INTEGRATION_HEADER
        return {
            **dict(self.settings.headers),
            "Authorization": f"Bearer {self.settings.api_key}",
            name: value,
        }

    def build_params(
        self,
        selection: ModelSelection,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": selection.id,
            "messages": [{"role": "system", "content": system_prompt}, *convert_to_openai_messages(messages)],
            "stream": True,
        }
        max_tokens = selection.info.max_tokens
        if max_tokens and 0 < max_tokens <= CEREBRAS_MAX_COMPLETION_TOKENS:
            body["max_completion_tokens"] = max_tokens
        temperature = self.settings.model_temperature
        if temperature is not None and temperature != CEREBRAS_DEFAULT_TEMPERATURE:
            body["temperature"] = clamp_temperature(temperature)
        meta = metadata or {}
        tools = meta.get("tools")
        if tools and selection.info.supports_native_tools:
            body["tools"] = convert_tools_for_openai(tools, strip_unsupported_schema_fields)
            if meta.get("tool_choice"):
                body["tool_choice"] = meta["tool_choice"]
            body["parallel_tool_calls"] = bool(meta.get("parallel_tool_calls", False))
        return body

    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[StreamEvent]:
        meta = metadata or {}
        selection = self.get_model()
        body = self.build_params(selection, system_prompt, messages, meta)
        state = CerebrasStreamState()

        def _start():
            return iter_sse_response(self.http, _CHAT_PATH, body=body, headers=self._headers())

        def _finalize() -> Iterator[StreamEvent]:
            yield from spans_to_events(state.matcher.final())
            yield from state.tools.complete_all()
            if not state.input_tokens or not state.output_tokens:
                estimated = estimate_usage(
                    system_prompt, messages, selection.info.max_tokens or _FALLBACK_ESTIMATE_MAX_TOKENS
                )
                state.input_tokens = state.input_tokens or estimated.input_tokens
                state.output_tokens = state.output_tokens or estimated.output_tokens
            yield UsageEvent(input_tokens=state.input_tokens, output_tokens=state.output_tokens)
            cost = calculate_api_cost_openai(selection.info, state.input_tokens, state.output_tokens)
            yield UsageEvent(total_cost=cost.total_cost)

        yield from run_event_stream(
            ctx=LogContext(provider=self.provider_name, model=selection.id, request_id=meta.get("task_id")),
            provider_name=self.provider_name,
            label=self.label,
            model=selection.id,
            starter=_start,
            translator=lambda chunk: translate_cerebras_chunk(chunk, state, selection.id),
            finalizer=_finalize,
            logger=self._logger,
            cancellation_token=meta.get("cancellation_token"),
        )

    def complete_prompt(self, prompt: str) -> str:
        selection = self.get_model()
        body = {"model": selection.id, "messages": [{"role": "user", "content": prompt}], "stream": False}
        try:
            data = post_json(self.http, _CHAT_PATH, body=body, headers=self._headers())
        except Exception as e:
            err = completion_error(self.label, e, provider=self.provider_name, model=selection.id)
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err from e
        choices = data.get("choices") or []
        return ((choices[0].get("message") or {}).get("content") if choices else None) or ""


__all__ = ["CerebrasHandler", "CerebrasStreamState", "clamp_temperature", "translate_cerebras_chunk"]
