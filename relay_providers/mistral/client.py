"""MistralHandler adapter.

Talks to Mistral's Chat Completions REST endpoint (``/v1/chat/completions``)
over ``httpx`` server-sent events. Codestral models are routed to the
dedicated Codestral host unless a base URL is configured.

Stream translation:
* ``delta.content`` is either a string (text) or a list of chunks where
  ``thinking`` chunks carry a list of text parts (reasoning) and ``text``
  chunks carry visible text;
* ``delta.tool_calls`` become ``tool_call_partial`` events and are completed
  as ``tool_call`` when the choice finishes;
* ``usage`` becomes a usage event; one cost-only usage event ends the stream.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from ..base.errors import ErrorCode, ProviderError, completion_error
from ..base.http import get_httpx_client, iter_sse_response, post_json
from ..base.logging import LogContext, get_logger, log_provider_error
from ..base.models import ModelSelection, ProviderSettings, resolve_settings, select_model
from ..base.openai_compat.usage import parse_chat_usage
from ..base.pricing import calculate_api_cost_openai
from ..base.streaming import (
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    ToolCallAccumulator,
    ToolCallPartialEvent,
    UsageEvent,
    run_event_stream,
)
from ..base.tools import to_mistral_tool_choice
from ..base.transform import convert_to_mistral_messages
from ..base.usage import estimate_usage
from ..config.defaults import (
    MISTRAL_CODESTRAL_BASE_URL,
    MISTRAL_DEFAULT_BASE_URL,
    MISTRAL_DEFAULT_TEMPERATURE,
)
from .models import MISTRAL_DEFAULT_MODEL_ID, MISTRAL_MODELS

_CHAT_PATH = "/v1/chat/completions"


def _content_events(content: Any) -> Iterator[StreamEvent]:
    if isinstance(content, str):
        if content:
            yield TextEvent(text=content)
        return
    for chunk in content or []:
        if not isinstance(chunk, Mapping):
            continue
        kind = chunk.get("type")
        if kind == "thinking":
            for part in chunk.get("thinking") or []:
                if isinstance(part, Mapping) and part.get("type") == "text" and part.get("text"):
                    yield ReasoningEvent(text=part["text"])
        elif kind == "text" and chunk.get("text"):
            yield TextEvent(text=chunk["text"])


class MistralStreamState:
    """Open tool-call slots and the last reported usage for one stream."""

    def __init__(self) -> None:
        self.tools = ToolCallAccumulator()
        self.usage: Optional[UsageEvent] = None


def translate_mistral_chunk(chunk: Mapping[str, Any], state: MistralStreamState) -> Iterator[StreamEvent]:
    """Map one decoded SSE payload to uniform events."""
    choices = chunk.get("choices") or []
    choice = choices[0] if choices else {}
    delta = choice.get("delta") or {}
    yield from _content_events(delta.get("content"))
    for position, call in enumerate(delta.get("tool_calls") or []):
        fn = call.get("function") or {}
        partial = ToolCallPartialEvent(
            index=call.get("index", position),
            id=call.get("id"),
            name=fn.get("name"),
            arguments=fn.get("arguments"),
        )
        state.tools.update(partial)
        yield partial
    if choice.get("finish_reason"):
        yield from state.tools.complete_all()
    usage = parse_chat_usage(chunk.get("usage"))
    if usage is not None:
        state.usage = usage
        yield usage


class MistralHandler:
    """Streaming handler for the Mistral chat API.

    Args:
        settings: Per-handler settings; an API key is required.
        client: Optional ``httpx.Client`` (tests route it through
            ``httpx.MockTransport``). Pooled clients are used otherwise.
    """

    provider_name = "mistral"
    label = "Mistral"

    def __init__(self, settings: Optional[ProviderSettings] = None, client: Any = None) -> None:
        self.settings = resolve_settings(self.provider_name, settings)
        if not self.settings.api_key:
            raise ProviderError(
                code=ErrorCode.AUTH,
                message="Mistral API key is required",
                provider=self.provider_name,
            )
        self._client = client
        self._logger = get_logger("providers.mistral")

    def get_model(self) -> ModelSelection:
        return select_model(self.settings.model_id, MISTRAL_MODELS, MISTRAL_DEFAULT_MODEL_ID)

    def _base_url(self, model_id: str) -> str:
        if self.settings.base_url:
            return self.settings.base_url
        if model_id.startswith("codestral-"):
            return self.settings.extra.get("mistral_codestral_url") or MISTRAL_CODESTRAL_BASE_URL
        return MISTRAL_DEFAULT_BASE_URL

    def _http(self, model_id: str):
        if self._client is not None:
            return self._client
        return get_httpx_client(self._base_url(model_id), purpose="mistral.stream")

    def _headers(self) -> Dict[str, str]:
        return {
            **dict(self.settings.headers),
            "Authorization": f"Bearer {self.settings.api_key}",
            "Accept": "text/event-stream",
        }

    def _temperature(self) -> float:
        if self.settings.model_temperature is not None:
            return self.settings.model_temperature
        return MISTRAL_DEFAULT_TEMPERATURE

    def build_params(
        self,
        selection: ModelSelection,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Build the streaming request body.

        ``max_tokens`` is sent only when ``settings.include_max_tokens`` is
        set. Tools are sent only to models with native tool support, and
        Mistral then always gets ``tool_choice="any"``.
        """
        body: Dict[str, Any] = {
            "model": selection.id,
            "messages": [{"role": "system", "content": system_prompt}, *convert_to_mistral_messages(messages)],
            "temperature": self._temperature(),
            "stream": True,
        }
        if self.settings.include_max_tokens and selection.info.max_tokens:
            body["max_tokens"] = selection.info.max_tokens
        meta = metadata or {}
        tools = meta.get("tools")
        if tools and selection.info.supports_native_tools:
            body["tools"] = [
                {
                    "type": "function",
                    "function": {
                        "name": t["function"]["name"],
                        "description": t["function"].get("description"),
                        "parameters": t["function"].get("parameters") or {},
                    },
                }
                for t in tools
                if t.get("type") == "function"
            ]
            body["tool_choice"] = to_mistral_tool_choice(meta.get("tool_choice"))
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
        state = MistralStreamState()

        def _start():
            return iter_sse_response(self._http(selection.id), _CHAT_PATH, body=body, headers=self._headers())

        def _finalize() -> Iterator[StreamEvent]:
            yield from state.tools.complete_all()
            usage = state.usage
            if usage is None:
                usage = estimate_usage(system_prompt, messages, body.get("max_tokens"))
                yield usage
            cost = calculate_api_cost_openai(selection.info, usage.input_tokens, usage.output_tokens)
            yield UsageEvent(total_cost=cost.total_cost)

        yield from run_event_stream(
            ctx=LogContext(provider=self.provider_name, model=selection.id, request_id=meta.get("task_id")),
            provider_name=self.provider_name,
            label=self.label,
            model=selection.id,
            starter=_start,
            translator=lambda chunk: translate_mistral_chunk(chunk, state),
            finalizer=_finalize,
            logger=self._logger,
            cancellation_token=meta.get("cancellation_token"),
        )

    def complete_prompt(self, prompt: str) -> str:
        """Single non-streaming completion; thinking chunks are dropped."""
        selection = self.get_model()
        body = {
            "model": selection.id,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature(),
        }
        headers = {**self._headers(), "Accept": "application/json"}
        try:
            data = post_json(self._http(selection.id), _CHAT_PATH, body=body, headers=headers)
        except Exception as e:
            err = completion_error(self.label, e, provider=self.provider_name, model=selection.id)
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err from e
        choices = data.get("choices") or []
        content = (choices[0].get("message") or {}).get("content") if choices else None
        if isinstance(content, list):
            parts: List[str] = [c.get("text") or "" for c in content if c.get("type") == "text" and c.get("text")]
            return "".join(parts)
        return content or ""


__all__ = ["MistralHandler", "MistralStreamState", "translate_mistral_chunk"]
