"""OpenAiNativeHandler adapter.

Uses the OpenAI Responses API for every model:

* stateless operation (``store=False``) with the system prompt in the
  top-level ``instructions`` field;
* ``include=["reasoning.encrypted_content"]`` whenever an effort is sent, so
  the encrypted reasoning item can be persisted by the caller and replayed
  on the next turn (:meth:`OpenAiNativeHandler.get_encrypted_content`);
* strict function tools, verbosity for models that declare it, supported
  service tiers and extended prompt-cache retention;
* usage is priced with the service tier the API actually used.

Failure semantics: SDK exceptions and ``error`` / ``response.failed`` stream
events surface as one :class:`ProviderError`; nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

try:
    from openai import OpenAI
except Exception:  # pragma: no cover
    OpenAI = None  # type: ignore

from ..base.errors import completion_error, handle_openai_error
from ..base.logging import LogContext, get_logger, log_provider_error
from ..base.models import ModelInfo, ModelSelection, ProviderSettings, resolve_settings, select_model
from ..base.params import ModelParams, get_model_params
from ..base.streaming import StreamEvent, UsageEvent, run_event_stream
from ..base.tools import convert_tools_for_responses
from ..base.transform import format_responses_input
from ..base.usage import estimate_usage
from ..base.utils import attr_or_key
from ..config.defaults import OPENAI_NATIVE_DEFAULT_TEMPERATURE, OPENAI_PROMPT_CACHE_RETENTION
from .models import O3_MINI_PREFIX, OPENAI_NATIVE_DEFAULT_MODEL_ID, OPENAI_NATIVE_MODELS
from .stream_helpers import (
    ResponsesStreamState,
    find_encrypted_reasoning,
    normalize_responses_usage,
    translate_responses_event,
)

_ENCRYPTED_REASONING = "reasoning.encrypted_content"


@dataclass(frozen=True)
class OpenAiNativeModel:
    """Resolved model: API id, descriptor and request parameters."""

    id: str
    info: ModelInfo
    params: ModelParams


class OpenAiNativeHandler:
    """Streaming handler for the OpenAI Responses API.

    Args:
        settings: Per-handler settings; unset credentials come from config.
        client: Optional pre-built ``openai.OpenAI`` client.
    """

    provider_name = "openai-native"
    label = "OpenAI Native"

    def __init__(self, settings: Optional[ProviderSettings] = None, client: Any = None) -> None:
        self.settings = resolve_settings(self.provider_name, settings)
        self._client = client
        self._logger = get_logger("providers.openai")
        self._last = ResponsesStreamState()

    @property
    def client(self):
        if self._client is None:
            if OpenAI is None:
                raise completion_error(self.label, RuntimeError("openai SDK not installed"), provider=self.provider_name)
            self._client = OpenAI(
                api_key=self.settings.api_key or "not-provided",
                base_url=self.settings.base_url,
                default_headers=dict(self.settings.headers) or None,
            )
        return self._client

    # ---- Model resolution ----
    def _resolve_model(self) -> OpenAiNativeModel:
        selection = select_model(self.settings.model_id, OPENAI_NATIVE_MODELS, OPENAI_NATIVE_DEFAULT_MODEL_ID)
        params = get_model_params(
            "openai", selection.id, selection.info, self.settings, OPENAI_NATIVE_DEFAULT_TEMPERATURE
        )
        api_id = O3_MINI_PREFIX if selection.id.startswith(O3_MINI_PREFIX) else selection.id
        return OpenAiNativeModel(id=api_id, info=selection.info, params=params)

    def get_model(self) -> ModelSelection:
        resolved = self._resolve_model()
        return ModelSelection(id=resolved.id, info=resolved.info)

    # ---- Request building ----
    def _service_tier(self, resolved: OpenAiNativeModel) -> Optional[str]:
        requested = self.settings.service_tier
        if not requested:
            return None
        if requested == "default" or requested in {t.name for t in resolved.info.tiers if t.name}:
            return requested
        return None

    def _common_body(self, resolved: OpenAiNativeModel) -> Dict[str, Any]:
        info, params = resolved.info, resolved.params
        body: Dict[str, Any] = {"model": resolved.id, "store": False}
        effort = params.reasoning_effort
        if effort:
            body["include"] = [_ENCRYPTED_REASONING]
            body["reasoning"] = {"effort": effort}
            if self.settings.extra.get("openai_reasoning_summary", True):
                body["reasoning"]["summary"] = "auto"
        if params.temperature is not None:
            body["temperature"] = params.temperature
        if params.max_tokens:
            body["max_output_tokens"] = params.max_tokens
        tier = self._service_tier(resolved)
        if tier:
            body["service_tier"] = tier
        if info.supports_prompt_cache and info.prompt_cache_retention == OPENAI_PROMPT_CACHE_RETENTION:
            body["prompt_cache_retention"] = OPENAI_PROMPT_CACHE_RETENTION
        if info.supports_verbosity:
            body["text"] = {"verbosity": params.verbosity or "medium"}
        return body

    def build_params(
        self,
        resolved: OpenAiNativeModel,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Build the streaming ``responses.create`` keyword arguments."""
        body = self._common_body(resolved)
        body.update(input=format_responses_input(messages), instructions=system_prompt, stream=True)
        meta = metadata or {}
        tools = meta.get("tools")
        if tools:
            body["tools"] = convert_tools_for_responses(tools)
            body["parallel_tool_calls"] = bool(meta.get("parallel_tool_calls", False))
        if meta.get("tool_choice"):
            body["tool_choice"] = meta["tool_choice"]
        return body

    # ---- Streaming ----
    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[StreamEvent]:
        """Stream a response as uniform events.

        Continuation data from the previous call is cleared before the
        request is sent.
        """
        meta = metadata or {}
        resolved = self._resolve_model()
        params = self.build_params(resolved, system_prompt, messages, meta)
        state = self._last = ResponsesStreamState()

        def _usage(raw: Any) -> Optional[UsageEvent]:
            return normalize_responses_usage(raw, resolved.info, state.service_tier or self.settings.service_tier)

        def _finalize() -> Iterator[StreamEvent]:
            yield from state.tools.complete_all()
            if state.saw_usage:
                return
            estimated = estimate_usage(system_prompt, messages, params.get("max_output_tokens"))
            yield _usage({"input_tokens": estimated.input_tokens, "output_tokens": estimated.output_tokens})

        yield from run_event_stream(
            ctx=LogContext(provider=self.provider_name, model=resolved.id, request_id=meta.get("task_id")),
            provider_name=self.provider_name,
            label=self.label,
            model=resolved.id,
            starter=lambda: self.client.responses.create(**params),
            translator=lambda event: translate_responses_event(event, state, _usage, resolved.id),
            finalizer=_finalize,
            logger=self._logger,
            cancellation_token=meta.get("cancellation_token"),
            error_wrapper=lambda e: handle_openai_error(e, self.label, provider=self.provider_name, model=resolved.id),
        )

    # ---- Continuation accessors ----
    def get_encrypted_content(self) -> Optional[Dict[str, Any]]:
        """``{"encrypted_content", "id"?}`` of the last response's reasoning item."""
        return find_encrypted_reasoning(self._last.output)

    def get_response_id(self) -> Optional[str]:
        return self._last.response_id

    def get_service_tier(self) -> Optional[str]:
        """Service tier the API reported for the last response."""
        return self._last.service_tier

    # ---- One-shot helpers ----
    def complete_prompt(self, prompt: str) -> str:
        resolved = self._resolve_model()
        body = self._common_body(resolved)
        body["input"] = [{"role": "user", "content": [{"type": "input_text", "text": prompt}]}]
        body["stream"] = False
        try:
            response = self.client.responses.create(**body)
        except Exception as e:
            err = completion_error(self.label, e, provider=self.provider_name, model=resolved.id)
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err from e
        for item in attr_or_key(response, "output") or []:
            if attr_or_key(item, "type") != "message":
                continue
            for content in attr_or_key(item, "content") or []:
                if attr_or_key(content, "type") == "output_text" and attr_or_key(content, "text"):
                    return attr_or_key(content, "text")
        return attr_or_key(response, "output_text") or ""


__all__ = ["OpenAiNativeHandler", "OpenAiNativeModel"]
