"""GeminiHandler adapter.

Uses the ``google-genai`` SDK (``genai.Client``) and
``client.models.generate_content_stream``. The history is converted with
:mod:`relay_providers.base.transform.gemini_format`; stored
``{"type": "reasoning"}`` entries meant for the Responses API are dropped.

Key behaviors:
* thought signatures are forwarded and captured only while reasoning is on
  (``thinking_config`` present);
* function tools take priority over the built-in Google Search / URL-context
  tools, which the API does not allow alongside function declarations;
* temperature honors the model's ``supports_temperature`` flag, pinning to
  the model default when user overrides are not allowed;
* hybrid-reasoning models let ``model_max_tokens`` raise the output cap.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

try:
    from google import genai  # type: ignore
except Exception:  # pragma: no cover
    genai = None  # type: ignore

from ..base.errors import completion_error
from ..base.logging import LogContext, get_logger, log_provider_error
from ..base.models import ModelSelection, ProviderSettings, resolve_settings, select_model
from ..base.params import ModelParams, get_model_params
from ..base.streaming import StreamEvent, run_event_stream
from ..base.tools import convert_openai_tools_to_gemini, to_gemini_function_calling
from ..base.transform import (
    build_tool_id_map,
    convert_anthropic_content_to_gemini,
    convert_anthropic_message_to_gemini,
)
from ..base.usage import count_content_tokens, estimate_usage
from ..base.utils import attr_or_key
from ..config.defaults import GEMINI_FALLBACK_TEMPERATURE
from .models import GEMINI_DEFAULT_MODEL_ID, GEMINI_MODELS
from .stream_helpers import GeminiStreamState, citations, finalize_gemini, gemini_cost, translate_gemini_chunk

_THINKING_SUFFIX = ":thinking"


def _signature_bytes(parts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Turn stored base64 thought signatures back into the SDK's bytes."""
    for part in parts:
        signature = part.get("thoughtSignature")
        if isinstance(signature, str):
            try:
                part["thoughtSignature"] = base64.b64decode(signature, validate=True)
            except (binascii.Error, ValueError):
                part["thoughtSignature"] = signature.encode("utf-8")
    return parts


class GeminiHandler:
    """Streaming handler for the Gemini API.

    Args:
        settings: Per-handler settings. ``extra`` keys:
            ``gemini_enable_grounding`` (Google Search), ``gemini_enable_url_context``,
            ``vertex_project_id`` / ``vertex_region`` (Vertex AI instead of an
            API key).
        client: Optional pre-built ``genai.Client``.
    """

    provider_name = "gemini"
    label = "Gemini"

    def __init__(self, settings: Optional[ProviderSettings] = None, client: Any = None) -> None:
        self.settings = resolve_settings(self.provider_name, settings)
        self._client = client
        self._logger = get_logger("providers.gemini")
        self._last = GeminiStreamState()

    @property
    def client(self):
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        if genai is None:
            raise completion_error(self.label, RuntimeError("google-genai SDK not installed"), provider=self.provider_name)
        extra = self.settings.extra
        kwargs: Dict[str, Any] = {}
        if self.settings.base_url:
            kwargs["http_options"] = {"base_url": self.settings.base_url}
        if extra.get("vertex_project_id"):
            return genai.Client(
                vertexai=True, project=extra["vertex_project_id"], location=extra.get("vertex_region"), **kwargs
            )
        return genai.Client(api_key=self.settings.api_key or "not-provided", **kwargs)

    # ---- Model resolution ----
    def _resolve(self):
        selection = select_model(self.settings.model_id, GEMINI_MODELS, GEMINI_DEFAULT_MODEL_ID)
        info = selection.info
        default_temperature = info.default_temperature if info.default_temperature is not None else GEMINI_FALLBACK_TEMPERATURE
        params = get_model_params("gemini", selection.id, info, self.settings, default_temperature)
        model_id = selection.id
        if model_id.endswith(_THINKING_SUFFIX):
            model_id = model_id[: -len(_THINKING_SUFFIX)]
        return ModelSelection(id=model_id, info=info), params

    def get_model(self) -> ModelSelection:
        return self._resolve()[0]

    # ---- Request building ----
    def _temperature(self, selection: ModelSelection) -> Optional[float]:
        info = selection.info
        if info.supports_temperature is False:
            return info.default_temperature
        if self.settings.model_temperature is not None:
            return self.settings.model_temperature
        return info.default_temperature if info.default_temperature is not None else GEMINI_FALLBACK_TEMPERATURE

    def _builtin_tools(self) -> List[Dict[str, Any]]:
        tools: List[Dict[str, Any]] = []
        if self.settings.extra.get("gemini_enable_url_context"):
            tools.append({"url_context": {}})
        if self.settings.extra.get("gemini_enable_grounding"):
            tools.append({"google_search": {}})
        return tools

    def build_contents(self, messages: Sequence[Mapping[str, Any]], include_signatures: bool) -> List[Dict[str, Any]]:
        tool_names = build_tool_id_map(messages)
        contents = []
        for message in messages:
            if message.get("type") == "reasoning":
                continue
            content = convert_anthropic_message_to_gemini(
                message, include_thought_signatures=include_signatures, tool_id_to_name=tool_names
            )
            content["parts"] = _signature_bytes(content["parts"])
            contents.append(content)
        return contents

    def build_config(
        self,
        selection: ModelSelection,
        params: ModelParams,
        system_prompt: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        info = selection.info
        hybrid = info.supports_reasoning_budget or info.required_reasoning_budget
        max_output = (self.settings.model_max_tokens or params.max_tokens) if hybrid else params.max_tokens
        config: Dict[str, Any] = {"system_instruction": system_prompt}
        if params.reasoning:
            config["thinking_config"] = params.reasoning
        if max_output:
            config["max_output_tokens"] = max_output
        temperature = self._temperature(selection)
        if temperature is not None:
            config["temperature"] = temperature

        meta = metadata or {}
        tools = meta.get("tools")
        if tools:
            config["tools"] = [convert_openai_tools_to_gemini(tools)]
        elif self._builtin_tools():
            config["tools"] = self._builtin_tools()
        if meta.get("tool_choice"):
            mode, allowed = to_gemini_function_calling(meta["tool_choice"])
            calling: Dict[str, Any] = {"mode": mode}
            if allowed:
                calling["allowed_function_names"] = allowed
            config["tool_config"] = {"function_calling_config": calling}
        return config

    # ---- Streaming ----
    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[StreamEvent]:
        """Stream a response; grounding and usage follow all content events."""
        meta = metadata or {}
        selection, params = self._resolve()
        reasoning_on = bool(params.reasoning)
        contents = self.build_contents(messages, include_signatures=reasoning_on)
        config = self.build_config(selection, params, system_prompt, meta)
        state = self._last = GeminiStreamState(capture_signatures=reasoning_on)

        def _start():
            return self.client.models.generate_content_stream(model=selection.id, contents=contents, config=config)

        def _finalize() -> Iterator[StreamEvent]:
            if state.usage is None:
                estimated = estimate_usage(system_prompt, messages, config.get("max_output_tokens"))
                state.usage = {
                    "prompt_token_count": estimated.input_tokens,
                    "candidates_token_count": estimated.output_tokens,
                }
            yield from finalize_gemini(state, selection.info)

        yield from run_event_stream(
            ctx=LogContext(provider=self.provider_name, model=selection.id, request_id=meta.get("task_id")),
            provider_name=self.provider_name,
            label=self.label,
            model=selection.id,
            starter=_start,
            translator=lambda chunk: translate_gemini_chunk(chunk, state),
            finalizer=_finalize,
            logger=self._logger,
            cancellation_token=meta.get("cancellation_token"),
        )

    # ---- Continuation accessors ----
    def get_thought_signature(self) -> Optional[str]:
        return self._last.thought_signature

    def get_response_id(self) -> Optional[str]:
        return self._last.response_id

    def calculate_cost(
        self, info, input_tokens: int, output_tokens: int, cache_read_tokens: int = 0, reasoning_tokens: int = 0
    ) -> Optional[float]:
        return gemini_cost(info, input_tokens, output_tokens, cache_read_tokens, reasoning_tokens)

    # ---- One-shot helpers ----
    def complete_prompt(self, prompt: str) -> str:
        """Single completion; grounded answers get a trailing ``Sources:`` line."""
        selection, _ = self._resolve()
        config: Dict[str, Any] = {}
        temperature = self._temperature(selection)
        if temperature is not None:
            config["temperature"] = temperature
        if self._builtin_tools():
            config["tools"] = self._builtin_tools()
        try:
            response = self.client.models.generate_content(
                model=selection.id,
                contents=[{"role": "user", "parts": [{"text": prompt}]}],
                config=config,
            )
        except Exception as e:
            err = completion_error(self.label, e, provider=self.provider_name, model=selection.id)
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err from e
        text = attr_or_key(response, "text") or ""
        candidates = attr_or_key(response, "candidates") or []
        grounding = attr_or_key(candidates[0], "grounding_metadata") if candidates else None
        links = citations(grounding) if grounding is not None else None
        if links:
            text += f"\n\nSources: {links}"
        return text

    def count_tokens(self, content: Sequence[Mapping[str, Any]]) -> int:
        """Count with the vendor endpoint, estimating locally on failure."""
        model_id = self.get_model().id
        try:
            response = self.client.models.count_tokens(
                model=model_id,
                contents=convert_anthropic_content_to_gemini(list(content), include_thought_signatures=False),
            )
        except Exception as e:
            self._logger.warning("gemini token counting failed, using estimate: %s", e)
            return count_content_tokens(content)
        total = attr_or_key(response, "total_tokens")
        if total is None:
            self._logger.warning("gemini token counting returned no total, using estimate")
            return count_content_tokens(content)
        return int(total)


__all__ = ["GeminiHandler"]
