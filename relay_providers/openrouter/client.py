"""OpenRouterHandler adapter.

OpenRouter fronts many vendors behind the Chat Completions protocol. This
handler reuses :class:`BaseOpenAICompatibleHandler` and layers on:

* dynamic model descriptors from the catalog (unknown ids keep their id and
  use the default descriptor), optionally replaced by the pinned upstream
  provider's endpoint descriptor;
* R1-format messages for DeepSeek R1 style models (``top_p`` 0.95,
  temperature 0.6);
* ``cache_control`` breakpoints for caching-capable Claude and Gemini models;
* ``reasoning`` payloads from the resolver (Gemini 2.5 Pro excludes reasoning
  unless configured), ``middle-out`` transforms and provider pinning;
* embedded ``error`` chunks raised as :class:`ProviderError`;
* ``reasoning_details`` accumulated per request and exposed through
  :meth:`OpenRouterHandler.get_reasoning_details` for the next turn;
* cost taken from the usage chunk (``cost`` plus upstream inference cost).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

try:
    from openai import OpenAI
except Exception:  # pragma: no cover
    OpenAI = None  # type: ignore

from ..base.catalog import ModelCatalogCache
from ..base.errors import ProviderError, completion_error, handle_openai_error
from ..base.logging import log_provider_error
from ..base.models import ModelInfo, ModelSelection, select_model
from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile
from ..base.params import get_model_params
from ..base.streaming import UsageEvent
from ..base.transform import convert_to_openai_messages, convert_to_r1_format
from ..base.utils import attr_or_key
from ..config.defaults import (
    ANTHROPIC_DEFAULT_BETAS,
    DEEPSEEK_DEFAULT_TEMPERATURE,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_HEADERS,
)
from .get_openrouter_models import fetch_openrouter_endpoints, fetch_openrouter_models
from .helpers import (
    add_anthropic_cache_breakpoints,
    add_gemini_cache_breakpoints,
    attach_reasoning_details,
    inject_gemini_signature_placeholders,
    is_r1_family,
    provider_routing,
)
from .models import (
    OPENROUTER_DEFAULT_MODEL_ID,
    OPENROUTER_DEFAULT_MODEL_INFO,
    OPENROUTER_MODELS,
    OPENROUTER_PROMPT_CACHING_MODELS,
    OPENROUTER_REASONING_EXCLUDED_BY_DEFAULT,
)
from .stream_helpers import ReasoningDetailsAccumulator, openrouter_reasoning, raise_on_error_chunk

R1_TOP_P = 0.95


def openrouter_usage_cost(info: ModelInfo, usage: UsageEvent, raw_usage: Any = None) -> float:
    """Billed cost reported by OpenRouter, including BYOK upstream cost."""
    upstream = attr_or_key(attr_or_key(raw_usage, "cost_details"), "upstream_inference_cost", 0.0)
    return float(upstream or 0.0) + float(attr_or_key(raw_usage, "cost", 0.0) or 0.0)


def endpoints_key(model_id: str) -> str:
    return f"openrouter-endpoints:{model_id}"


class OpenRouterHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="openrouter",
        label="OpenRouter",
        default_model_id=OPENROUTER_DEFAULT_MODEL_ID,
        models=OPENROUTER_MODELS,
        default_base_url=OPENROUTER_DEFAULT_BASE_URL,
        think_tags=False,
        requires_api_key=False,
        fallback_info=OPENROUTER_DEFAULT_MODEL_INFO,
        cost_fn=openrouter_usage_cost,
    )

    def __init__(self, settings=None, client=None, catalog=None) -> None:
        super().__init__(settings=settings, client=client, catalog=catalog)
        self._reasoning = ReasoningDetailsAccumulator()
        if self._catalog is None:
            api_key, base_url = self.settings.api_key, self._base_url()
            fetchers = {"openrouter": lambda: fetch_openrouter_models(api_key, base_url)}
            model_id = self.settings.model_id
            if model_id and self._pinned_provider():
                fetchers[endpoints_key(model_id)] = lambda: fetch_openrouter_endpoints(model_id, api_key, base_url)
            self._catalog = ModelCatalogCache(fetchers)

    def _make_client(self):
        if OpenAI is None:
            raise completion_error(self.profile.label, RuntimeError("openai SDK not installed"), provider="openrouter")
        return OpenAI(
            api_key=self.settings.api_key or "not-provided",
            base_url=self._base_url(),
            default_headers={**OPENROUTER_DEFAULT_HEADERS, **dict(self.settings.headers)},
        )

    # ---- Models ----
    def _pinned_provider(self) -> Optional[str]:
        routing = provider_routing(self.settings.openrouter_specific_provider)
        return routing["only"][0] if routing else None

    def _endpoint_info(self, model_id: str) -> Optional[ModelInfo]:
        pinned = self._pinned_provider()
        if not pinned:
            return None
        endpoints = self._catalog.get_models_from_cache(endpoints_key(model_id)) or {}
        return endpoints.get(pinned)

    def get_model(self) -> ModelSelection:
        selection = select_model(
            self.settings.model_id, self._models(), OPENROUTER_DEFAULT_MODEL_ID, OPENROUTER_DEFAULT_MODEL_INFO
        )
        endpoint = self._endpoint_info(selection.id)
        return ModelSelection(id=selection.id, info=endpoint) if endpoint is not None else selection

    def fetch_model(self) -> ModelSelection:
        model_id = self.settings.model_id
        try:
            self._catalog.get_models(self.provider_name)
            if model_id and self._pinned_provider():
                self._catalog.get_models(endpoints_key(model_id))
        except Exception as e:
            err = completion_error(self.profile.label, e, provider=self.provider_name)
            log_provider_error(self._logger, err, operation="fetch_model")
            raise err from e
        return self.get_model()

    def get_reasoning_details(self) -> Optional[List[Dict[str, Any]]]:
        """Complete ``reasoning_details`` of the last stream, if any arrived."""
        values = self._reasoning.values()
        return values or None

    # ---- Request shaping ----
    def _default_temperature(self, selection: ModelSelection) -> Optional[float]:
        return DEEPSEEK_DEFAULT_TEMPERATURE if is_r1_family(selection.id) else 0.0

    def _convert_messages(
        self, selection: ModelSelection, system_prompt: str, messages: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Dict[str, Any]]]:
        model_id = selection.id
        if is_r1_family(model_id):
            converted = convert_to_r1_format([{"role": "user", "content": system_prompt}, *messages])
        else:
            converted = [
                {"role": "system", "content": system_prompt},
                *attach_reasoning_details(messages, convert_to_openai_messages(messages)),
            ]
        if model_id.startswith("google/gemini") and selection.info.supports_native_tools:
            converted = inject_gemini_signature_placeholders(converted)
        if model_id in OPENROUTER_PROMPT_CACHING_MODELS:
            if model_id.startswith("google"):
                converted = add_gemini_cache_breakpoints(system_prompt, converted)
            else:
                converted = add_anthropic_cache_breakpoints(system_prompt, converted)
        return converted

    def _common_params(self, selection: ModelSelection, params: Dict[str, Any]) -> None:
        model_params = get_model_params(
            "openrouter", selection.id, selection.info, self.settings, self._default_temperature(selection)
        )
        if model_params.max_tokens and model_params.max_tokens > 0:
            params["max_tokens"] = model_params.max_tokens
        else:
            params.pop("max_tokens", None)
        if model_params.temperature is None:
            params.pop("temperature", None)
        else:
            params["temperature"] = model_params.temperature
        reasoning = model_params.reasoning
        if reasoning is None and selection.id in OPENROUTER_REASONING_EXCLUDED_BY_DEFAULT:
            reasoning = {"exclude": True}
        if reasoning:
            params["reasoning"] = reasoning
        routing = provider_routing(self.settings.openrouter_specific_provider)
        if routing:
            params["provider"] = routing

    def _extra_params(self, selection: ModelSelection, params: Dict[str, Any]) -> None:
        self._common_params(selection, params)
        if is_r1_family(selection.id):
            params["top_p"] = R1_TOP_P
        if self.settings.openrouter_use_middle_out:
            params["transforms"] = ["middle-out"]

    def _request_options(self, selection: ModelSelection, metadata: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if not selection.id.startswith("anthropic/"):
            return None
        return {"extra_headers": {"x-anthropic-beta": ",".join(ANTHROPIC_DEFAULT_BETAS)}}

    def _stream_hooks(self, selection: ModelSelection, params: Mapping[str, Any]) -> Dict[str, Any]:
        self._reasoning = ReasoningDetailsAccumulator()
        return {
            "chunk_hook": lambda chunk: raise_on_error_chunk(chunk, selection.id),
            "reasoning_extractor": openrouter_reasoning(self._reasoning),
        }

    # ---- One-shot ----
    def complete_prompt(self, prompt: str) -> str:
        selection = self.fetch_model()
        body: Dict[str, Any] = {"model": selection.id, "messages": [{"role": "user", "content": prompt}]}
        self._common_params(selection, body)
        options = self._request_options(selection, {}) or {}
        try:
            response = self.client.chat.completions.create(**body, **options)
        except Exception as e:
            err = handle_openai_error(e, self.profile.label, provider=self.provider_name, model=selection.id)
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err from e
        try:
            for _ in raise_on_error_chunk(response, selection.id):
                pass
        except ProviderError as err:
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise
        choices = attr_or_key(response, "choices") or []
        message = attr_or_key(choices[0], "message") if choices else None
        return attr_or_key(message, "content") or ""


__all__ = ["OpenRouterHandler", "openrouter_usage_cost"]
