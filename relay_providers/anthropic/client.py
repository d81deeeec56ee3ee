"""AnthropicHandler adapter.

This module implements the Anthropic Messages API integration using the
``anthropic`` SDK. Streaming requests go through ``client.messages.create``
with ``stream=True``; the raw event stream is translated by
:mod:`relay_providers.anthropic.stream_helpers` and driven by the shared
:func:`run_event_stream` loop.

Key behaviors:
* Non-Anthropic blocks (``reasoning``, ``thoughtSignature``) are filtered out of
  the history before sending.
* Prompt-cache-capable models get the caching beta, an ephemeral system block
  and breakpoints on the last two user turns.
* Fine-grained tool streaming is always requested; the 1M context beta is
  opt-in via ``settings.extra["anthropic_beta_1m_context"]``.
* ``tool_choice="none"`` omits tools entirely (Anthropic has no "none").
* After the stream ends one cost-only usage event is emitted, priced with the
  non-cache-inclusive Anthropic convention.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

try:
    import anthropic  # type: ignore
except Exception:  # pragma: no cover
    anthropic = None  # type: ignore

from ..base.errors import completion_error
from ..base.logging import LogContext, get_logger, log_provider_error
from ..base.models import ModelInfo, ModelSelection, ProviderSettings, resolve_settings, select_model
from ..base.params import ModelParams, get_model_params
from ..base.pricing import calculate_api_cost_anthropic
from ..base.streaming import StreamEvent, UsageEvent, run_event_stream
from ..base.tools import convert_openai_tools_to_anthropic, to_anthropic_tool_choice
from ..base.transform import add_cache_breakpoints, filter_non_anthropic_blocks, system_blocks
from ..base.usage import count_content_tokens, estimate_usage
from ..base.utils import attr_or_key
from ..config.defaults import (
    ANTHROPIC_DEFAULT_BETAS,
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_PROMPT_CACHING_BETA,
)
from .models import ANTHROPIC_1M_CONTEXT_MODELS, ANTHROPIC_DEFAULT_MODEL_ID, ANTHROPIC_MODELS
from .stream_helpers import AnthropicStreamState, translate_stream_event

_THINKING_SUFFIX = ":thinking"
_OUTPUT_128K_BETA = "output-128k-2025-02-19"
_CONTEXT_1M_BETA = "context-1m-2025-08-07"


@dataclass(frozen=True)
class AnthropicModel:
    """Resolved model: API id, descriptor, request parameters and betas."""

    id: str
    info: ModelInfo
    params: ModelParams
    betas: Tuple[str, ...]


class AnthropicHandler:
    """Streaming handler for the Anthropic Messages API.

    Args:
        settings: Per-handler settings; unset credentials come from config.
        client: Optional pre-built ``anthropic.Anthropic`` client (tests,
            custom transports). Built lazily from settings otherwise.
    """

    provider_name = "anthropic"
    label = "Anthropic"

    def __init__(self, settings: Optional[ProviderSettings] = None, client: Any = None) -> None:
        self.settings = resolve_settings(self.provider_name, settings)
        self._client = client
        self._logger = get_logger("providers.anthropic")

    @property
    def client(self):
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """Instantiate the SDK client.

        Proxies that expect a bearer token rather than ``x-api-key`` are
        served with ``auth_token`` when a base URL is configured and
        ``extra["anthropic_use_auth_token"]`` is set.
        """
        if anthropic is None:
            raise completion_error(self.label, RuntimeError("anthropic SDK not installed"), provider=self.provider_name)
        kwargs: Dict[str, Any] = {}
        if self.settings.base_url:
            kwargs["base_url"] = self.settings.base_url
        if self.settings.headers:
            kwargs["default_headers"] = dict(self.settings.headers)
        if self.settings.base_url and self.settings.extra.get("anthropic_use_auth_token"):
            kwargs["auth_token"] = self.settings.api_key
        else:
            kwargs["api_key"] = self.settings.api_key
        return anthropic.Anthropic(**kwargs)

    # ---- Model resolution ----
    def _resolve_model(self) -> AnthropicModel:
        selection = select_model(self.settings.model_id, ANTHROPIC_MODELS, ANTHROPIC_DEFAULT_MODEL_ID)
        model_id, info = selection.id, selection.info
        betas: List[str] = list(ANTHROPIC_DEFAULT_BETAS)
        if model_id in ANTHROPIC_1M_CONTEXT_MODELS and self.settings.extra.get("anthropic_beta_1m_context"):
            betas.append(_CONTEXT_1M_BETA)
            if info.tiers:
                tier = info.tiers[0]
                info = replace(
                    info,
                    context_window=int(tier.context_window),
                    input_price=tier.input_price,
                    output_price=tier.output_price,
                    cache_writes_price=tier.cache_writes_price,
                    cache_reads_price=tier.cache_reads_price,
                )
        params = get_model_params("anthropic", model_id, info, self.settings)
        if model_id.endswith(_THINKING_SUFFIX):
            model_id = model_id[: -len(_THINKING_SUFFIX)]
            betas.append(_OUTPUT_128K_BETA)
        return AnthropicModel(id=model_id, info=info, params=params, betas=tuple(betas))

    def get_model(self) -> ModelSelection:
        resolved = self._resolve_model()
        return ModelSelection(id=resolved.id, info=resolved.info)

    # ---- Request building ----
    def _uses_prompt_cache(self, info: ModelInfo) -> bool:
        return info.supports_prompt_cache and self.settings.use_prompt_cache

    def build_params(
        self,
        resolved: AnthropicModel,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Build the ``messages.create`` keyword arguments for a stream."""
        cache = self._uses_prompt_cache(resolved.info)
        sanitized = filter_non_anthropic_blocks(messages)
        params: Dict[str, Any] = {
            "model": resolved.id,
            "max_tokens": resolved.params.max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS,
            "system": system_blocks(system_prompt, cache),
            "messages": add_cache_breakpoints(sanitized) if cache else sanitized,
            "stream": True,
        }
        if resolved.params.temperature is not None:
            params["temperature"] = resolved.params.temperature
        if resolved.params.reasoning:
            params["thinking"] = resolved.params.reasoning

        meta = metadata or {}
        tools = meta.get("tools")
        if tools and meta.get("tool_choice") != "none":
            params["tools"] = convert_openai_tools_to_anthropic(tools)
            params["tool_choice"] = to_anthropic_tool_choice(meta.get("tool_choice"), meta.get("parallel_tool_calls"))

        betas = list(resolved.betas)
        if cache:
            betas.append(ANTHROPIC_PROMPT_CACHING_BETA)
        params["extra_headers"] = {"anthropic-beta": ",".join(betas)}
        return params

    # ---- Streaming ----
    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[StreamEvent]:
        """Stream a response as uniform events.

        Ordering: content and incremental usage events follow the vendor
        stream; the cost-only usage event is always last.
        """
        meta = metadata or {}
        resolved = self._resolve_model()
        params = self.build_params(resolved, system_prompt, messages, meta)
        state = AnthropicStreamState()

        def _start():
            return self.client.messages.create(**params)

        def _finalize() -> Iterator[StreamEvent]:
            yield from state.tools.complete_all()
            if not state.saw_usage:
                estimated = estimate_usage(system_prompt, messages, params["max_tokens"])
                state.input_tokens, state.output_tokens = estimated.input_tokens, estimated.output_tokens
                yield estimated
            if state.saw_usage and not state.has_tokens:
                return
            cost = calculate_api_cost_anthropic(
                resolved.info,
                state.input_tokens,
                state.output_tokens,
                state.cache_write_tokens,
                state.cache_read_tokens,
            )
            yield UsageEvent(input_tokens=0, output_tokens=0, total_cost=cost.total_cost)

        yield from run_event_stream(
            ctx=LogContext(provider=self.provider_name, model=resolved.id, request_id=meta.get("task_id")),
            provider_name=self.provider_name,
            label=self.label,
            model=resolved.id,
            starter=_start,
            translator=lambda event: translate_stream_event(event, state),
            finalizer=_finalize,
            logger=self._logger,
            cancellation_token=meta.get("cancellation_token"),
        )

    # ---- One-shot helpers ----
    def complete_prompt(self, prompt: str) -> str:
        """Single non-streaming completion; returns the first text block."""
        resolved = self._resolve_model()
        body: Dict[str, Any] = {
            "model": resolved.id,
            "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }
        if resolved.params.temperature is not None:
            body["temperature"] = resolved.params.temperature
        try:
            message = self.client.messages.create(**body)
        except Exception as e:
            err = completion_error(self.label, e, provider=self.provider_name, model=resolved.id)
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err from e
        for block in attr_or_key(message, "content", []):
            if attr_or_key(block, "type") == "text":
                return attr_or_key(block, "text", "")
        return ""

    def count_tokens(self, content: Sequence[Mapping[str, Any]]) -> int:
        """Count tokens with the vendor endpoint, estimating locally on failure."""
        model_id = self._resolve_model().id
        try:
            response = self.client.messages.count_tokens(
                model=model_id, messages=[{"role": "user", "content": list(content)}]
            )
            return int(attr_or_key(response, "input_tokens", 0))
        except Exception as e:
            self._logger.warning("anthropic token counting failed, using estimate: %s", e)
            return count_content_tokens(content)


__all__ = ["AnthropicHandler", "AnthropicModel"]
