"""UnboundHandler adapter.

Unbound is a gateway in front of many vendors. Ids carry a vendor prefix
(``anthropic/claude-sonnet-4-5``); the gateway receives the part after the
prefix and routes on its own. Every request is tagged twice: the
``X-Unbound-Metadata`` header labels the calling app, and the
``unbound_metadata`` body field carries the app, task id and mode.

Per-model rules:
- ``max_tokens`` is only sent to ``anthropic/`` models (their catalog limit).
- Models that cache prompts get Anthropic or Gemini cache breakpoints
  depending on their prefix.
- Usage reports Anthropic-style cache counters
  (``cache_creation_input_tokens``, ``cache_read_input_tokens``).
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..base.catalog import ModelCatalogCache
from ..base.models import ModelSelection
from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile, parse_chat_usage
from ..base.streaming import UsageEvent
from ..base.transform import convert_to_openai_messages
from ..base.utils import attr_or_key
from ..config.defaults import (
    UNBOUND_DEFAULT_BASE_URL,
    UNBOUND_METADATA_HEADER,
    UNBOUND_MODELS_URL,
    UNBOUND_ORIGIN_APP,
)
from ..openrouter.helpers import add_anthropic_cache_breakpoints, add_gemini_cache_breakpoints
from .get_unbound_models import fetch_unbound_models
from .models import UNBOUND_DEFAULT_MODEL_ID, UNBOUND_MODELS

# Reasoning models that reject the temperature parameter.
_NO_TEMPERATURE_PREFIXES = ("openai/o3-mini",)


def upstream_model_id(model_id: str) -> str:
    """Strip the vendor prefix: ``anthropic/claude-x`` -> ``claude-x``."""
    _, sep, rest = model_id.partition("/")
    return rest if sep else model_id


def parse_unbound_usage(usage: Any) -> Optional[UsageEvent]:
    event = parse_chat_usage(usage)
    if event is None:
        return None
    return replace(
        event,
        cache_write_tokens=attr_or_key(usage, "cache_creation_input_tokens"),
        cache_read_tokens=attr_or_key(usage, "cache_read_input_tokens") or event.cache_read_tokens,
    )


class UnboundHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="unbound",
        label="Unbound",
        default_model_id=UNBOUND_DEFAULT_MODEL_ID,
        models=UNBOUND_MODELS,
        default_base_url=UNBOUND_DEFAULT_BASE_URL,
        think_tags=False,
        usage_parser=parse_unbound_usage,
    )

    def __init__(self, settings=None, client=None, catalog=None) -> None:
        super().__init__(settings=settings, client=client, catalog=catalog)
        if self._catalog is None:
            api_key = self.settings.api_key
            self._catalog = ModelCatalogCache({"unbound": lambda: fetch_unbound_models(api_key, UNBOUND_MODELS_URL)})

    def _supports_temperature(self, model_id: str) -> bool:
        return not model_id.startswith(_NO_TEMPERATURE_PREFIXES)

    def _convert_messages(
        self, selection: ModelSelection, system_prompt: str, messages: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Dict[str, Any]]]:
        converted = [{"role": "system", "content": system_prompt}, *convert_to_openai_messages(messages)]
        if selection.info.supports_prompt_cache:
            if selection.id.startswith("google/"):
                converted = add_gemini_cache_breakpoints(system_prompt, converted)
            elif selection.id.startswith("anthropic/"):
                converted = add_anthropic_cache_breakpoints(system_prompt, converted)
        return converted

    def _max_tokens(self, selection: ModelSelection) -> Optional[int]:
        if selection.id.startswith("anthropic/"):
            return selection.info.max_tokens
        return None

    def _extra_params(self, selection: ModelSelection, params: Dict[str, Any]) -> None:
        params["model"] = upstream_model_id(selection.id)
        params.pop("max_tokens", None)
        max_tokens = self._max_tokens(selection)
        if max_tokens:
            params["max_tokens"] = max_tokens
        if not self._supports_temperature(selection.id):
            params.pop("temperature", None)
        if "tools" in params:
            if selection.info.supports_native_tools:
                params.setdefault("parallel_tool_calls", False)
            else:
                for key in ("tools", "tool_choice", "parallel_tool_calls"):
                    params.pop(key, None)

    def _request_options(self, selection: ModelSelection, metadata: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        body_meta = {
            "originApp": UNBOUND_ORIGIN_APP,
            "taskId": metadata.get("task_id"),
            "mode": metadata.get("mode"),
        }
        labels = {"labels": [{"key": "app", "value": UNBOUND_ORIGIN_APP}]}
        return {
            "extra_headers": {UNBOUND_METADATA_HEADER: json.dumps(labels)},
            "extra_body": {"unbound_metadata": {k: v for k, v in body_meta.items() if v is not None}},
        }

    def complete_prompt(self, prompt: str) -> str:
        selection = self.fetch_model()
        body: Dict[str, Any] = {
            "model": upstream_model_id(selection.id),
            "messages": [{"role": "user", "content": prompt}],
        }
        if self._supports_temperature(selection.id):
            user = self.settings.model_temperature
            body["temperature"] = user if user is not None else 0.0
        max_tokens = self._max_tokens(selection)
        if max_tokens:
            body["max_tokens"] = max_tokens
        return self._chat.complete(body, self._request_options(selection, {}))


__all__ = ["UnboundHandler", "parse_unbound_usage", "upstream_model_id"]
