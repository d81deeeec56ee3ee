"""
Unbound: get models

Behavior
- Fetches the gateway listing:
    GET https://api.getunbound.ai/models
  The body maps each model id to ``contextWindow``, ``maxTokens``,
  ``supportsImages``, ``supportsPromptCaching`` and per-million prices
  (``inputTokenPrice``, ``outputTokenPrice``, ``cacheWritePrice``,
  ``cacheReadPrice``). Prices may arrive as strings.
- ``anthropic/`` entries are capped at 8192 output tokens unless the listing
  reports exactly 4096.
- The result is the static table with live entries layered on top; when the
  request fails the static table is returned unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx

from ..base.http import get_httpx_client
from ..base.logging import get_logger, log_event
from ..base.models import ModelInfo
from ..config.defaults import UNBOUND_ANTHROPIC_MAX_TOKENS, UNBOUND_MODELS_URL
from .models import UNBOUND_MODELS

PROVIDER = "unbound"

_logger = get_logger("providers.unbound.models")


def _price(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _to_model_info(model_id: str, item: Mapping[str, Any]) -> ModelInfo:
    max_tokens = item.get("maxTokens")
    max_tokens = int(max_tokens) if max_tokens is not None else None
    if model_id.startswith("anthropic/") and max_tokens != 4096:
        max_tokens = UNBOUND_ANTHROPIC_MAX_TOKENS
    return ModelInfo(
        context_window=int(item.get("contextWindow") or 0),
        max_tokens=max_tokens,
        supports_images=bool(item.get("supportsImages")),
        supports_prompt_cache=bool(item.get("supportsPromptCaching")),
        supports_native_tools=True,
        input_price=_price(item.get("inputTokenPrice")),
        output_price=_price(item.get("outputTokenPrice")),
        cache_writes_price=_price(item.get("cacheWritePrice")),
        cache_reads_price=_price(item.get("cacheReadPrice")),
    )


def _fetch_via_http(api_key: Optional[str], url: str) -> Dict[str, ModelInfo]:
    headers = {"Accept": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    resp = get_httpx_client(None, "catalog").get(url, headers=headers)
    resp.raise_for_status()
    data = resp.json()
    models: Dict[str, ModelInfo] = {}
    if not isinstance(data, dict):
        return models
    for model_id, item in data.items():
        if not isinstance(item, dict):
            continue
        try:
            models[model_id] = _to_model_info(model_id, item)
        except (TypeError, ValueError):
            log_event(_logger, "catalog.entry_skipped", provider=PROVIDER, model=model_id)
    return models


def fetch_unbound_models(api_key: Optional[str] = None, url: str = UNBOUND_MODELS_URL) -> Dict[str, ModelInfo]:
    """Return the static table merged with the live Unbound listing."""
    models: Dict[str, ModelInfo] = dict(UNBOUND_MODELS)
    try:
        models.update(_fetch_via_http(api_key, url))
    except (httpx.HTTPError, ValueError) as e:
        log_event(_logger, "catalog.fetch_failed", provider=PROVIDER, error=str(e))
    return models


__all__ = ["fetch_unbound_models"]
