"""
Chutes: get models

Behavior
- Fetches the live listing from the OpenAI-style endpoint:
    GET https://llm.chutes.ai/v1/models
- Each entry maps ``context_length`` -> context window, ``max_model_len`` ->
  max tokens and an ``"image"`` input modality -> image support.
- The result is the static table with live entries layered on top; when the
  request fails the static table is returned unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..base.http import get_httpx_client
from ..base.logging import get_logger, log_event
from ..base.models import ModelInfo
from ..config.defaults import CHUTES_DEFAULT_BASE_URL
from .models import CHUTES_MODELS

PROVIDER = "chutes"

_logger = get_logger("providers.chutes.models")


def _to_model_info(item: Dict[str, Any]) -> ModelInfo:
    return ModelInfo(
        context_window=int(item["context_length"]),
        max_tokens=int(item["max_model_len"]),
        supports_images="image" in (item.get("input_modalities") or []),
        input_price=0.0,
        output_price=0.0,
        description=f"Chutes AI model: {item['id']}",
    )


def _fetch_via_http(api_key: Optional[str], base_url: str) -> Dict[str, ModelInfo]:
    headers = {"Accept": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    resp = get_httpx_client(None, "catalog").get(base_url.rstrip("/") + "/models", headers=headers)
    resp.raise_for_status()
    data = resp.json()
    raw = data.get("data", []) if isinstance(data, dict) else []
    models: Dict[str, ModelInfo] = {}
    for item in raw:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        try:
            models[item["id"]] = _to_model_info(item)
        except (KeyError, TypeError, ValueError):
            log_event(_logger, "catalog.entry_skipped", provider=PROVIDER, model=item.get("id"))
    return models


def fetch_chutes_models(api_key: Optional[str] = None, base_url: str = CHUTES_DEFAULT_BASE_URL) -> Dict[str, ModelInfo]:
    """Return the static table merged with the live Chutes catalog."""
    models: Dict[str, ModelInfo] = dict(CHUTES_MODELS)
    try:
        models.update(_fetch_via_http(api_key, base_url))
    except (httpx.HTTPError, ValueError) as e:
        log_event(_logger, "catalog.fetch_failed", provider=PROVIDER, error=str(e))
    return models


__all__ = ["fetch_chutes_models"]
