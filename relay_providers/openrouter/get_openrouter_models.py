"""
OpenRouter: get models

Behavior
- ``fetch_openrouter_models`` lists ``GET {base}/models`` and normalizes each
  entry into a :class:`ModelInfo`:
    * ``context_length`` -> context window,
      ``top_provider.max_completion_tokens`` -> max tokens;
    * ``pricing.prompt`` / ``completion`` / ``input_cache_read`` /
      ``input_cache_write`` are per-token decimal strings, converted to USD per
      million tokens;
    * an ``image`` input modality marks image support, ``tools`` in
      ``supported_parameters`` marks native tools; ``reasoning`` marks budget
      support for Claude 3.7+/Gemini 2.5 families and effort support otherwise;
      a ``:thinking`` suffix makes the budget mandatory.
- ``fetch_openrouter_endpoints`` lists ``GET {base}/models/{id}/endpoints`` and
  keys each upstream provider's descriptor by provider name.
- HTTP failures propagate as ``httpx`` exceptions; the catalog cache never
  stores a failed fetch.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..base.http import get_httpx_client
from ..base.logging import get_logger, log_event
from ..base.models import ModelInfo
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL
from .models import OPENROUTER_REASONING_BUDGET_PREFIXES

PROVIDER = "openrouter"

_logger = get_logger("providers.openrouter.models")


def _price(value: Any) -> Optional[float]:
    if value in (None, ""):
        return None
    return float(value) * 1_000_000


def _to_model_info(item: Mapping[str, Any], *, max_tokens: Optional[int] = None) -> ModelInfo:
    pricing = item.get("pricing") or {}
    arch = item.get("architecture") or {}
    params = item.get("supported_parameters") or []
    cache_reads = _price(pricing.get("input_cache_read"))
    model_id = str(item.get("id", ""))
    reasoning = "reasoning" in params
    budget = reasoning and model_id.startswith(OPENROUTER_REASONING_BUDGET_PREFIXES)
    return ModelInfo(
        context_window=int(item.get("context_length") or 0),
        max_tokens=max_tokens,
        supports_images="image" in (arch.get("input_modalities") or []),
        supports_prompt_cache=cache_reads is not None,
        supports_native_tools="tools" in params,
        supports_reasoning_budget=budget,
        required_reasoning_budget=model_id.endswith(":thinking"),
        supports_reasoning_effort=reasoning and not budget,
        input_price=_price(pricing.get("prompt")),
        output_price=_price(pricing.get("completion")),
        cache_writes_price=_price(pricing.get("input_cache_write")),
        cache_reads_price=cache_reads,
        description=item.get("description"),
    )


def _get_json(path: str, api_key: Optional[str], base_url: str) -> Any:
    headers = {"Accept": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    resp = get_httpx_client(None, "catalog").get(base_url.rstrip("/") + path, headers=headers)
    resp.raise_for_status()
    return resp.json()


def fetch_openrouter_models(api_key: Optional[str] = None, base_url: str = OPENROUTER_DEFAULT_BASE_URL) -> Dict[str, ModelInfo]:
    data = _get_json("/models", api_key, base_url)
    models: Dict[str, ModelInfo] = {}
    for item in (data or {}).get("data", []):
        if not isinstance(item, dict) or not item.get("id"):
            continue
        top = item.get("top_provider") or {}
        models[item["id"]] = _to_model_info(item, max_tokens=top.get("max_completion_tokens"))
    log_event(_logger, "catalog.parsed", provider=PROVIDER, count=len(models))
    return models


def fetch_openrouter_endpoints(
    model_id: str, api_key: Optional[str] = None, base_url: str = OPENROUTER_DEFAULT_BASE_URL
) -> Dict[str, ModelInfo]:
    """Per-upstream-provider descriptors for one model, keyed by provider name."""
    data = _get_json(f"/models/{model_id}/endpoints", api_key, base_url)
    payload = (data or {}).get("data") or {}
    endpoints: Dict[str, ModelInfo] = {}
    for endpoint in payload.get("endpoints", []):
        name = endpoint.get("provider_name") or endpoint.get("name")
        if not name:
            continue
        merged = {
            "id": model_id,
            "architecture": payload.get("architecture"),
            **endpoint,
        }
        endpoints[name] = _to_model_info(merged, max_tokens=endpoint.get("max_completion_tokens"))
    return endpoints


__all__ = ["fetch_openrouter_endpoints", "fetch_openrouter_models"]
