"""
Roo Code Cloud: get models

Behavior
- Fetches ``GET {base}/v1/models`` (a trailing ``/v1`` on the base is
  stripped first so the path is never doubled).
- Prices arrive as per-token decimal strings and are converted to USD per
  million tokens.
- Tags drive capabilities: ``vision`` -> images, ``reasoning`` -> effort
  support, ``reasoning-required`` -> required effort, ``tool-use`` -> native
  tools, ``free`` -> free model. A cache-read price marks prompt caching.
- Failures raise ``RuntimeError`` with an actionable message.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

import httpx

from ..base.http import get_httpx_client
from ..base.logging import get_logger, log_event
from ..base.models import ModelInfo

PROVIDER = "roo"
_FETCH_TIMEOUT_SECONDS = 10.0
_V1_SUFFIX_RE = re.compile(r"/?v1/?$")

_logger = get_logger("providers.roo.models")


def models_url(base_url: str) -> str:
    return f"{_V1_SUFFIX_RE.sub('', base_url)}/v1/models"


def parse_api_price(value: Any) -> Optional[float]:
    """Per-token price string -> USD per million tokens (``None`` when absent)."""
    if value is None or value == "":
        return None
    return float(value) * 1_000_000


def _to_model_info(item: Mapping[str, Any]) -> ModelInfo:
    tags = item.get("tags") or []
    pricing = item.get("pricing") or {}
    cache_reads = parse_api_price(pricing.get("input_cache_read"))
    return ModelInfo(
        context_window=int(item["context_window"]),
        max_tokens=int(item["max_tokens"]),
        supports_images="vision" in tags,
        supports_reasoning_effort="reasoning" in tags,
        required_reasoning_effort="reasoning-required" in tags,
        supports_native_tools="tool-use" in tags,
        supports_prompt_cache=cache_reads is not None,
        input_price=parse_api_price(pricing.get("input")),
        output_price=parse_api_price(pricing.get("output")),
        cache_writes_price=parse_api_price(pricing.get("input_cache_write")),
        cache_reads_price=cache_reads,
        description=item.get("description") or item.get("name"),
        is_free="free" in tags,
    )


def fetch_roo_models(base_url: str, api_key: Optional[str] = None) -> Dict[str, ModelInfo]:
    """Fetch the Roo Code Cloud catalog.

    Raises:
        RuntimeError: timeout, HTTP error, unreachable server or a payload that
            does not match the listing shape.
    """
    url = models_url(base_url)
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    try:
        resp = get_httpx_client(None, "catalog").get(url, headers=headers, timeout=_FETCH_TIMEOUT_SECONDS)
        resp.raise_for_status()
        data = resp.json()
    except httpx.TimeoutException as e:
        log_event(_logger, "catalog.fetch_failed", provider=PROVIDER, url=url, error=str(e))
        raise RuntimeError("Failed to fetch Roo Code Cloud models: Request timed out after 10 seconds.") from e
    except httpx.HTTPStatusError as e:
        log_event(_logger, "catalog.fetch_failed", provider=PROVIDER, url=url, status=e.response.status_code)
        raise RuntimeError(
            f"Failed to fetch Roo Code Cloud models: HTTP {e.response.status_code}: "
            f"{e.response.reason_phrase}. Check base URL and API key."
        ) from e
    except httpx.TransportError as e:
        log_event(_logger, "catalog.fetch_failed", provider=PROVIDER, url=url, error=str(e))
        raise RuntimeError(
            "Failed to fetch Roo Code Cloud models: No response from server. "
            "Check Roo Code Cloud server status and base URL."
        ) from e
    except ValueError as e:
        raise RuntimeError("Failed to fetch Roo Code Cloud models: Unexpected response format.") from e

    items = data.get("data") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise RuntimeError("Failed to fetch Roo Code Cloud models: Unexpected response format.")
    models: Dict[str, ModelInfo] = {}
    for item in items:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        try:
            models[item["id"]] = _to_model_info(item)
        except (KeyError, TypeError, ValueError) as e:
            raise RuntimeError("Failed to fetch Roo Code Cloud models: Unexpected response format.") from e
    return models


__all__ = ["fetch_roo_models", "models_url", "parse_api_price"]
