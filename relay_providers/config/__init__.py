"""Unified configuration layer for relay providers.

Sources are merged in a predictable order (later wins):

1. Built-in defaults (``DEFAULTS`` below, values from ``config.defaults``)
2. Optional external config file (JSON or YAML) named by
   ``RELAY_PROVIDERS_CONFIG_FILE``
3. Environment variables ``<PROVIDER>_MODEL``, ``<PROVIDER>_BASE_URL`` and the
   provider's API key variable(s) from ``config.env``
4. In-code overrides passed to :func:`get_provider_config`

YAML is only attempted when PyYAML is installed. A ``.env`` file is parsed once
per process before environment variables are read.

Example config file::

    anthropic:
      model: claude-opus-4-1
    openrouter:
      base_url: https://openrouter.ai/api/v1
      openrouter_use_middle_out: true
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .defaults import (
    ANTHROPIC_DEFAULT_MODEL,
    BASETEN_DEFAULT_BASE_URL,
    BASETEN_DEFAULT_MODEL,
    CEREBRAS_DEFAULT_BASE_URL,
    CEREBRAS_DEFAULT_MODEL,
    CHUTES_DEFAULT_BASE_URL,
    CHUTES_DEFAULT_MODEL,
    DEEPSEEK_DEFAULT_BASE_URL,
    DEEPSEEK_DEFAULT_MODEL,
    GEMINI_DEFAULT_MODEL,
    MINIMAX_DEFAULT_BASE_URL,
    MINIMAX_DEFAULT_MODEL,
    MISTRAL_DEFAULT_MODEL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
    ROO_DEFAULT_BASE_URL,
    ROO_DEFAULT_MODEL,
    UNBOUND_DEFAULT_BASE_URL,
    UNBOUND_DEFAULT_MODEL,
    XAI_DEFAULT_BASE_URL,
    XAI_DEFAULT_MODEL,
    ZAI_DEFAULT_MODEL,
)
from .env import env_prefix, is_placeholder, resolve_provider_key

try:  # Optional YAML support
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None  # type: ignore


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "anthropic": {"model": ANTHROPIC_DEFAULT_MODEL},
    "openai-native": {"model": OPENAI_DEFAULT_MODEL},
    "openrouter": {"model": OPENROUTER_DEFAULT_MODEL, "base_url": OPENROUTER_DEFAULT_BASE_URL},
    "gemini": {"model": GEMINI_DEFAULT_MODEL},
    "mistral": {"model": MISTRAL_DEFAULT_MODEL},
    "deepseek": {"model": DEEPSEEK_DEFAULT_MODEL, "base_url": DEEPSEEK_DEFAULT_BASE_URL},
    "xai": {"model": XAI_DEFAULT_MODEL, "base_url": XAI_DEFAULT_BASE_URL},
    "minimax": {"model": MINIMAX_DEFAULT_MODEL, "base_url": MINIMAX_DEFAULT_BASE_URL},
    "zai": {"model": ZAI_DEFAULT_MODEL, "zai_api_line": "international_coding"},
    "chutes": {"model": CHUTES_DEFAULT_MODEL, "base_url": CHUTES_DEFAULT_BASE_URL},
    "baseten": {"model": BASETEN_DEFAULT_MODEL, "base_url": BASETEN_DEFAULT_BASE_URL},
    "unbound": {"model": UNBOUND_DEFAULT_MODEL, "base_url": UNBOUND_DEFAULT_BASE_URL},
    "roo": {"model": ROO_DEFAULT_MODEL, "base_url": ROO_DEFAULT_BASE_URL},
    "cerebras": {"model": CEREBRAS_DEFAULT_MODEL, "base_url": CEREBRAS_DEFAULT_BASE_URL},
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Parse ``KEY=VALUE`` lines from ``$DOTENV_FILE`` (default ``.env``) once.

    Existing variables win unless they hold a placeholder value.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _parse_config_text(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        if yaml is None:
            return {}
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            return {}
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("RELAY_PROVIDERS_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    _FILE_CACHE = _parse_config_text(Path(path).read_text(encoding="utf-8"))
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the parsed config file (tests re-point the env var)."""
    global _FILE_CACHE
    _FILE_CACHE = None


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = env_prefix(provider)
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    key, _ = resolve_provider_key(provider)
    if key and not is_placeholder(key):
        out["api_key"] = key
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
