"""relay_providers.config.env
============================

Provider id to environment-variable mapping for API keys.

``ENV_MAP`` holds the canonical variable per provider; ``ENV_ALIASES`` lists
every accepted name in precedence order for providers that historically used
more than one. Helpers never raise on unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai-native": "OPENAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "xai": "XAI_API_KEY",
    "minimax": "MINIMAX_API_KEY",
    "zai": "ZAI_API_KEY",
    "chutes": "CHUTES_API_KEY",
    "baseten": "BASETEN_API_KEY",
    "unbound": "UNBOUND_API_KEY",
    "cerebras": "CEREBRAS_API_KEY",
}


ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openai-native": ("OPENAI_API_KEY", "OPENAI_NATIVE_API_KEY"),
}


def env_prefix(provider: str) -> str:
    """Return the ``<PROVIDER>`` prefix used for ``*_MODEL``/``*_BASE_URL``.

    ``openai-native`` -> ``OPENAI_NATIVE``.
    """
    return (provider or "").upper().replace("-", "_")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder rather than a credential.

    Matches 'placeholder', 'changeme' or 'example' anywhere, or a ``test_``
    prefix, case-insensitively.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable key variable names for ``provider``, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable_name)`` for the first non-empty key variable."""
    for name in get_env_var_candidates(provider):
        if val := os.environ.get(name):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "env_prefix",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_provider_key",
]
