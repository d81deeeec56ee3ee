"""OpenRouter model defaults.

OpenRouter is a dynamic router: descriptors come from the ``/models``
listing. The static table only carries the default model so the handler
works before the first catalog fetch; unknown ids keep their id and use the
default descriptor.
"""
from __future__ import annotations

from typing import Dict, FrozenSet

from ..base.models import ModelInfo
from ..config.defaults import OPENROUTER_DEFAULT_MODEL

OPENROUTER_DEFAULT_MODEL_ID = OPENROUTER_DEFAULT_MODEL

# Sentinel for "let OpenRouter pick the upstream provider".
OPENROUTER_DEFAULT_PROVIDER_NAME = "[default]"

OPENROUTER_DEFAULT_MODEL_INFO = ModelInfo(
    context_window=200_000,
    max_tokens=8192,
    supports_images=True,
    supports_prompt_cache=True,
    supports_native_tools=True,
    supports_reasoning_budget=True,
    input_price=3.0,
    output_price=15.0,
    cache_writes_price=3.75,
    cache_reads_price=0.3,
    description="Claude Sonnet 4.5 routed through OpenRouter.",
)

OPENROUTER_MODELS: Dict[str, ModelInfo] = {OPENROUTER_DEFAULT_MODEL_ID: OPENROUTER_DEFAULT_MODEL_INFO}

# Models that accept explicit ``cache_control`` breakpoints.
OPENROUTER_PROMPT_CACHING_MODELS: FrozenSet[str] = frozenset(
    {
        "anthropic/claude-3-haiku",
        "anthropic/claude-3-opus",
        "anthropic/claude-3.5-haiku",
        "anthropic/claude-3.5-sonnet",
        "anthropic/claude-3.7-sonnet",
        "anthropic/claude-3.7-sonnet:thinking",
        "anthropic/claude-haiku-4.5",
        "anthropic/claude-opus-4",
        "anthropic/claude-opus-4.1",
        "anthropic/claude-opus-4.5",
        "anthropic/claude-sonnet-4",
        "anthropic/claude-sonnet-4.5",
        "google/gemini-2.5-flash",
        "google/gemini-2.5-flash-preview",
        "google/gemini-2.5-pro",
        "google/gemini-2.5-pro-preview",
    }
)

# Families that take a numeric reasoning budget instead of an effort.
OPENROUTER_REASONING_BUDGET_PREFIXES = (
    "anthropic/claude-3.7",
    "anthropic/claude-sonnet-4",
    "anthropic/claude-opus-4",
    "anthropic/claude-haiku-4",
    "google/gemini-2.5",
)

# Gemini 2.5 Pro streams reasoning unless told otherwise.
OPENROUTER_REASONING_EXCLUDED_BY_DEFAULT: FrozenSet[str] = frozenset(
    {"google/gemini-2.5-pro", "google/gemini-2.5-pro-preview"}
)

__all__ = [
    "OPENROUTER_DEFAULT_MODEL_ID",
    "OPENROUTER_DEFAULT_MODEL_INFO",
    "OPENROUTER_DEFAULT_PROVIDER_NAME",
    "OPENROUTER_MODELS",
    "OPENROUTER_PROMPT_CACHING_MODELS",
    "OPENROUTER_REASONING_BUDGET_PREFIXES",
    "OPENROUTER_REASONING_EXCLUDED_BY_DEFAULT",
]
