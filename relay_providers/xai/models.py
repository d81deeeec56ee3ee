"""xAI Grok model table (USD per million tokens)."""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import XAI_DEFAULT_MODEL

XAI_DEFAULT_MODEL_ID = XAI_DEFAULT_MODEL

XAI_MODELS: Dict[str, ModelInfo] = {
    "grok-code-fast-1": ModelInfo(
        context_window=262_144,
        max_tokens=16_384,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=0.2,
        output_price=1.5,
        cache_writes_price=0.0,
        cache_reads_price=0.02,
        description="Fast reasoning model tuned for agentic coding.",
    ),
    "grok-4": ModelInfo(
        context_window=256_000,
        max_tokens=8192,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=0.0,
        cache_reads_price=0.75,
    ),
    "grok-3": ModelInfo(
        context_window=131_072,
        max_tokens=8192,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=0.0,
        cache_reads_price=0.75,
    ),
    "grok-3-mini": ModelInfo(
        context_window=131_072,
        max_tokens=8192,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_effort=("low", "high"),
        reasoning_effort="low",
        input_price=0.3,
        output_price=0.5,
        cache_writes_price=0.0,
        cache_reads_price=0.07,
    ),
}

__all__ = ["XAI_DEFAULT_MODEL_ID", "XAI_MODELS"]
