"""Anthropic model table.

Prices are USD per million tokens. Ids ending in ``:thinking`` are local
aliases for hybrid reasoning models that must always think; the suffix is
stripped before the request is sent.
"""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo, ModelTier
from ..config.defaults import ANTHROPIC_DEFAULT_MODEL

ANTHROPIC_DEFAULT_MODEL_ID = ANTHROPIC_DEFAULT_MODEL

# Models that accept the 1M-token context beta; the first tier holds its prices.
ANTHROPIC_1M_CONTEXT_MODELS = ("claude-sonnet-4-5", "claude-sonnet-4-20250514")

_SONNET_1M_TIER = ModelTier(
    context_window=1_000_000,
    input_price=6.0,
    output_price=22.5,
    cache_writes_price=7.5,
    cache_reads_price=0.6,
)

ANTHROPIC_MODELS: Dict[str, ModelInfo] = {
    "claude-sonnet-4-5": ModelInfo(
        context_window=200_000,
        max_tokens=64_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_budget=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=3.75,
        cache_reads_price=0.3,
        tiers=(_SONNET_1M_TIER,),
    ),
    "claude-sonnet-4-20250514": ModelInfo(
        context_window=200_000,
        max_tokens=64_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_budget=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=3.75,
        cache_reads_price=0.3,
        tiers=(_SONNET_1M_TIER,),
    ),
    "claude-opus-4-5-20251101": ModelInfo(
        context_window=200_000,
        max_tokens=32_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_budget=True,
        input_price=5.0,
        output_price=25.0,
        cache_writes_price=6.25,
        cache_reads_price=0.5,
    ),
    "claude-opus-4-1-20250805": ModelInfo(
        context_window=200_000,
        max_tokens=32_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_budget=True,
        input_price=15.0,
        output_price=75.0,
        cache_writes_price=18.75,
        cache_reads_price=1.5,
    ),
    "claude-opus-4-20250514": ModelInfo(
        context_window=200_000,
        max_tokens=32_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_budget=True,
        input_price=15.0,
        output_price=75.0,
        cache_writes_price=18.75,
        cache_reads_price=1.5,
    ),
    "claude-haiku-4-5-20251001": ModelInfo(
        context_window=200_000,
        max_tokens=64_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_budget=True,
        input_price=1.0,
        output_price=5.0,
        cache_writes_price=1.25,
        cache_reads_price=0.1,
    ),
    "claude-3-7-sonnet-20250219:thinking": ModelInfo(
        context_window=200_000,
        max_tokens=128_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_reasoning_budget=True,
        required_reasoning_budget=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=3.75,
        cache_reads_price=0.3,
    ),
    "claude-3-7-sonnet-20250219": ModelInfo(
        context_window=200_000,
        max_tokens=8192,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=3.75,
        cache_reads_price=0.3,
    ),
    "claude-3-5-sonnet-20241022": ModelInfo(
        context_window=200_000,
        max_tokens=8192,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=3.75,
        cache_reads_price=0.3,
    ),
    "claude-3-5-haiku-20241022": ModelInfo(
        context_window=200_000,
        max_tokens=8192,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=1.0,
        output_price=5.0,
        cache_writes_price=1.25,
        cache_reads_price=0.1,
    ),
    "claude-3-opus-20240229": ModelInfo(
        context_window=200_000,
        max_tokens=4096,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=15.0,
        output_price=75.0,
        cache_writes_price=18.75,
        cache_reads_price=1.5,
    ),
    "claude-3-haiku-20240307": ModelInfo(
        context_window=200_000,
        max_tokens=4096,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=0.25,
        output_price=1.25,
        cache_writes_price=0.3,
        cache_reads_price=0.03,
    ),
}

__all__ = ["ANTHROPIC_1M_CONTEXT_MODELS", "ANTHROPIC_DEFAULT_MODEL_ID", "ANTHROPIC_MODELS"]
