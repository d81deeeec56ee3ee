"""Static model table for Google Gemini.

Pro models bill by context tier: the first tier whose ``context_window`` is
at least the request's input tokens supplies the prices.
"""

from __future__ import annotations

import math
from typing import Dict

from ..base.models import ModelInfo, ModelTier
from ..config.defaults import GEMINI_DEFAULT_MODEL

GEMINI_DEFAULT_MODEL_ID = GEMINI_DEFAULT_MODEL

_PRO_TIERS = (
    ModelTier(context_window=200_000, input_price=1.25, output_price=10.0, cache_reads_price=0.31),
    ModelTier(context_window=math.inf, input_price=2.5, output_price=15.0, cache_reads_price=0.625),
)


def _pro(max_tokens: int, *, budget: bool = True, required: bool = False) -> ModelInfo:
    return ModelInfo(
        context_window=1_048_576,
        max_tokens=max_tokens,
        max_thinking_tokens=32_768 if budget else None,
        supports_images=True,
        supports_native_tools=True,
        supports_prompt_cache=True,
        supports_reasoning_budget=budget,
        required_reasoning_budget=required,
        input_price=2.5,
        output_price=15.0,
        cache_reads_price=0.625,
        cache_writes_price=4.5,
        tiers=_PRO_TIERS,
    )


def _flash(max_tokens: int, input_price: float, output_price: float, cache_reads_price: float) -> ModelInfo:
    return ModelInfo(
        context_window=1_048_576,
        max_tokens=max_tokens,
        max_thinking_tokens=24_576,
        supports_images=True,
        supports_native_tools=True,
        supports_prompt_cache=True,
        supports_reasoning_budget=True,
        input_price=input_price,
        output_price=output_price,
        cache_reads_price=cache_reads_price,
        cache_writes_price=1.0,
    )


GEMINI_MODELS: Dict[str, ModelInfo] = {
    "gemini-3-pro-preview": ModelInfo(
        context_window=1_048_576,
        max_tokens=65_536,
        supports_images=True,
        supports_native_tools=True,
        supports_prompt_cache=True,
        supports_reasoning_effort=("low", "high"),
        reasoning_effort="low",
        supports_temperature=True,
        default_temperature=1.0,
        input_price=4.0,
        output_price=18.0,
        tiers=(
            ModelTier(context_window=200_000, input_price=2.0, output_price=12.0),
            ModelTier(context_window=math.inf, input_price=4.0, output_price=18.0),
        ),
    ),
    "gemini-2.5-pro": _pro(64_000, required=True),
    "gemini-2.5-pro-preview-06-05": _pro(65_535),
    "gemini-2.5-pro-preview-05-06": _pro(65_535, budget=False),
    "gemini-2.5-pro-preview-03-25": _pro(65_535),
    "gemini-flash-latest": _flash(65_536, 0.3, 2.5, 0.075),
    "gemini-2.5-flash-preview-09-2025": _flash(65_536, 0.3, 2.5, 0.075),
    "gemini-2.5-flash": _flash(64_000, 0.3, 2.5, 0.075),
    "gemini-flash-lite-latest": _flash(65_536, 0.1, 0.4, 0.025),
    "gemini-2.5-flash-lite-preview-09-2025": _flash(65_536, 0.1, 0.4, 0.025),
}

__all__ = ["GEMINI_DEFAULT_MODEL_ID", "GEMINI_MODELS"]
