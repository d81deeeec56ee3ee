"""Static model table for the OpenAI Responses API ("openai-native")."""

from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo, ModelTier
from ..config.defaults import OPENAI_DEFAULT_MODEL

OPENAI_NATIVE_DEFAULT_MODEL_ID = OPENAI_DEFAULT_MODEL

_GPT5_EFFORTS = ("minimal", "low", "medium", "high")


def _gpt5(
    *,
    input_price: float,
    output_price: float,
    cache_reads_price: float,
    efforts=_GPT5_EFFORTS,
    default_effort: str = "medium",
    retention=None,
    flex=None,
    priority=None,
) -> ModelInfo:
    tiers = []
    if flex:
        tiers.append(ModelTier(name="flex", input_price=flex[0], output_price=flex[1], cache_reads_price=flex[2]))
    if priority:
        tiers.append(
            ModelTier(name="priority", input_price=priority[0], output_price=priority[1], cache_reads_price=priority[2])
        )
    return ModelInfo(
        context_window=400_000,
        max_tokens=128_000,
        supports_images=True,
        supports_prompt_cache=True,
        prompt_cache_retention=retention,
        supports_native_tools=True,
        supports_verbosity=True,
        supports_temperature=False,
        supports_reasoning_effort=efforts,
        reasoning_effort=default_effort,
        input_price=input_price,
        output_price=output_price,
        cache_reads_price=cache_reads_price,
        tiers=tuple(tiers),
    )


OPENAI_NATIVE_MODELS: Dict[str, ModelInfo] = {
    "gpt-5.1": _gpt5(
        input_price=1.25,
        output_price=10.0,
        cache_reads_price=0.125,
        efforts=("none", "low", "medium", "high"),
        default_effort="medium",
        retention="24h",
        flex=(0.625, 5.0, 0.0625),
        priority=(2.5, 20.0, 0.25),
    ),
    "gpt-5": _gpt5(
        input_price=1.25,
        output_price=10.0,
        cache_reads_price=0.125,
        flex=(0.625, 5.0, 0.0625),
        priority=(2.5, 20.0, 0.25),
    ),
    "gpt-5-mini": _gpt5(
        input_price=0.25,
        output_price=2.0,
        cache_reads_price=0.025,
        flex=(0.125, 1.0, 0.0125),
        priority=(0.45, 3.6, 0.045),
    ),
    "gpt-5-nano": _gpt5(input_price=0.05, output_price=0.4, cache_reads_price=0.005, flex=(0.025, 0.2, 0.0025)),
    "gpt-4.1": ModelInfo(
        context_window=1_047_576,
        max_tokens=32_768,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=2.0,
        output_price=8.0,
        cache_reads_price=0.5,
        tiers=(ModelTier(name="priority", input_price=3.5, output_price=14.0, cache_reads_price=0.875),),
    ),
    "o3": ModelInfo(
        context_window=200_000,
        max_tokens=100_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_temperature=False,
        supports_reasoning_effort=("low", "medium", "high"),
        reasoning_effort="medium",
        input_price=2.0,
        output_price=8.0,
        cache_reads_price=0.5,
        tiers=(ModelTier(name="flex", input_price=1.0, output_price=4.0, cache_reads_price=0.25),),
    ),
    "o4-mini": ModelInfo(
        context_window=200_000,
        max_tokens=100_000,
        supports_images=True,
        supports_prompt_cache=True,
        supports_native_tools=True,
        supports_temperature=False,
        supports_reasoning_effort=("low", "medium", "high"),
        reasoning_effort="medium",
        input_price=1.1,
        output_price=4.4,
        cache_reads_price=0.275,
    ),
    "o3-mini-high": ModelInfo(
        context_window=200_000,
        max_tokens=100_000,
        supports_prompt_cache=True,
        supports_temperature=False,
        supports_reasoning_effort=("low", "medium", "high"),
        reasoning_effort="high",
        input_price=1.1,
        output_price=4.4,
        cache_reads_price=0.55,
    ),
}

# "o3-mini-<effort>" entries select a default effort; the API only knows "o3-mini".
O3_MINI_PREFIX = "o3-mini"

__all__ = ["O3_MINI_PREFIX", "OPENAI_NATIVE_DEFAULT_MODEL_ID", "OPENAI_NATIVE_MODELS"]
