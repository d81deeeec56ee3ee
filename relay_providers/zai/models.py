"""Z AI (GLM) model tables.

Two catalogs exist: the international line (api.z.ai) and the mainland China
line (open.bigmodel.cn), which bills in lower prices. Every model writes to
the cache for free; only cache reads are billed.
"""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import ZAI_DEFAULT_MODEL

ZAI_DEFAULT_MODEL_ID = ZAI_DEFAULT_MODEL


def _glm(
    input_price: float,
    output_price: float,
    cache_reads_price: float,
    *,
    context_window: int = 131_072,
    max_tokens: int = 98_304,
    cache: bool = True,
    binary: bool = False,
    images: bool = False,
) -> ModelInfo:
    return ModelInfo(
        context_window=context_window,
        max_tokens=max_tokens,
        supports_images=images,
        supports_prompt_cache=cache,
        supports_reasoning_binary=binary,
        supports_native_tools=True,
        input_price=input_price,
        output_price=output_price,
        cache_writes_price=0.0,
        cache_reads_price=cache_reads_price,
    )


INTERNATIONAL_ZAI_MODELS: Dict[str, ModelInfo] = {
    "glm-4.5": _glm(0.6, 2.2, 0.11, binary=True),
    "glm-4.5-air": _glm(0.2, 1.1, 0.03),
    "glm-4.5-x": _glm(2.2, 8.9, 0.45),
    "glm-4.5-airx": _glm(1.1, 4.5, 0.22),
    "glm-4.5-flash": _glm(0.0, 0.0, 0.0),
    "glm-4.5v": _glm(0.6, 1.8, 0.11, max_tokens=16_384, images=True),
    "glm-4.6": _glm(0.6, 2.2, 0.11, context_window=200_000, binary=True),
    "glm-4-32b-0414-128k": _glm(0.1, 0.1, 0.0, cache=False),
}

MAINLAND_ZAI_MODELS: Dict[str, ModelInfo] = {
    "glm-4.5": _glm(0.29, 1.14, 0.057, binary=True),
    "glm-4.5-air": _glm(0.1, 0.6, 0.02),
    "glm-4.5-x": _glm(0.29, 1.14, 0.057),
    "glm-4.5-airx": _glm(0.1, 0.6, 0.02),
    "glm-4.5-flash": _glm(0.0, 0.0, 0.0),
    "glm-4.5v": _glm(0.29, 0.93, 0.057, max_tokens=16_384, images=True),
    "glm-4.6": _glm(0.29, 1.14, 0.057, context_window=204_800, binary=True),
}

__all__ = ["INTERNATIONAL_ZAI_MODELS", "MAINLAND_ZAI_MODELS", "ZAI_DEFAULT_MODEL_ID"]
