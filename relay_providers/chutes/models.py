"""Chutes model table.

Chutes is a dynamic router: the live catalog from ``/v1/models`` is merged
over this static table at request time. Chutes does not bill per token
through the API, so every price is 0.
"""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import CHUTES_DEFAULT_MODEL

CHUTES_DEFAULT_MODEL_ID = CHUTES_DEFAULT_MODEL

CHUTES_DEFAULT_MODEL_INFO = ModelInfo(
    context_window=163_840,
    max_tokens=32_768,
    input_price=0.0,
    output_price=0.0,
    description="DeepSeek R1 0528 model.",
)


def _free(context_window: int, max_tokens: int, description: str) -> ModelInfo:
    return ModelInfo(
        context_window=context_window,
        max_tokens=max_tokens,
        input_price=0.0,
        output_price=0.0,
        description=description,
    )


CHUTES_MODELS: Dict[str, ModelInfo] = {
    CHUTES_DEFAULT_MODEL_ID: CHUTES_DEFAULT_MODEL_INFO,
    "deepseek-ai/DeepSeek-R1": _free(163_840, 32_768, "DeepSeek R1 model."),
    "deepseek-ai/DeepSeek-V3": _free(163_840, 32_768, "DeepSeek V3 model."),
    "deepseek-ai/DeepSeek-V3.1": _free(163_840, 32_768, "DeepSeek V3.1 model."),
    "Qwen/Qwen3-235B-A22B-Instruct-2507": _free(262_144, 32_768, "Qwen3 235B A22B instruct model."),
    "Qwen/Qwen3-Coder-480B-A35B-Instruct-FP8": _free(262_144, 32_768, "Qwen3 Coder 480B FP8 model."),
    "zai-org/GLM-4.5-Air": _free(151_329, 32_768, "GLM 4.5 Air model."),
    "moonshotai/Kimi-K2-Instruct-0905": _free(262_144, 32_768, "Kimi K2 instruct model."),
}

__all__ = ["CHUTES_DEFAULT_MODEL_ID", "CHUTES_DEFAULT_MODEL_INFO", "CHUTES_MODELS"]
