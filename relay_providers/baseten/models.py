"""Baseten model APIs table.

Baseten hosts open-weight models behind one OpenAI-compatible endpoint. None
of them advertise prompt caching; reasoning models stream ``<think>`` spans
in content.
"""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import BASETEN_DEFAULT_MODEL

BASETEN_DEFAULT_MODEL_ID = BASETEN_DEFAULT_MODEL


def _hosted(context_window: int, max_tokens: int, input_price: float, output_price: float, description: str) -> ModelInfo:
    return ModelInfo(
        context_window=context_window,
        max_tokens=max_tokens,
        supports_native_tools=True,
        input_price=input_price,
        output_price=output_price,
        cache_writes_price=0.0,
        cache_reads_price=0.0,
        description=description,
    )


BASETEN_MODELS: Dict[str, ModelInfo] = {
    "zai-org/GLM-4.6": _hosted(200_000, 200_000, 0.6, 2.2, "GLM-4.6 agentic coding model"),
    "moonshotai/Kimi-K2-Thinking": _hosted(262_000, 163_800, 0.6, 2.5, "Kimi K2 with step-by-step reasoning"),
    "deepseek-ai/DeepSeek-R1": _hosted(163_840, 131_072, 2.55, 5.95, "DeepSeek R1 reasoning model"),
    "deepseek-ai/DeepSeek-V3.1": _hosted(163_840, 131_072, 0.5, 1.5, "DeepSeek V3.1 hybrid model"),
    "Qwen/Qwen3-Coder-480B-A35B-Instruct": _hosted(262_144, 16_384, 0.38, 1.53, "Qwen3 Coder 480B"),
    "openai/gpt-oss-120b": _hosted(128_072, 16_384, 0.1, 0.5, "gpt-oss 120B open-weight model"),
}

__all__ = ["BASETEN_DEFAULT_MODEL_ID", "BASETEN_MODELS"]
