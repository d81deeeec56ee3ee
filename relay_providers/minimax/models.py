"""MiniMax model table (USD per million tokens)."""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import MINIMAX_DEFAULT_MODEL

MINIMAX_DEFAULT_MODEL_ID = MINIMAX_DEFAULT_MODEL


def _m2(description: str) -> ModelInfo:
    return ModelInfo(
        context_window=192_000,
        max_tokens=16_384,
        supports_prompt_cache=True,
        supports_native_tools=True,
        preserve_reasoning=True,
        input_price=0.3,
        output_price=1.2,
        cache_writes_price=0.375,
        cache_reads_price=0.03,
        description=description,
    )


MINIMAX_MODELS: Dict[str, ModelInfo] = {
    "MiniMax-M2": _m2("MiniMax M2, built for agents and code."),
    "MiniMax-M2-Stable": _m2("MiniMax M2 on the high-concurrency commercial line."),
}

__all__ = ["MINIMAX_DEFAULT_MODEL_ID", "MINIMAX_MODELS"]
