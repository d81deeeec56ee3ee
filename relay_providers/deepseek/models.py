"""DeepSeek model table (USD per million tokens; cache miss billed as input)."""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import DEEPSEEK_DEFAULT_MODEL

DEEPSEEK_DEFAULT_MODEL_ID = DEEPSEEK_DEFAULT_MODEL

DEEPSEEK_MODELS: Dict[str, ModelInfo] = {
    "deepseek-chat": ModelInfo(
        context_window=128_000,
        max_tokens=8192,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=0.28,
        output_price=0.42,
        cache_writes_price=0.28,
        cache_reads_price=0.028,
        description="DeepSeek-V3.2 in non-thinking mode.",
    ),
    "deepseek-reasoner": ModelInfo(
        context_window=128_000,
        max_tokens=65_536,
        supports_prompt_cache=True,
        supports_native_tools=True,
        input_price=0.28,
        output_price=0.42,
        cache_writes_price=0.28,
        cache_reads_price=0.028,
        description="DeepSeek-V3.2 in thinking mode; reasoning streams as reasoning_content.",
    ),
}

__all__ = ["DEEPSEEK_DEFAULT_MODEL_ID", "DEEPSEEK_MODELS"]
