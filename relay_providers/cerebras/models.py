"""Cerebras model table. Inference is free-tier priced at zero."""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import CEREBRAS_DEFAULT_MODEL

CEREBRAS_DEFAULT_MODEL_ID = CEREBRAS_DEFAULT_MODEL

CEREBRAS_MODELS: Dict[str, ModelInfo] = {
    "zai-glm-4.6": ModelInfo(
        context_window=131_072,
        max_tokens=16_384,
        supports_native_tools=True,
        description="Highly intelligent general purpose model with up to 1,000 tokens/s",
    ),
    "qwen-3-235b-a22b-instruct-2507": ModelInfo(
        context_window=64_000,
        max_tokens=64_000,
        supports_native_tools=True,
        description="Intelligent model with ~1400 tokens/s",
    ),
    "llama-3.3-70b": ModelInfo(
        context_window=64_000,
        max_tokens=64_000,
        supports_native_tools=True,
        description="Powerful model with ~2600 tokens/s",
    ),
    "qwen-3-32b": ModelInfo(
        context_window=64_000,
        max_tokens=64_000,
        supports_native_tools=True,
        description="SOTA coding performance with ~2500 tokens/s",
    ),
    "gpt-oss-120b": ModelInfo(
        context_window=64_000,
        max_tokens=8000,
        supports_native_tools=True,
        description="OpenAI GPT OSS model with ~2800 tokens/s",
    ),
}

__all__ = ["CEREBRAS_DEFAULT_MODEL_ID", "CEREBRAS_MODELS"]
