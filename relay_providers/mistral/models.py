"""Mistral model table (USD per million tokens)."""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import MISTRAL_DEFAULT_MODEL

MISTRAL_DEFAULT_MODEL_ID = MISTRAL_DEFAULT_MODEL

MISTRAL_MODELS: Dict[str, ModelInfo] = {
    "codestral-latest": ModelInfo(
        context_window=256_000,
        max_tokens=256_000,
        supports_native_tools=True,
        input_price=0.3,
        output_price=0.9,
    ),
    "mistral-large-latest": ModelInfo(
        context_window=131_000,
        max_tokens=131_000,
        supports_native_tools=True,
        input_price=2.0,
        output_price=6.0,
    ),
    "mistral-medium-latest": ModelInfo(
        context_window=131_000,
        max_tokens=131_000,
        supports_images=True,
        supports_native_tools=True,
        input_price=0.4,
        output_price=2.0,
    ),
    "mistral-small-latest": ModelInfo(
        context_window=32_000,
        max_tokens=32_000,
        supports_images=True,
        supports_native_tools=True,
        input_price=0.2,
        output_price=0.6,
    ),
    "devstral-medium-latest": ModelInfo(
        context_window=131_000,
        max_tokens=131_000,
        supports_images=True,
        supports_native_tools=True,
        input_price=0.4,
        output_price=2.0,
    ),
    "magistral-medium-latest": ModelInfo(
        context_window=41_000,
        max_tokens=41_000,
        supports_native_tools=True,
        input_price=2.0,
        output_price=5.0,
        description="Reasoning model; thinking arrives as content chunks.",
    ),
    "ministral-8b-latest": ModelInfo(
        context_window=131_000,
        max_tokens=131_000,
        supports_native_tools=True,
        input_price=0.1,
        output_price=0.1,
    ),
    "ministral-3b-latest": ModelInfo(
        context_window=131_000,
        max_tokens=131_000,
        supports_native_tools=True,
        input_price=0.04,
        output_price=0.04,
    ),
    "open-mistral-nemo": ModelInfo(
        context_window=131_000,
        max_tokens=131_000,
        supports_native_tools=True,
        input_price=0.15,
        output_price=0.15,
    ),
}

__all__ = ["MISTRAL_DEFAULT_MODEL_ID", "MISTRAL_MODELS"]
