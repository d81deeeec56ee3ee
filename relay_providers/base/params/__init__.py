"""Capability/parameter resolution."""

from .reasoning import (
    DISABLE_EFFORT,
    anthropic_reasoning,
    gemini_reasoning,
    openai_reasoning,
    openrouter_reasoning,
    roo_reasoning,
    selected_effort,
    should_use_reasoning_budget,
    should_use_reasoning_effort,
)
from .resolver import ModelParams, ProtocolFormat, get_model_max_output_tokens, get_model_params

__all__ = [
    "DISABLE_EFFORT",
    "ModelParams",
    "ProtocolFormat",
    "anthropic_reasoning",
    "gemini_reasoning",
    "get_model_max_output_tokens",
    "get_model_params",
    "openai_reasoning",
    "openrouter_reasoning",
    "roo_reasoning",
    "selected_effort",
    "should_use_reasoning_budget",
    "should_use_reasoning_effort",
]
