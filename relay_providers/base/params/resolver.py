"""Capability/parameter resolver.

Derives ``max_tokens``, ``temperature`` and the reasoning configuration for a
request from the model descriptor, user settings and target protocol format.
The resolver is pure: identical inputs always produce identical output and
the descriptor is never modified.

Priority of reasoning decisions:

1. a model that *requires* a budget always gets one;
2. a budget-capable model gets one when the user opted in;
3. otherwise an effort-capable model gets the selected effort unless the user
   disabled it or the effort is not in the model's supported set.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from ...config import defaults as D
from ..models import ModelInfo, ProviderSettings
from .reasoning import (
    anthropic_reasoning,
    gemini_reasoning,
    openai_reasoning,
    openrouter_reasoning,
    roo_reasoning,
    selected_effort,
    should_use_reasoning_budget,
    should_use_reasoning_effort,
)

ProtocolFormat = Literal["anthropic", "openai", "gemini", "openrouter", "roo"]


@dataclass(frozen=True)
class ModelParams:
    """Resolved request parameters."""

    max_tokens: Optional[int]
    temperature: Optional[float]
    reasoning_effort: Optional[str] = None
    reasoning_budget: Optional[int] = None
    verbosity: Optional[str] = None
    reasoning: Optional[Dict[str, Any]] = None


def _is_cap_exempt(model_id: str) -> bool:
    lowered = model_id.lower()
    return any(family in lowered for family in D.MAX_OUTPUT_CAP_EXEMPT_FAMILIES)


def get_model_max_output_tokens(
    model_id: str,
    info: ModelInfo,
    settings: Optional[ProviderSettings] = None,
    format: Optional[ProtocolFormat] = None,
    provider: Optional[str] = None,
) -> Optional[int]:
    """Resolve the output-token limit sent to the vendor.

    Returns ``None`` when a non-Anthropic format has no model limit to send.
    """
    if provider == D.CLAUDE_CODE_PROVIDER:
        override = settings.claude_code_max_output_tokens if settings is not None else None
        return override or D.CLAUDE_CODE_DEFAULT_MAX_OUTPUT_TOKENS

    if should_use_reasoning_budget(info, settings):
        configured = settings.model_max_tokens if settings is not None else None
        return configured or D.DEFAULT_HYBRID_REASONING_MODEL_MAX_TOKENS

    anthropic_context = (
        "claude" in model_id
        or format == "anthropic"
        or (format == "openrouter" and model_id.startswith("anthropic/"))
    )
    if anthropic_context and info.supports_reasoning_budget:
        return D.ANTHROPIC_DEFAULT_MAX_TOKENS
    if anthropic_context and not info.max_tokens:
        return D.ANTHROPIC_DEFAULT_MAX_TOKENS

    if info.max_tokens:
        if _is_cap_exempt(model_id):
            return info.max_tokens
        return min(info.max_tokens, math.ceil(info.context_window * D.MAX_OUTPUT_CONTEXT_RATIO))

    if format:
        return None
    return D.ANTHROPIC_DEFAULT_MAX_TOKENS


def _clamp_budget(model_id: str, budget: int, max_tokens: Optional[int]) -> int:
    if max_tokens:
        budget = min(budget, int(max_tokens * D.REASONING_BUDGET_MAX_RATIO))
    floor = (
        D.GEMINI_25_PRO_MIN_THINKING_TOKENS
        if model_id.startswith("gemini-2.5-pro")
        else D.MIN_REASONING_BUDGET_TOKENS
    )
    return max(budget, floor)


def get_model_params(
    format: ProtocolFormat,
    model_id: str,
    info: ModelInfo,
    settings: Optional[ProviderSettings] = None,
    default_temperature: Optional[float] = 0.0,
    provider: Optional[str] = None,
) -> ModelParams:
    """Resolve every request parameter for ``format``.

    Budget reasoning forces ``temperature=1.0`` (vendors reject anything else
    while thinking). ``temperature`` is ``None`` when the model declares it
    unsupported.
    """
    max_tokens = get_model_max_output_tokens(model_id, info, settings, format, provider)
    user_temperature = settings.model_temperature if settings is not None else None
    temperature: Optional[float] = user_temperature if user_temperature is not None else default_temperature
    verbosity = settings.verbosity if settings is not None else None
    budget: Optional[int] = None
    effort: Optional[str] = None

    if should_use_reasoning_budget(info, settings):
        configured = settings.model_max_thinking_tokens if settings is not None else None
        budget = _clamp_budget(model_id, configured or D.DEFAULT_HYBRID_REASONING_MODEL_THINKING_TOKENS, max_tokens)
        temperature = 1.0
    elif should_use_reasoning_effort(info, settings):
        effort = selected_effort(info, settings)

    if info.supports_temperature is False:
        temperature = None

    if format == "anthropic":
        reasoning = anthropic_reasoning(info, settings, budget)
    elif format == "openai":
        reasoning = openai_reasoning(info, settings, effort)
    elif format == "gemini":
        reasoning = gemini_reasoning(info, settings, budget)
    elif format == "openrouter":
        reasoning = openrouter_reasoning(info, settings, budget, effort)
    else:
        reasoning = roo_reasoning(info, settings, settings.reasoning_effort if settings is not None else None)

    return ModelParams(
        max_tokens=max_tokens,
        temperature=temperature,
        reasoning_effort=effort,
        reasoning_budget=budget,
        verbosity=verbosity,
        reasoning=reasoning,
    )


__all__ = ["ModelParams", "ProtocolFormat", "get_model_max_output_tokens", "get_model_params"]
