"""Reasoning decisions and per-protocol reasoning payloads.

The two predicates decide *whether* reasoning is requested; the ``*_reasoning``
builders shape the already-resolved budget/effort into the structure each
vendor protocol expects. All functions are pure.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import ModelInfo, ProviderSettings

DISABLE_EFFORT = "disable"
_GEMINI_LEVELS = ("low", "high")


def should_use_reasoning_budget(info: ModelInfo, settings: Optional[ProviderSettings] = None) -> bool:
    """Budget reasoning is mandatory for ``required_reasoning_budget`` models and
    opt-in for ``supports_reasoning_budget`` ones."""
    if info.required_reasoning_budget:
        return True
    return bool(info.supports_reasoning_budget and settings is not None and settings.enable_reasoning_effort)


def selected_effort(info: ModelInfo, settings: Optional[ProviderSettings] = None) -> Optional[str]:
    """The user's effort choice, falling back to the model's declared default."""
    chosen = settings.reasoning_effort if settings is not None else None
    return chosen or info.reasoning_effort


def should_use_reasoning_effort(info: ModelInfo, settings: Optional[ProviderSettings] = None) -> bool:
    """Decide whether an effort level is sent.

    * an explicit ``enable_reasoning_effort=False`` turns effort off;
    * ``"disable"`` omits reasoning;
    * an enumerated capability requires the chosen effort to be listed;
    * a boolean capability requires some effort to be chosen;
    * without a capability, only a model-declared default effort counts.
    """
    if settings is not None and settings.enable_reasoning_effort is False:
        return False
    effort = selected_effort(info, settings)
    if effort == DISABLE_EFFORT:
        return False
    capability = info.supports_reasoning_effort
    if isinstance(capability, tuple):
        return bool(effort) and effort in capability
    if capability is True:
        return bool(effort)
    return bool(info.reasoning_effort)


def anthropic_reasoning(
    info: ModelInfo, settings: Optional[ProviderSettings], budget: Optional[int]
) -> Optional[Dict[str, Any]]:
    if should_use_reasoning_budget(info, settings) and budget:
        return {"type": "enabled", "budget_tokens": budget}
    return None


def openai_reasoning(
    info: ModelInfo, settings: Optional[ProviderSettings], effort: Optional[str]
) -> Optional[Dict[str, Any]]:
    if not should_use_reasoning_effort(info, settings) or not effort or effort == DISABLE_EFFORT:
        return None
    return {"reasoning_effort": effort}


def openrouter_reasoning(
    info: ModelInfo,
    settings: Optional[ProviderSettings],
    budget: Optional[int],
    effort: Optional[str],
) -> Optional[Dict[str, Any]]:
    if should_use_reasoning_budget(info, settings):
        return {"max_tokens": budget}
    if should_use_reasoning_effort(info, settings) and effort and effort != DISABLE_EFFORT:
        return {"effort": effort}
    return None


def roo_reasoning(info: ModelInfo, settings: Optional[ProviderSettings], effort: Optional[str]) -> Optional[Dict[str, Any]]:
    """Roo proxy payload.

    An unset effort (or an explicit toggle-off) is sent as ``enabled: False``
    so the proxy does not switch reasoning on by itself; ``"disable"`` and
    ``"minimal"`` omit the field.
    """
    if not info.supports_reasoning_effort:
        return None
    if settings is not None and settings.enable_reasoning_effort is False:
        return {"enabled": False}
    if not effort:
        return {"enabled": False}
    if effort in (DISABLE_EFFORT, "minimal"):
        return None
    return {"enabled": True, "effort": effort}


def gemini_reasoning(
    info: ModelInfo, settings: Optional[ProviderSettings], budget: Optional[int]
) -> Optional[Dict[str, Any]]:
    """Gemini ``thinkingConfig``.

    Budget models use ``thinkingBudget``. Effort models map the chosen effort
    straight to ``thinkingLevel`` (only ``low``/``high`` exist) regardless of
    the legacy enable toggle.
    """
    if should_use_reasoning_budget(info, settings):
        return {"thinkingBudget": budget, "includeThoughts": True}
    effort = selected_effort(info, settings)
    if not effort or effort == DISABLE_EFFORT or effort not in _GEMINI_LEVELS:
        return None
    return {"thinkingLevel": effort, "includeThoughts": True}


__all__ = [
    "DISABLE_EFFORT",
    "should_use_reasoning_budget",
    "should_use_reasoning_effort",
    "selected_effort",
    "anthropic_reasoning",
    "openai_reasoning",
    "openrouter_reasoning",
    "roo_reasoning",
    "gemini_reasoning",
]
