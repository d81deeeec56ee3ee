"""Public DTO surface (model descriptors and handler settings)."""

from .models_parts.model_info import ModelInfo, ModelSelection, ModelTier, ReasoningEffortSupport
from .models_parts.selection import select_model
from .models_parts.settings import ProviderSettings, resolve_settings

__all__ = [
    "ModelInfo",
    "ModelSelection",
    "ModelTier",
    "ProviderSettings",
    "ReasoningEffortSupport",
    "resolve_settings",
    "select_model",
]
