"""Model descriptor and settings DTOs; import from ``relay_providers.base.models``."""

from .model_info import ModelInfo, ModelSelection, ModelTier, ReasoningEffortSupport
from .selection import select_model
from .settings import ProviderSettings, resolve_settings

__all__ = [
    "ModelInfo",
    "ModelSelection",
    "ModelTier",
    "ProviderSettings",
    "ReasoningEffortSupport",
    "resolve_settings",
    "select_model",
]
