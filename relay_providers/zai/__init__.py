"""Z AI (GLM) handler."""

from .client import ZAiHandler, resolve_api_line
from .models import INTERNATIONAL_ZAI_MODELS, MAINLAND_ZAI_MODELS, ZAI_DEFAULT_MODEL_ID

__all__ = [
    "ZAiHandler",
    "resolve_api_line",
    "INTERNATIONAL_ZAI_MODELS",
    "MAINLAND_ZAI_MODELS",
    "ZAI_DEFAULT_MODEL_ID",
]
