"""xAI Grok handler."""

from .client import XAIHandler
from .models import XAI_DEFAULT_MODEL_ID, XAI_MODELS

__all__ = ["XAIHandler", "XAI_DEFAULT_MODEL_ID", "XAI_MODELS"]
