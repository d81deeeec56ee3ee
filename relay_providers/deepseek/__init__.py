"""DeepSeek Chat Completions handler."""

from .client import DeepSeekHandler
from .models import DEEPSEEK_DEFAULT_MODEL_ID, DEEPSEEK_MODELS

__all__ = ["DeepSeekHandler", "DEEPSEEK_DEFAULT_MODEL_ID", "DEEPSEEK_MODELS"]
