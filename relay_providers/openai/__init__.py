"""OpenAI Responses API handler."""

from .client import OpenAiNativeHandler
from .models import OPENAI_NATIVE_DEFAULT_MODEL_ID, OPENAI_NATIVE_MODELS

__all__ = ["OpenAiNativeHandler", "OPENAI_NATIVE_DEFAULT_MODEL_ID", "OPENAI_NATIVE_MODELS"]
