"""Google Gemini handler (``google-genai``)."""

from .client import GeminiHandler
from .models import GEMINI_DEFAULT_MODEL_ID, GEMINI_MODELS

__all__ = ["GeminiHandler", "GEMINI_DEFAULT_MODEL_ID", "GEMINI_MODELS"]
