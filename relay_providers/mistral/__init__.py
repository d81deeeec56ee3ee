"""Mistral adapter (Chat Completions REST over SSE)."""

from .client import MistralHandler
from .models import MISTRAL_DEFAULT_MODEL_ID, MISTRAL_MODELS

__all__ = ["MistralHandler", "MISTRAL_DEFAULT_MODEL_ID", "MISTRAL_MODELS"]
