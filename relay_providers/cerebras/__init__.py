"""Cerebras adapter (custom httpx SSE)."""

from .client import CerebrasHandler
from .models import CEREBRAS_DEFAULT_MODEL_ID, CEREBRAS_MODELS

__all__ = ["CerebrasHandler", "CEREBRAS_DEFAULT_MODEL_ID", "CEREBRAS_MODELS"]
