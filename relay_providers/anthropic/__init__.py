"""Anthropic Messages API handler."""

from .client import AnthropicHandler
from .models import ANTHROPIC_DEFAULT_MODEL_ID, ANTHROPIC_MODELS

__all__ = ["AnthropicHandler", "ANTHROPIC_DEFAULT_MODEL_ID", "ANTHROPIC_MODELS"]
