"""Baseten model APIs handler."""

from .client import BasetenHandler
from .models import BASETEN_DEFAULT_MODEL_ID, BASETEN_MODELS

__all__ = ["BasetenHandler", "BASETEN_DEFAULT_MODEL_ID", "BASETEN_MODELS"]
