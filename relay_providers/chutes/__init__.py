"""Chutes router handler and model catalog fetcher."""

from .client import ChutesHandler
from .get_chutes_models import fetch_chutes_models
from .models import CHUTES_DEFAULT_MODEL_ID, CHUTES_DEFAULT_MODEL_INFO, CHUTES_MODELS

__all__ = [
    "ChutesHandler",
    "fetch_chutes_models",
    "CHUTES_DEFAULT_MODEL_ID",
    "CHUTES_DEFAULT_MODEL_INFO",
    "CHUTES_MODELS",
]
