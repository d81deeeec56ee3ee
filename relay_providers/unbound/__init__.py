"""Unbound gateway handler and model catalog fetcher."""

from .client import UnboundHandler, parse_unbound_usage, upstream_model_id
from .get_unbound_models import fetch_unbound_models
from .models import UNBOUND_DEFAULT_MODEL_ID, UNBOUND_DEFAULT_MODEL_INFO, UNBOUND_MODELS

__all__ = [
    "UnboundHandler",
    "fetch_unbound_models",
    "parse_unbound_usage",
    "upstream_model_id",
    "UNBOUND_DEFAULT_MODEL_ID",
    "UNBOUND_DEFAULT_MODEL_INFO",
    "UNBOUND_MODELS",
]
