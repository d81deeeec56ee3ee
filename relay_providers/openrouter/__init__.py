"""OpenRouter handler, catalog fetchers and request helpers."""

from .client import OpenRouterHandler, openrouter_usage_cost
from .get_openrouter_models import fetch_openrouter_endpoints, fetch_openrouter_models
from .models import OPENROUTER_DEFAULT_MODEL_ID, OPENROUTER_DEFAULT_MODEL_INFO

__all__ = [
    "OpenRouterHandler",
    "openrouter_usage_cost",
    "fetch_openrouter_endpoints",
    "fetch_openrouter_models",
    "OPENROUTER_DEFAULT_MODEL_ID",
    "OPENROUTER_DEFAULT_MODEL_INFO",
]
