"""Handler capability Protocols, one per module."""

from .api_handler import ApiHandler
from .supports_complete_prompt import SupportsCompletePrompt
from .supports_count_tokens import SupportsCountTokens
from .model_catalog_source import ModelCatalogSource

__all__ = [
    "ApiHandler",
    "SupportsCompletePrompt",
    "SupportsCountTokens",
    "ModelCatalogSource",
]
