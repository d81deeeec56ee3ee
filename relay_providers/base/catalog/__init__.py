"""Model catalog caching."""

from .model_cache import ModelCatalogCache

__all__ = ["ModelCatalogCache"]
