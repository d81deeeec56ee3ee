"""ModelCatalogSource Protocol (single-class module)."""

from __future__ import annotations

from typing import Dict, Optional, Protocol, runtime_checkable

from ..models import ModelInfo


@runtime_checkable
class ModelCatalogSource(Protocol):
    """Dynamic model tables keyed by provider.

    ``get_models_from_cache`` must never perform network I/O.
    """

    def get_models(self, provider_key: str) -> Dict[str, ModelInfo]:
        ...

    def get_models_from_cache(self, provider_key: str) -> Optional[Dict[str, ModelInfo]]:
        ...
