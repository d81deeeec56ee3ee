"""
Provider-agnostic handler interfaces.

Re-exports the Protocols from ``relay_providers.base.interfaces_parts`` so
callers import from one stable location.
"""

from __future__ import annotations

from .interfaces_parts import (
    ApiHandler,
    ModelCatalogSource,
    SupportsCompletePrompt,
    SupportsCountTokens,
)

__all__ = [
    "ApiHandler",
    "SupportsCompletePrompt",
    "SupportsCountTokens",
    "ModelCatalogSource",
]
