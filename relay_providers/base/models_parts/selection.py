"""Model id resolution against a provider's table."""
from __future__ import annotations

from typing import Mapping, Optional

from .model_info import ModelInfo, ModelSelection


def select_model(
    model_id: Optional[str],
    table: Mapping[str, ModelInfo],
    default_id: str,
    fallback: Optional[ModelInfo] = None,
) -> ModelSelection:
    """Resolve ``model_id`` against ``table``.

    Known ids resolve to their descriptor. Unknown ids resolve to the default
    model, or, when ``fallback`` is given (dynamic catalogs), keep the
    requested id with the fallback descriptor. Never raises.
    """
    if model_id and model_id in table:
        return ModelSelection(id=model_id, info=table[model_id])
    if model_id and fallback is not None:
        return ModelSelection(id=model_id, info=fallback)
    if default_id in table:
        return ModelSelection(id=default_id, info=table[default_id])
    return ModelSelection(id=default_id, info=fallback or ModelInfo(context_window=0))


__all__ = ["select_model"]
