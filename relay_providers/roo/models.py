"""Roo Code Cloud models.

Roo is fully dynamic: descriptors come from the proxy's ``/v1/models``
listing. Ids missing from the catalog keep their id and use
:data:`ROO_FALLBACK_MODEL_INFO`.
"""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import ROO_DEFAULT_MODEL

ROO_DEFAULT_MODEL_ID = ROO_DEFAULT_MODEL

ROO_FALLBACK_MODEL_INFO = ModelInfo(
    context_window=262_144,
    max_tokens=16_384,
    supports_prompt_cache=True,
    input_price=0.0,
    output_price=0.0,
)

ROO_MODELS: Dict[str, ModelInfo] = {}

__all__ = ["ROO_DEFAULT_MODEL_ID", "ROO_FALLBACK_MODEL_INFO", "ROO_MODELS"]
