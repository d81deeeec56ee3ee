"""Unbound gateway models.

Unbound routes ``<vendor>/<model>`` ids to upstream vendors. The live table
comes from the gateway's ``/models`` listing; ids missing from it resolve to
the default Claude model.
"""
from __future__ import annotations

from typing import Dict

from ..base.models import ModelInfo
from ..config.defaults import UNBOUND_DEFAULT_MODEL

UNBOUND_DEFAULT_MODEL_ID = UNBOUND_DEFAULT_MODEL

UNBOUND_DEFAULT_MODEL_INFO = ModelInfo(
    context_window=200_000,
    max_tokens=8192,
    supports_images=True,
    supports_prompt_cache=True,
    supports_native_tools=True,
    input_price=3.0,
    output_price=15.0,
    cache_writes_price=3.75,
    cache_reads_price=0.3,
)

UNBOUND_MODELS: Dict[str, ModelInfo] = {UNBOUND_DEFAULT_MODEL_ID: UNBOUND_DEFAULT_MODEL_INFO}

__all__ = ["UNBOUND_DEFAULT_MODEL_ID", "UNBOUND_DEFAULT_MODEL_INFO", "UNBOUND_MODELS"]
