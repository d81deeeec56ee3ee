"""MiniMaxHandler adapter.

MiniMax-M2 interleaves its reasoning into ``content`` as ``<think>`` spans,
so the shared tag matcher splits them into ``reasoning`` events. Models are
marked ``preserve_reasoning``: callers keep those spans in the history they
send back.
"""

from __future__ import annotations

from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile
from ..config.defaults import MINIMAX_DEFAULT_BASE_URL, MINIMAX_DEFAULT_TEMPERATURE
from .models import MINIMAX_DEFAULT_MODEL_ID, MINIMAX_MODELS


class MiniMaxHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="minimax",
        label="MiniMax",
        default_model_id=MINIMAX_DEFAULT_MODEL_ID,
        models=MINIMAX_MODELS,
        default_base_url=MINIMAX_DEFAULT_BASE_URL,
        default_temperature=MINIMAX_DEFAULT_TEMPERATURE,
    )


__all__ = ["MiniMaxHandler"]
