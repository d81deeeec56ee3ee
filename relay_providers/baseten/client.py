"""BasetenHandler adapter.

A plain :class:`BaseOpenAICompatibleHandler` profile: static model table,
``<think>`` spans in content become reasoning, and requests default to a
temperature of 0.5 when settings give none.
"""

from __future__ import annotations

from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile
from ..config.defaults import BASETEN_DEFAULT_BASE_URL, BASETEN_DEFAULT_TEMPERATURE
from .models import BASETEN_DEFAULT_MODEL_ID, BASETEN_MODELS


class BasetenHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="baseten",
        label="Baseten",
        default_model_id=BASETEN_DEFAULT_MODEL_ID,
        models=BASETEN_MODELS,
        default_base_url=BASETEN_DEFAULT_BASE_URL,
        default_temperature=BASETEN_DEFAULT_TEMPERATURE,
    )


__all__ = ["BasetenHandler"]
