"""XAIHandler adapter.

Leverages :class:`BaseOpenAICompatibleHandler` for request building and
streaming. Grok streams reasoning as ``reasoning_content``, so content is
not scanned for ``<think>`` tags. Effort-capable models (``grok-3-mini``)
receive ``reasoning_effort`` through the shared parameter resolver.
"""

from __future__ import annotations

from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile
from ..config.defaults import XAI_DEFAULT_BASE_URL
from .models import XAI_DEFAULT_MODEL_ID, XAI_MODELS


class XAIHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="xai",
        label="xAI",
        default_model_id=XAI_DEFAULT_MODEL_ID,
        models=XAI_MODELS,
        default_base_url=XAI_DEFAULT_BASE_URL,
        think_tags=False,
    )


__all__ = ["XAIHandler"]
