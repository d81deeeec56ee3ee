"""DeepSeekHandler adapter.

Built on :class:`BaseOpenAICompatibleHandler`. DeepSeek reports prompt-cache
accounting as ``prompt_cache_hit_tokens`` (cache reads) and
``prompt_cache_miss_tokens`` (tokens written to the cache); both are part of
``prompt_tokens``. ``deepseek-reasoner`` receives R1-shaped messages.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..base.models import ModelSelection
from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile, parse_chat_usage
from ..base.streaming import UsageEvent
from ..base.transform import convert_to_r1_format
from ..base.utils import attr_or_key
from ..config.defaults import DEEPSEEK_DEFAULT_BASE_URL, DEEPSEEK_DEFAULT_TEMPERATURE
from .models import DEEPSEEK_DEFAULT_MODEL_ID, DEEPSEEK_MODELS

_R1_MODELS = ("deepseek-reasoner",)


def parse_deepseek_usage(usage: Any) -> Optional[UsageEvent]:
    """Map DeepSeek's cache hit/miss counts onto cache read/write tokens."""
    event = parse_chat_usage(usage)
    if event is None:
        return None
    return replace(
        event,
        cache_write_tokens=attr_or_key(usage, "prompt_cache_miss_tokens") or None,
        cache_read_tokens=attr_or_key(usage, "prompt_cache_hit_tokens") or event.cache_read_tokens,
    )


class DeepSeekHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="deepseek",
        label="DeepSeek",
        default_model_id=DEEPSEEK_DEFAULT_MODEL_ID,
        models=DEEPSEEK_MODELS,
        default_base_url=DEEPSEEK_DEFAULT_BASE_URL,
        default_temperature=DEEPSEEK_DEFAULT_TEMPERATURE,
        usage_parser=parse_deepseek_usage,
    )

    def _convert_messages(
        self, selection: ModelSelection, system_prompt: str, messages: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Dict[str, Any]]]:
        if selection.id not in _R1_MODELS:
            return None
        return convert_to_r1_format([{"role": "user", "content": system_prompt}, *messages])


__all__ = ["DeepSeekHandler", "parse_deepseek_usage"]
