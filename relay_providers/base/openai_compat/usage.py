"""Usage parsing for OpenAI-compatible chat completion chunks."""
from __future__ import annotations

from typing import Any, Optional

from ..streaming.events import UsageEvent
from ..utils import attr_or_key


def parse_chat_usage(usage: Any) -> Optional[UsageEvent]:
    """Map ``prompt_tokens``/``completion_tokens`` (plus cache detail) to a usage event.

    ``prompt_tokens`` already include cached tokens (cache-inclusive
    convention); cache reads come from ``prompt_tokens_details.cached_tokens``
    or DeepSeek's ``prompt_cache_hit_tokens``.
    """
    if usage is None:
        return None
    details = attr_or_key(usage, "prompt_tokens_details")
    cache_read = attr_or_key(details, "cached_tokens") or attr_or_key(usage, "prompt_cache_hit_tokens") or None
    reasoning = attr_or_key(attr_or_key(usage, "completion_tokens_details"), "reasoning_tokens") or None
    return UsageEvent(
        input_tokens=attr_or_key(usage, "prompt_tokens", 0) or 0,
        output_tokens=attr_or_key(usage, "completion_tokens", 0) or 0,
        cache_read_tokens=cache_read,
        reasoning_tokens=reasoning,
    )


__all__ = ["parse_chat_usage"]
