"""Local token accounting.

Two different tools live here:

* :func:`estimate_usage` is the fallback for streams that never report
  usage. It is an explicit approximation: prompt characters divided by four
  for input, a tenth of the configured max tokens for output.
* :func:`count_content_tokens` backs the ``count_tokens`` capability when a
  vendor endpoint is unavailable. Text is tokenized with tiktoken
  (``o200k_base``, then ``cl100k_base``); images are priced from the size of
  their inline data. Without tiktoken installed, text falls back to the
  characters-per-token ratio.
"""
from __future__ import annotations

import json
import math
from functools import lru_cache
from typing import Any, Iterable, Mapping, Optional, Sequence

try:
    import tiktoken  # type: ignore
except ImportError:  # pragma: no cover
    tiktoken = None  # type: ignore

from ..config.defaults import (
    ESTIMATE_CHARS_PER_TOKEN,
    ESTIMATE_OUTPUT_DIVISOR,
    IMAGE_DEFAULT_TOKENS,
    TOKEN_FUDGE_FACTOR,
    TOKENIZER_ENCODINGS,
)
from .logging import get_logger
from .streaming.events import UsageEvent

_logger = get_logger("tokens")


def _block_chars(block: Mapping[str, Any]) -> int:
    kind = block.get("type")
    if kind in ("text", "reasoning"):
        return len(block.get("text") or "")
    if kind == "thinking":
        return len(block.get("thinking") or "")
    if kind == "tool_use":
        return len(block.get("name") or "") + len(json.dumps(block.get("input") or {}))
    if kind == "tool_result":
        return content_chars(block.get("content"))
    return 0


def content_chars(content: Any) -> int:
    """Character count of a message ``content`` (string or block list)."""
    if content is None:
        return 0
    if isinstance(content, str):
        return len(content)
    return sum(_block_chars(b) for b in content if isinstance(b, Mapping))


def estimate_usage(
    system_prompt: str,
    messages: Sequence[Mapping[str, Any]],
    max_tokens: Optional[int] = None,
) -> UsageEvent:
    chars = len(system_prompt or "") + sum(content_chars(m.get("content")) for m in messages)
    output = math.ceil(max_tokens / ESTIMATE_OUTPUT_DIVISOR) if max_tokens else 0
    return UsageEvent(input_tokens=math.ceil(chars / ESTIMATE_CHARS_PER_TOKEN), output_tokens=output)


@lru_cache(maxsize=1)
def _get_encoding():
    """Load the first available tiktoken encoding (``None`` without tiktoken)."""
    if tiktoken is None:
        return None
    for name in TOKENIZER_ENCODINGS:
        try:
            return tiktoken.get_encoding(name)
        except Exception as e:  # pragma: no cover
            _logger.warning("failed to load tiktoken encoding %s: %s", name, e)
    return None


def count_text_tokens(text: str) -> int:
    if not text:
        return 0
    encoding = _get_encoding()
    if encoding is None:
        return math.ceil(len(text) / ESTIMATE_CHARS_PER_TOKEN)
    # special-token markers in user text are counted as plain text
    return len(encoding.encode(text, disallowed_special=()))


def _image_tokens(block: Mapping[str, Any]) -> int:
    data = (block.get("source") or {}).get("data")
    if isinstance(data, str) and data:
        return math.ceil(math.sqrt(len(data)))
    return IMAGE_DEFAULT_TOKENS


def _block_tokens(block: Mapping[str, Any]) -> int:
    kind = block.get("type")
    if kind in ("text", "reasoning"):
        return count_text_tokens(block.get("text") or "")
    if kind == "thinking":
        return count_text_tokens(block.get("thinking") or "")
    if kind == "image":
        return _image_tokens(block)
    if kind == "tool_use":
        return count_text_tokens(block.get("name") or "") + count_text_tokens(json.dumps(block.get("input") or {}))
    if kind == "tool_result":
        content = block.get("content")
        if isinstance(content, str):
            return count_text_tokens(content)
        return sum(_block_tokens(b) for b in content or [] if isinstance(b, Mapping))
    return count_text_tokens(json.dumps(dict(block), default=str))


def count_content_tokens(content: Iterable[Mapping[str, Any]]) -> int:
    """Local token count for a block list (``count_tokens`` fallback).

    The raw total is scaled by ``TOKEN_FUDGE_FACTOR`` so local counts err
    towards overestimating context use.
    """
    blocks = [b for b in content if isinstance(b, Mapping)]
    if not blocks:
        return 0
    total = sum(_block_tokens(b) for b in blocks)
    return math.ceil(total * TOKEN_FUDGE_FACTOR)


__all__ = ["content_chars", "count_content_tokens", "count_text_tokens", "estimate_usage"]
