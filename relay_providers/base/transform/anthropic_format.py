"""Anthropic Messages API request shaping.

Two concerns live here:

* an allowlist filter that removes block types Anthropic rejects (internal
  ``reasoning`` blocks, Gemini ``thoughtSignature`` blocks, anything unknown);
* prompt-cache breakpoints. The system prompt and the last two user turns are
  marked ``cache_control: ephemeral``: the final user turn becomes the new
  cache write point and the one before it the read point for this request.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

Message = Dict[str, Any]

VALID_ANTHROPIC_BLOCK_TYPES = frozenset(
    {"text", "image", "tool_use", "tool_result", "thinking", "redacted_thinking", "document"}
)

EPHEMERAL = {"type": "ephemeral"}


def filter_non_anthropic_blocks(messages: Sequence[Message]) -> List[Message]:
    """Keep only allowlisted blocks; drop messages left with no content."""
    out: List[Message] = []
    for message in messages:
        content = message.get("content")
        if isinstance(content, str):
            out.append(message)
            continue
        kept = [b for b in content or [] if b.get("type") in VALID_ANTHROPIC_BLOCK_TYPES]
        if kept:
            out.append({**message, "content": kept})
    return out


def system_blocks(system_prompt: str, cache: bool) -> List[Dict[str, Any]]:
    block: Dict[str, Any] = {"type": "text", "text": system_prompt}
    if cache:
        block["cache_control"] = dict(EPHEMERAL)
    return [block]


def _mark_last_block(message: Message) -> Message:
    content = message.get("content")
    if isinstance(content, str):
        return {**message, "content": [{"type": "text", "text": content, "cache_control": dict(EPHEMERAL)}]}
    blocks = list(content or [])
    if blocks:
        blocks[-1] = {**blocks[-1], "cache_control": dict(EPHEMERAL)}
    return {**message, "content": blocks}


def add_cache_breakpoints(messages: Sequence[Message]) -> List[Message]:
    """Return ``messages`` with the last two user turns marked as breakpoints."""
    user_indices = [i for i, m in enumerate(messages) if m.get("role") == "user"]
    marked = set(user_indices[-2:])
    return [_mark_last_block(m) if i in marked else m for i, m in enumerate(messages)]


__all__ = [
    "EPHEMERAL",
    "VALID_ANTHROPIC_BLOCK_TYPES",
    "add_cache_breakpoints",
    "filter_non_anthropic_blocks",
    "system_blocks",
]
