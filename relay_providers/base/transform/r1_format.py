"""DeepSeek R1 message shaping.

R1 documents a preference against system-role messages and rejects
consecutive turns of the same role. Callers prepend the system prompt as a
user turn; this module merges adjacent same-role messages.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .openai_format import image_data_url

Message = Dict[str, Any]


def _parts(content: Any) -> List[Dict[str, Any]]:
    if isinstance(content, str):
        return [{"type": "text", "text": content}]
    parts: List[Dict[str, Any]] = []
    for block in content or []:
        if block.get("type") == "text":
            parts.append({"type": "text", "text": block.get("text", "")})
        elif block.get("type") == "image":
            parts.append({"type": "image_url", "image_url": {"url": image_data_url(block)}})
    return parts


def _flatten(parts: List[Dict[str, Any]]) -> Any:
    if all(p["type"] == "text" for p in parts):
        return "\n".join(p["text"] for p in parts)
    return parts


def convert_to_r1_format(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    merged: List[Dict[str, Any]] = []
    for message in messages:
        role = message.get("role", "user")
        parts = _parts(message.get("content"))
        if merged and merged[-1]["role"] == role:
            merged[-1]["parts"].extend(parts)
        else:
            merged.append({"role": role, "parts": parts})
    return [{"role": m["role"], "content": _flatten(m["parts"])} for m in merged]


__all__ = ["convert_to_r1_format"]
