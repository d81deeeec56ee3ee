"""Anthropic-style history -> Mistral chat messages (REST wire shape).

Mistral enforces ``user -> assistant -> tool -> assistant`` ordering, so when
a user turn carries tool results its other content is dropped: a user
message may not follow tool messages.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from .openai_format import image_data_url

Message = Dict[str, Any]


def _tool_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "\n".join(b.get("text", "") for b in content if b.get("type") == "text")
    return ""


def _user(blocks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    results = [b for b in blocks if b.get("type") == "tool_result"]
    if results:
        return [
            {"role": "tool", "tool_call_id": b.get("tool_use_id"), "content": _tool_text(b.get("content"))}
            for b in results
        ]
    parts = []
    for block in blocks:
        if block.get("type") == "image":
            parts.append({"type": "image_url", "image_url": {"url": image_data_url(block)}})
        elif block.get("type") == "text":
            parts.append({"type": "text", "text": block.get("text", "")})
    return [{"role": "user", "content": parts}] if parts else []


def _assistant(blocks: List[Dict[str, Any]]) -> Dict[str, Any]:
    texts = [b.get("text", "") for b in blocks if b.get("type") == "text"]
    calls = [
        {
            "id": b.get("id"),
            "type": "function",
            "function": {
                "name": b.get("name"),
                "arguments": b["input"] if isinstance(b.get("input"), str) else json.dumps(b.get("input") or {}),
            },
        }
        for b in blocks
        if b.get("type") == "tool_use"
    ]
    message: Dict[str, Any] = {"role": "assistant", "content": "\n".join(texts) if texts else None}
    if calls:
        message["tool_calls"] = calls
    return message


def convert_to_mistral_messages(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for message in messages:
        role = message.get("role")
        content = message.get("content")
        if isinstance(content, str):
            out.append({"role": role, "content": content})
        elif role == "user":
            out.extend(_user(content or []))
        elif role == "assistant":
            out.append(_assistant(content or []))
    return out


__all__ = ["convert_to_mistral_messages"]
