"""Anthropic-style history -> OpenAI Chat Completions messages."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

Message = Dict[str, Any]


def image_data_url(block: Dict[str, Any]) -> str:
    source = block.get("source") or {}
    if source.get("type") == "url":
        return source.get("url", "")
    return f"data:{source.get('media_type')};base64,{source.get('data')}"


def tool_result_text(content: Any, joiner: str = "\n") -> str:
    """Flatten a ``tool_result`` content payload to text (images are noted)."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts: List[str] = []
    for item in content:
        if item.get("type") == "text":
            parts.append(item.get("text", ""))
        elif item.get("type") == "image":
            parts.append("(see following user message for image)")
    return joiner.join(parts)


def _arguments(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value if value is not None else {})


def _convert_user(message: Message) -> List[Dict[str, Any]]:
    content = message.get("content")
    if isinstance(content, str):
        return [{"role": "user", "content": content}]
    out: List[Dict[str, Any]] = []
    parts: List[Dict[str, Any]] = []
    for block in content or []:
        kind = block.get("type")
        if kind == "tool_result":
            out.append(
                {
                    "role": "tool",
                    "tool_call_id": block.get("tool_use_id"),
                    "content": tool_result_text(block.get("content")),
                }
            )
        elif kind == "image":
            parts.append({"type": "image_url", "image_url": {"url": image_data_url(block)}})
        elif kind == "text":
            parts.append({"type": "text", "text": block.get("text", "")})
    # tool messages must directly follow the assistant turn that issued the calls
    if parts:
        out.append({"role": "user", "content": parts})
    return out


def _convert_assistant(message: Message) -> Dict[str, Any]:
    content = message.get("content")
    if isinstance(content, str):
        return {"role": "assistant", "content": content}
    texts: List[str] = []
    tool_calls: List[Dict[str, Any]] = []
    for block in content or []:
        kind = block.get("type")
        if kind == "text":
            texts.append(block.get("text", ""))
        elif kind == "tool_use":
            tool_calls.append(
                {
                    "id": block.get("id"),
                    "type": "function",
                    "function": {"name": block.get("name"), "arguments": _arguments(block.get("input"))},
                }
            )
    out: Dict[str, Any] = {"role": "assistant", "content": "\n".join(texts) if texts else None}
    if tool_calls:
        out["tool_calls"] = tool_calls
    return out


def convert_to_openai_messages(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    """Convert history; ``reasoning``/``thinking`` blocks are dropped."""
    out: List[Dict[str, Any]] = []
    for message in messages:
        if message.get("role") == "assistant":
            out.append(_convert_assistant(message))
        else:
            out.extend(_convert_user(message))
    return out


__all__ = ["convert_to_openai_messages", "image_data_url", "tool_result_text"]
