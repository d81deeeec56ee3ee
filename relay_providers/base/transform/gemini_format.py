"""Anthropic-style history -> Google GenAI ``Content`` dicts.

Assistant turns become role ``model``. Tool results reference the call by
name, which Anthropic history only carries on the ``tool_use`` block, so the
converter accepts an id-to-name map built from earlier assistant turns and
otherwise derives the name from the ``<name>-<suffix>`` id convention.

``thoughtSignature`` blocks are opaque continuation tokens; when included
they are attached to the first ``functionCall`` part of the turn (or the
first part when the turn has no function call).
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

Message = Dict[str, Any]
Part = Dict[str, Any]

_SKIPPED_BLOCKS = frozenset({"reasoning", "thinking", "redacted_thinking"})


def _tool_name(tool_use_id: str, tool_id_to_name: Optional[Mapping[str, str]]) -> str:
    if tool_id_to_name and tool_use_id in tool_id_to_name:
        return tool_id_to_name[tool_use_id]
    return tool_use_id.rsplit("-", 1)[0] if "-" in tool_use_id else tool_use_id


def _inline(source: Mapping[str, Any]) -> Part:
    if source.get("type") != "base64":
        raise ValueError("Unsupported image source type")
    return {"inlineData": {"data": source.get("data"), "mimeType": source.get("media_type")}}


def _tool_result_parts(block: Mapping[str, Any], tool_id_to_name: Optional[Mapping[str, str]]) -> List[Part]:
    content = block.get("content")
    if not content:
        return []
    name = _tool_name(block.get("tool_use_id", ""), tool_id_to_name)
    if isinstance(content, str):
        return [{"functionResponse": {"name": name, "response": {"name": name, "content": content}}}]
    texts: List[str] = []
    images: List[Part] = []
    for item in content:
        if item.get("type") == "text":
            texts.append(item.get("text", ""))
        elif item.get("type") == "image" and (item.get("source") or {}).get("type") == "base64":
            images.append(_inline(item["source"]))
    text = "\n\n".join(texts) + ("\n\n(See next part for image)" if images else "")
    return [{"functionResponse": {"name": name, "response": {"name": name, "content": text}}}, *images]


def convert_anthropic_content_to_gemini(
    content: Any,
    *,
    include_thought_signatures: bool = True,
    tool_id_to_name: Optional[Mapping[str, str]] = None,
) -> List[Part]:
    """Convert one message's content to Gemini parts.

    Raises:
        ValueError: for non-base64 images and block types Gemini cannot carry
            (``document``, unknown types).
    """
    if isinstance(content, str):
        return [{"text": content}]
    parts: List[Part] = []
    signature: Optional[str] = None
    for block in content or []:
        kind = block.get("type")
        if kind == "thoughtSignature":
            if include_thought_signatures and isinstance(block.get("thoughtSignature"), str):
                signature = block["thoughtSignature"]
        elif kind == "text":
            parts.append({"text": block.get("text", "")})
        elif kind == "image":
            parts.append(_inline(block.get("source") or {}))
        elif kind == "tool_use":
            parts.append({"functionCall": {"name": block.get("name"), "args": block.get("input") or {}}})
        elif kind == "tool_result":
            parts.extend(_tool_result_parts(block, tool_id_to_name))
        elif kind in _SKIPPED_BLOCKS:
            continue
        else:
            raise ValueError(f"Unsupported content block type: {kind}")
    if signature is not None and parts:
        target = next((p for p in parts if "functionCall" in p), parts[0])
        target["thoughtSignature"] = signature
    return parts


def convert_anthropic_message_to_gemini(
    message: Message,
    *,
    include_thought_signatures: bool = True,
    tool_id_to_name: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    return {
        "role": "model" if message.get("role") == "assistant" else "user",
        "parts": convert_anthropic_content_to_gemini(
            message.get("content"),
            include_thought_signatures=include_thought_signatures,
            tool_id_to_name=tool_id_to_name,
        ),
    }


def build_tool_id_map(messages: Sequence[Message]) -> Dict[str, str]:
    """Collect ``tool_use`` id -> name from assistant turns."""
    mapping: Dict[str, str] = {}
    for message in messages:
        content = message.get("content")
        if message.get("role") != "assistant" or isinstance(content, str):
            continue
        for block in content or []:
            if block.get("type") == "tool_use" and block.get("id"):
                mapping[block["id"]] = block.get("name", "")
    return mapping


__all__ = [
    "build_tool_id_map",
    "convert_anthropic_content_to_gemini",
    "convert_anthropic_message_to_gemini",
]
