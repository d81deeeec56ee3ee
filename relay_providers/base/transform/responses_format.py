"""Anthropic-style history -> OpenAI Responses API input items.

The system prompt is not embedded here; it travels in the top-level
``instructions`` field. Stored ``{"type": "reasoning", ...}`` items (which
carry the encrypted continuation token) are passed through verbatim.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from .openai_format import image_data_url

Message = Dict[str, Any]


def _tool_output(content: Any) -> str:
    if isinstance(content, str):
        return content
    return "".join(c.get("text", "") for c in content or [] if c.get("type") == "text")


def format_responses_input(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for message in messages:
        if message.get("type") == "reasoning":
            items.append(message)
            continue
        role = message.get("role")
        content = message.get("content")
        if role == "user":
            parts: List[Dict[str, Any]] = []
            outputs: List[Dict[str, Any]] = []
            if isinstance(content, str):
                parts.append({"type": "input_text", "text": content})
            for block in content if isinstance(content, list) else []:
                kind = block.get("type")
                if kind == "text":
                    parts.append({"type": "input_text", "text": block.get("text", "")})
                elif kind == "image":
                    parts.append({"type": "input_image", "image_url": image_data_url(block)})
                elif kind == "tool_result":
                    outputs.append(
                        {
                            "type": "function_call_output",
                            "call_id": block.get("tool_use_id"),
                            "output": _tool_output(block.get("content")),
                        }
                    )
            if parts:
                items.append({"role": "user", "content": parts})
            items.extend(outputs)
        elif role == "assistant":
            parts = []
            calls: List[Dict[str, Any]] = []
            if isinstance(content, str):
                parts.append({"type": "output_text", "text": content})
            for block in content if isinstance(content, list) else []:
                kind = block.get("type")
                if kind == "text":
                    parts.append({"type": "output_text", "text": block.get("text", "")})
                elif kind == "tool_use":
                    calls.append(
                        {
                            "type": "function_call",
                            "call_id": block.get("id"),
                            "name": block.get("name"),
                            "arguments": json.dumps(block.get("input") or {}),
                        }
                    )
            if parts:
                items.append({"role": "assistant", "content": parts})
            items.extend(calls)
    return items


__all__ = ["format_responses_input"]
