"""Request shaping helpers for the OpenRouter handler.

Pure functions over OpenAI-format message lists; the handler decides when
each applies.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import OPENROUTER_DEFAULT_PROVIDER_NAME

_EPHEMERAL = {"type": "ephemeral"}
GEMINI_CACHE_FREQUENCY = 10
# Placeholder accepted by Gemini in place of a real thought signature.
GEMINI_SKIP_SIGNATURE = "skip_thought_signature_validator"


def is_r1_family(model_id: str) -> bool:
    """Models that want the system prompt as a user turn."""
    return model_id.startswith("deepseek/deepseek-r1") or model_id == "perplexity/sonar-reasoning"


def provider_routing(specific_provider: Optional[str]) -> Optional[Dict[str, Any]]:
    """Pin the request to one upstream provider, without fallbacks."""
    if not specific_provider or specific_provider == OPENROUTER_DEFAULT_PROVIDER_NAME:
        return None
    return {"order": [specific_provider], "only": [specific_provider], "allow_fallbacks": False}


def _mark_last_text(message: Dict[str, Any]) -> None:
    content = message.get("content")
    if isinstance(content, str):
        message["content"] = [{"type": "text", "text": content, "cache_control": dict(_EPHEMERAL)}]
        return
    if not isinstance(content, list):
        return
    for part in reversed(content):
        if part.get("type") == "text":
            part["cache_control"] = dict(_EPHEMERAL)
            return
    content.append({"type": "text", "text": "...", "cache_control": dict(_EPHEMERAL)})


def _mark_system(system_prompt: str, messages: List[Dict[str, Any]]) -> None:
    if messages and messages[0].get("role") == "system":
        messages[0]["content"] = [{"type": "text", "text": system_prompt, "cache_control": dict(_EPHEMERAL)}]


def add_anthropic_cache_breakpoints(system_prompt: str, messages: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Cache the system prompt and the last two user turns."""
    out = copy.deepcopy(list(messages))
    _mark_system(system_prompt, out)
    user_indices = [i for i, m in enumerate(out) if m.get("role") == "user"]
    for index in user_indices[-2:]:
        _mark_last_text(out[index])
    return out


def add_gemini_cache_breakpoints(
    system_prompt: str, messages: Sequence[Mapping[str, Any]], frequency: int = GEMINI_CACHE_FREQUENCY
) -> List[Dict[str, Any]]:
    """Cache the system prompt and every ``frequency``-th user turn."""
    out = copy.deepcopy(list(messages))
    _mark_system(system_prompt, out)
    count = 0
    for message in out:
        if message.get("role") != "user":
            continue
        count += 1
        if count % frequency == 0:
            _mark_last_text(message)
    return out


def attach_reasoning_details(
    history: Sequence[Mapping[str, Any]], converted: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Carry ``reasoning_details`` from history onto converted assistant turns.

    Assistant turns convert one-to-one and in order, so they are paired
    positionally.
    """
    details = [m.get("reasoning_details") for m in history if m.get("role") == "assistant"]
    if not any(details):
        return converted
    assistants = (m for m in converted if m.get("role") == "assistant")
    for message, detail in zip(assistants, details):
        if detail:
            message["reasoning_details"] = list(detail)
    return converted


def inject_gemini_signature_placeholders(messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Give Gemini a ``reasoning.encrypted`` entry for every prior tool call.

    Gemini validates that tool calls in the history carry a thought signature;
    turns produced by another model have none, so a placeholder is added
    unless an encrypted entry already exists.
    """
    out: List[Dict[str, Any]] = []
    for message in messages:
        tool_calls = message.get("tool_calls") or []
        existing = list(message.get("reasoning_details") or [])
        if message.get("role") != "assistant" or not tool_calls:
            out.append(message)
            continue
        if any(d.get("type") == "reasoning.encrypted" for d in existing):
            out.append(message)
            continue
        placeholders = [
            {
                "id": call.get("id"),
                "type": "reasoning.encrypted",
                "data": GEMINI_SKIP_SIGNATURE,
                "format": "google-gemini-v1",
                "index": len(existing) + i,
            }
            for i, call in enumerate(tool_calls)
        ]
        out.append({**message, "reasoning_details": existing + placeholders})
    return out


__all__ = [
    "add_anthropic_cache_breakpoints",
    "add_gemini_cache_breakpoints",
    "attach_reasoning_details",
    "inject_gemini_signature_placeholders",
    "is_r1_family",
    "provider_routing",
]
