"""Gemini streaming helpers.

Purpose:
- Translate ``GenerateContentResponse`` chunks from ``google-genai`` into the
  uniform event union.
- Keep the data the caller persists between turns: the last thought
  signature (base64 text) and the response id.

Chunk mapping:
- ``part.thought`` with text: reasoning
- ``part.function_call``: Gemini sends complete calls, which are emitted as
  two ``tool_call_partial`` events (name, then JSON arguments) under a
  synthesized ``<name>-<n>`` id so downstream assembly is uniform
- other parts with text: text
- ``chunk.text`` when the chunk has no candidates
- ``usage_metadata`` and ``grounding_metadata`` are remembered and emitted
  once after the stream ends (grounding, then usage with cost)
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from ..base.models import ModelInfo
from ..base.pricing import calculate_tiered_cost, select_pricing_tier
from ..base.streaming import (
    GroundingEvent,
    GroundingSource,
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    ToolCallPartialEvent,
    UsageEvent,
)
from ..base.utils import attr_or_key


@dataclass
class GeminiStreamState:
    capture_signatures: bool = False
    tool_calls: int = 0
    thought_signature: Optional[str] = None
    response_id: Optional[str] = None
    usage: Any = None
    grounding: Any = None


def encode_signature(signature: Any) -> Optional[str]:
    """Thought signatures arrive as bytes; history stores base64 text."""
    if isinstance(signature, (bytes, bytearray)):
        return base64.b64encode(bytes(signature)).decode("ascii")
    return signature if isinstance(signature, str) and signature else None


def _parts(candidate: Any) -> List[Any]:
    return list(attr_or_key(attr_or_key(candidate, "content"), "parts") or [])


def translate_gemini_chunk(chunk: Any, state: GeminiStreamState) -> Iterator[StreamEvent]:
    """Map one stream chunk to uniform events (may yield none)."""
    candidates = attr_or_key(chunk, "candidates") or []
    if candidates:
        candidate = candidates[0]
        if attr_or_key(candidate, "finish_reason") and attr_or_key(chunk, "response_id"):
            state.response_id = attr_or_key(chunk, "response_id")
        grounding = attr_or_key(candidate, "grounding_metadata")
        if grounding is not None:
            state.grounding = grounding
        for part in _parts(candidate):
            signature = encode_signature(attr_or_key(part, "thought_signature"))
            if state.capture_signatures and signature:
                state.thought_signature = signature
            text = attr_or_key(part, "text")
            call = attr_or_key(part, "function_call")
            if attr_or_key(part, "thought"):
                if text:
                    yield ReasoningEvent(text=text)
            elif call is not None:
                index = state.tool_calls
                name = attr_or_key(call, "name")
                call_id = f"{name}-{index}"
                yield ToolCallPartialEvent(index=index, id=call_id, name=name)
                yield ToolCallPartialEvent(index=index, id=call_id, arguments=json.dumps(attr_or_key(call, "args") or {}))
                state.tool_calls += 1
            elif text:
                yield TextEvent(text=text)
    else:
        text = attr_or_key(chunk, "text")
        if text:
            yield TextEvent(text=text)
    usage = attr_or_key(chunk, "usage_metadata")
    if usage is not None:
        state.usage = usage


def grounding_sources(metadata: Any) -> List[GroundingSource]:
    """Web sources from ``grounding_chunks``; chunks without a URI are skipped."""
    sources: List[GroundingSource] = []
    for item in attr_or_key(metadata, "grounding_chunks") or []:
        web = attr_or_key(item, "web")
        uri = attr_or_key(web, "uri")
        if uri:
            sources.append(GroundingSource(title=attr_or_key(web, "title") or uri, url=uri))
    return sources


def citations(metadata: Any) -> Optional[str]:
    sources = grounding_sources(metadata)
    if not sources:
        return None
    return ", ".join(f"[{i}]({s.url})" for i, s in enumerate(sources, start=1))


def gemini_cost(
    info: ModelInfo, input_tokens: int, output_tokens: int, cache_read_tokens: int = 0, reasoning_tokens: int = 0
) -> Optional[float]:
    """Tiered cost; ``None`` when the applicable tier has no input/output price."""
    priced = select_pricing_tier(info, input_tokens=input_tokens)
    if not priced.input_price or not priced.output_price:
        return None
    return calculate_tiered_cost(info, input_tokens, output_tokens, cache_read_tokens, reasoning_tokens).total_cost


def usage_event(usage: Any, info: ModelInfo) -> UsageEvent:
    input_tokens = attr_or_key(usage, "prompt_token_count") or 0
    output_tokens = attr_or_key(usage, "candidates_token_count") or 0
    cache_read = attr_or_key(usage, "cached_content_token_count")
    reasoning = attr_or_key(usage, "thoughts_token_count")
    return UsageEvent(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_read_tokens=cache_read,
        reasoning_tokens=reasoning,
        total_cost=gemini_cost(info, input_tokens, output_tokens, cache_read or 0, reasoning or 0),
    )


def finalize_gemini(state: GeminiStreamState, info: ModelInfo) -> Iterator[StreamEvent]:
    if state.grounding is not None:
        sources = grounding_sources(state.grounding)
        if sources:
            yield GroundingEvent(sources=tuple(sources))
    if state.usage is not None:
        yield usage_event(state.usage, info)


__all__ = [
    "GeminiStreamState",
    "citations",
    "encode_signature",
    "finalize_gemini",
    "gemini_cost",
    "grounding_sources",
    "translate_gemini_chunk",
    "usage_event",
]
