"""Uniform stream events.

Every handler's ``create_message`` yields instances of the dataclasses below,
in the order the vendor transport delivered the underlying data. Consumers
dispatch on the ``type`` attribute (or ``isinstance``); ``to_dict`` renders the
wire shape with camelCase keys and without unset optional fields.

Ordering contract:
    * content events (text, reasoning, tool calls, grounding) are yielded as
      they arrive; no reordering across event types;
    * a ``tool_call_partial`` for a slot precedes any ``tool_call`` resolved
      from that slot;
    * at most one ``UsageEvent`` per stream carries ``total_cost``; it is the
      last usage event and follows all token-count usage events.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class TextEvent:
    """Visible assistant output fragment."""

    text: str
    type: ClassVar[str] = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ReasoningEvent:
    """Model reasoning/thinking fragment; never part of the final answer."""

    text: str
    type: ClassVar[str] = "reasoning"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolCallPartialEvent:
    """Incremental fragment of a tool invocation in stream slot ``index``.

    ``id`` and ``name`` typically appear once, on the first fragment;
    ``arguments`` fragments concatenate in arrival order.
    """

    index: int
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: Optional[str] = None
    type: ClassVar[str] = "tool_call_partial"

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {"type": self.type, "index": self.index, "id": self.id, "name": self.name, "arguments": self.arguments}
        )


@dataclass(frozen=True)
class ToolCallEvent:
    """A complete tool invocation; ``arguments`` is a JSON object string."""

    id: str
    name: str
    arguments: str
    type: ClassVar[str] = "tool_call"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "id": self.id, "name": self.name, "arguments": self.arguments}


@dataclass(frozen=True)
class UsageEvent:
    """Token counts and/or cost.

    Incremental usage events carry counts; the terminal one may carry only
    ``total_cost`` (with zero counts).
    """

    input_tokens: int = 0
    output_tokens: int = 0
    cache_write_tokens: Optional[int] = None
    cache_read_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    total_cost: Optional[float] = None
    type: ClassVar[str] = "usage"

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "type": self.type,
                "inputTokens": self.input_tokens,
                "outputTokens": self.output_tokens,
                "cacheWriteTokens": self.cache_write_tokens,
                "cacheReadTokens": self.cache_read_tokens,
                "reasoningTokens": self.reasoning_tokens,
                "totalCost": self.total_cost,
            }
        )


@dataclass(frozen=True)
class GroundingSource:
    """One citation backing a grounded answer."""

    title: str
    url: str
    snippet: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"title": self.title, "url": self.url, "snippet": self.snippet})


@dataclass(frozen=True)
class GroundingEvent:
    """Citation/grounding metadata (search or URL-context results)."""

    sources: Tuple[GroundingSource, ...] = field(default_factory=tuple)
    type: ClassVar[str] = "grounding"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "sources": [s.to_dict() for s in self.sources]}


StreamEvent = Union[
    TextEvent,
    ReasoningEvent,
    ToolCallPartialEvent,
    ToolCallEvent,
    UsageEvent,
    GroundingEvent,
]


def events_to_dicts(events: List[StreamEvent]) -> List[Dict[str, Any]]:
    """Render a list of events to their wire dictionaries."""
    return [e.to_dict() for e in events]


__all__ = [
    "TextEvent",
    "ReasoningEvent",
    "ToolCallPartialEvent",
    "ToolCallEvent",
    "UsageEvent",
    "GroundingSource",
    "GroundingEvent",
    "StreamEvent",
    "events_to_dicts",
]
