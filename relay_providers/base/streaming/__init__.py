"""Uniform event stream and the shared machinery that produces it."""

from .events import (
    GroundingEvent,
    GroundingSource,
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    ToolCallEvent,
    ToolCallPartialEvent,
    UsageEvent,
    events_to_dicts,
)
from .tag_matcher import TagMatcher, TagSpan, spans_to_events
from .tool_call_accumulator import ToolCallAccumulator
from .metrics import StreamMetrics
from .adapter import BaseStreamingAdapter, run_event_stream
from .controller import StreamController
from .sse import iter_sse_data, parse_sse_line

__all__ = [
    "GroundingEvent",
    "GroundingSource",
    "ReasoningEvent",
    "StreamEvent",
    "TextEvent",
    "ToolCallEvent",
    "ToolCallPartialEvent",
    "UsageEvent",
    "events_to_dicts",
    "TagMatcher",
    "TagSpan",
    "spans_to_events",
    "ToolCallAccumulator",
    "StreamMetrics",
    "BaseStreamingAdapter",
    "run_event_stream",
    "StreamController",
    "iter_sse_data",
    "parse_sse_line",
]
