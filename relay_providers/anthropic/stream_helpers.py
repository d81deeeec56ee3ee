"""Anthropic streaming helpers.

Purpose:
- Translate ``RawMessageStreamEvent`` objects from the Messages API into the
  uniform event union, keeping ``client.py`` focused on request building.

Event mapping:
- ``message_start``: usage with input/output and cache write/read counts
- ``message_delta``: usage with the running output count
- ``content_block_start``: ``thinking``/``text`` seed text (a newline first
  for every block after the first) and ``tool_use`` opens a tool-call slot
- ``content_block_delta``: ``thinking_delta``, ``text_delta`` and
  ``input_json_delta`` (tool-call argument fragments)
- ``content_block_stop``: resolves the slot's complete ``tool_call``
- anything else (``message_stop``, pings, signatures) is ignored
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from ..base.streaming import (
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    ToolCallAccumulator,
    ToolCallPartialEvent,
    UsageEvent,
)
from ..base.utils import attr_or_key


@dataclass
class AnthropicStreamState:
    """Running totals and open tool-call slots for one stream.

    ``message_delta`` reports the cumulative output count, so the total keeps
    the largest value seen rather than summing.
    """

    tools: ToolCallAccumulator = field(default_factory=ToolCallAccumulator)
    input_tokens: int = 0
    output_tokens: int = 0
    cache_write_tokens: int = 0
    cache_read_tokens: int = 0
    saw_usage: bool = False

    @property
    def has_tokens(self) -> bool:
        return any((self.input_tokens, self.output_tokens, self.cache_write_tokens, self.cache_read_tokens))


def _message_start(event: Any, state: AnthropicStreamState) -> Iterator[StreamEvent]:
    usage = attr_or_key(attr_or_key(event, "message"), "usage")
    if usage is None:
        return
    input_tokens = attr_or_key(usage, "input_tokens", 0)
    output_tokens = attr_or_key(usage, "output_tokens", 0)
    cache_write = attr_or_key(usage, "cache_creation_input_tokens", 0)
    cache_read = attr_or_key(usage, "cache_read_input_tokens", 0)
    state.saw_usage = True
    state.input_tokens += input_tokens
    state.output_tokens += output_tokens
    state.cache_write_tokens += cache_write
    state.cache_read_tokens += cache_read
    yield UsageEvent(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_write_tokens=cache_write or None,
        cache_read_tokens=cache_read or None,
    )


def _message_delta(event: Any, state: AnthropicStreamState) -> Iterator[StreamEvent]:
    output_tokens = attr_or_key(attr_or_key(event, "usage"), "output_tokens", 0)
    state.saw_usage = True
    state.output_tokens = max(state.output_tokens, output_tokens)
    yield UsageEvent(input_tokens=0, output_tokens=output_tokens)


def _block_start(event: Any, state: AnthropicStreamState) -> Iterator[StreamEvent]:
    index = attr_or_key(event, "index", 0)
    block = attr_or_key(event, "content_block")
    kind = attr_or_key(block, "type")
    if kind == "thinking":
        if index > 0:
            yield ReasoningEvent(text="\n")
        seed = attr_or_key(block, "thinking", "")
        if seed:
            yield ReasoningEvent(text=seed)
    elif kind == "text":
        if index > 0:
            yield TextEvent(text="\n")
        seed = attr_or_key(block, "text", "")
        if seed:
            yield TextEvent(text=seed)
    elif kind == "tool_use":
        partial = ToolCallPartialEvent(index=index, id=attr_or_key(block, "id"), name=attr_or_key(block, "name"))
        state.tools.update(partial)
        yield partial


def _block_delta(event: Any, state: AnthropicStreamState) -> Iterator[StreamEvent]:
    delta = attr_or_key(event, "delta")
    kind = attr_or_key(delta, "type")
    if kind == "thinking_delta":
        yield ReasoningEvent(text=attr_or_key(delta, "thinking", ""))
    elif kind == "text_delta":
        yield TextEvent(text=attr_or_key(delta, "text", ""))
    elif kind == "input_json_delta":
        partial = ToolCallPartialEvent(
            index=attr_or_key(event, "index", 0), arguments=attr_or_key(delta, "partial_json", "")
        )
        state.tools.update(partial)
        yield partial


def _block_stop(event: Any, state: AnthropicStreamState) -> Iterator[StreamEvent]:
    completed = state.tools.complete(attr_or_key(event, "index", 0))
    if completed is not None:
        yield completed


_HANDLERS = {
    "message_start": _message_start,
    "message_delta": _message_delta,
    "content_block_start": _block_start,
    "content_block_delta": _block_delta,
    "content_block_stop": _block_stop,
}


def translate_stream_event(event: Any, state: AnthropicStreamState) -> Iterator[StreamEvent]:
    """Map one Anthropic stream event to uniform events (may yield none)."""
    handler = _HANDLERS.get(attr_or_key(event, "type"))
    if handler is None:
        return iter(())
    return handler(event, state)


__all__ = ["AnthropicStreamState", "translate_stream_event"]
