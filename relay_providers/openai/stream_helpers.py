"""OpenAI Responses API streaming helpers.

Purpose:
- Translate Responses stream events into the uniform event union.
- Capture what the caller needs for stateless continuation: the response id,
  the resolved service tier and the final ``output`` array (whose
  ``reasoning`` items carry ``encrypted_content``).

Event mapping:
- ``response.output_text.delta`` / ``response.text.delta``: text
- ``response.reasoning*.delta`` (text and summary variants): reasoning
- ``response.refusal.delta``: text prefixed with ``[Refusal]``
- ``response.output_item.added`` for a function call opens a tool-call slot
- ``response.function_call_arguments.delta``: tool-call argument fragments
- ``response.output_item.done`` for a function call resolves the complete
  ``tool_call``; message items that were never streamed as deltas are
  emitted as text
- ``response.completed`` / ``response.done``: usage with cost
- ``error`` / ``response.failed``: raised as :class:`ProviderError`
- everything else (``created``, ``in_progress``, ``*.done`` text markers) is
  ignored
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional

from ..base.errors import payload_error
from ..base.models import ModelInfo
from ..base.pricing import calculate_api_cost_openai, select_pricing_tier
from ..base.streaming import (
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    ToolCallAccumulator,
    ToolCallEvent,
    ToolCallPartialEvent,
    UsageEvent,
)
from ..base.utils import attr_or_key, to_plain

_TEXT_DELTAS = frozenset({"response.output_text.delta", "response.text.delta"})
_REASONING_DELTAS = frozenset(
    {
        "response.reasoning.delta",
        "response.reasoning_text.delta",
        "response.reasoning_summary.delta",
        "response.reasoning_summary_text.delta",
    }
)
_ARGUMENT_DELTAS = frozenset({"response.function_call_arguments.delta", "response.tool_call_arguments.delta"})
_COMPLETED = frozenset({"response.completed", "response.done"})
_FAILED = frozenset({"error", "response.failed"})
_FUNCTION_ITEMS = frozenset({"function_call", "tool_call"})


@dataclass
class ResponsesStreamState:
    """Per-request translation state and continuation capture."""

    tools: ToolCallAccumulator = field(default_factory=ToolCallAccumulator)
    response_id: Optional[str] = None
    service_tier: Optional[str] = None
    output: Optional[List[Any]] = None
    saw_usage: bool = False
    streamed_text: bool = False


def normalize_responses_usage(
    usage: Any, info: ModelInfo, service_tier: Optional[str] = None
) -> Optional[UsageEvent]:
    """Map Responses (or Chat-shaped) usage to a usage event including cost.

    ``input_tokens`` stays the total input (cache-inclusive). When the total
    is missing it is derived from the cached/miss detail counts. Pricing
    follows the effective service tier.
    """
    if usage is None:
        return None
    details = attr_or_key(usage, "input_tokens_details") or attr_or_key(usage, "prompt_tokens_details")
    cached = attr_or_key(details, "cached_tokens")
    missed = attr_or_key(details, "cache_miss_tokens")
    cached = cached if isinstance(cached, int) else 0
    missed = missed if isinstance(missed, int) else 0

    input_tokens = attr_or_key(usage, "input_tokens") or attr_or_key(usage, "prompt_tokens") or 0
    if not input_tokens and (cached or missed):
        input_tokens = cached + missed
    output_tokens = attr_or_key(usage, "output_tokens") or attr_or_key(usage, "completion_tokens") or 0
    cache_write = attr_or_key(usage, "cache_creation_input_tokens") or attr_or_key(usage, "cache_write_tokens") or 0
    cache_read = (
        attr_or_key(usage, "cache_read_input_tokens")
        or attr_or_key(usage, "cache_read_tokens")
        or attr_or_key(usage, "cached_tokens")
        or cached
    )
    reasoning = attr_or_key(attr_or_key(usage, "output_tokens_details"), "reasoning_tokens")

    priced = select_pricing_tier(info, service_tier=service_tier)
    cost = calculate_api_cost_openai(priced, input_tokens, output_tokens, cache_write, cache_read)
    return UsageEvent(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_write_tokens=cache_write,
        cache_read_tokens=cache_read,
        reasoning_tokens=reasoning if isinstance(reasoning, int) else None,
        total_cost=cost.total_cost,
    )


def _capture(event: Any, state: ResponsesStreamState) -> None:
    response = attr_or_key(event, "response")
    if response is None:
        return
    tier = attr_or_key(response, "service_tier")
    if tier:
        state.service_tier = tier
    output = attr_or_key(response, "output")
    if isinstance(output, list) and output:
        state.output = [to_plain(item) for item in output]
    response_id = attr_or_key(response, "id")
    if response_id:
        state.response_id = response_id


def _slot(event: Any) -> int:
    index = attr_or_key(event, "output_index")
    if index is None:
        index = attr_or_key(event, "index", 0)
    return index or 0


def _item_added(event: Any, state: ResponsesStreamState) -> Iterator[StreamEvent]:
    item = attr_or_key(event, "item")
    if attr_or_key(item, "type") not in _FUNCTION_ITEMS:
        return
    partial = ToolCallPartialEvent(
        index=_slot(event),
        id=attr_or_key(item, "call_id") or attr_or_key(item, "id"),
        name=attr_or_key(item, "name"),
    )
    state.tools.update(partial)
    yield partial


def _item_done(event: Any, state: ResponsesStreamState) -> Iterator[StreamEvent]:
    item = attr_or_key(event, "item")
    kind = attr_or_key(item, "type")
    if kind in _FUNCTION_ITEMS:
        streamed = state.tools.complete(_slot(event))
        call_id = attr_or_key(item, "call_id") or attr_or_key(item, "id") or (streamed.id if streamed else None)
        if not call_id:
            return
        arguments = attr_or_key(item, "arguments")
        if not isinstance(arguments, str):
            arguments = streamed.arguments if streamed and streamed.arguments else "{}"
        yield ToolCallEvent(
            id=call_id,
            name=attr_or_key(item, "name") or (streamed.name if streamed else "") or "",
            arguments=arguments,
        )
    elif kind == "message" and not state.streamed_text:
        for content in attr_or_key(item, "content") or []:
            if attr_or_key(content, "type") in ("output_text", "text") and attr_or_key(content, "text"):
                yield TextEvent(text=attr_or_key(content, "text"))


def translate_responses_event(
    event: Any,
    state: ResponsesStreamState,
    usage_builder: Callable[[Any], Optional[UsageEvent]],
    model: Optional[str] = None,
) -> Iterator[StreamEvent]:
    """Map one Responses stream event to uniform events (may yield none)."""
    _capture(event, state)
    kind = attr_or_key(event, "type")
    delta = attr_or_key(event, "delta")

    if kind in _TEXT_DELTAS:
        if delta:
            state.streamed_text = True
            yield TextEvent(text=delta)
    elif kind in _REASONING_DELTAS:
        if delta:
            yield ReasoningEvent(text=delta)
    elif kind == "response.refusal.delta":
        if delta:
            yield TextEvent(text=f"[Refusal] {delta}")
    elif kind in _ARGUMENT_DELTAS:
        partial = ToolCallPartialEvent(index=_slot(event), arguments=delta or "")
        state.tools.update(partial)
        yield partial
    elif kind == "response.output_item.added":
        yield from _item_added(event, state)
    elif kind == "response.output_item.done":
        yield from _item_done(event, state)
    elif kind in _COMPLETED:
        usage = usage_builder(attr_or_key(attr_or_key(event, "response"), "usage") or attr_or_key(event, "usage"))
        if usage is not None:
            state.saw_usage = True
            yield usage
    elif kind in _FAILED:
        error = attr_or_key(event, "error") or attr_or_key(attr_or_key(event, "response"), "error") or event
        raise payload_error(
            f"OpenAI Responses API error: {attr_or_key(error, 'message') or 'stream failed'}",
            provider="openai-native",
            model=model,
        )


def find_encrypted_reasoning(output: Optional[List[Any]]) -> Optional[dict]:
    """First ``reasoning`` item's ``encrypted_content`` (and id) from ``output``."""
    for item in output or []:
        if attr_or_key(item, "type") != "reasoning":
            continue
        encrypted = attr_or_key(item, "encrypted_content")
        if not encrypted:
            continue
        found = {"encrypted_content": encrypted}
        item_id = attr_or_key(item, "id")
        if item_id:
            found["id"] = item_id
        return found
    return None


__all__ = [
    "ResponsesStreamState",
    "find_encrypted_reasoning",
    "normalize_responses_usage",
    "translate_responses_event",
]
