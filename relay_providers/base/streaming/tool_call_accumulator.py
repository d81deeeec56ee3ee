"""Reassembly of fragmented tool-call deltas.

Vendors deliver tool invocations as a start signal (id + name), any number of
argument fragments and, for block-structured protocols, an explicit stop.
The accumulator keeps one record per stream-local slot in a plain ``dict`` so
sparse or out-of-order indices stay detectable, and resolves a complete
:class:`ToolCallEvent` when a slot is completed.

A completion for a slot that was never opened is a vendor protocol violation;
it is logged at debug level and ignored so the stream keeps flowing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .events import ToolCallEvent, ToolCallPartialEvent

_log = logging.getLogger("relay.streaming.tool_calls")


@dataclass
class ToolCallRecord:
    """Accumulation state for one slot."""

    id: Optional[str] = None
    name: Optional[str] = None
    arguments: List[str] = field(default_factory=list)

    def to_event(self) -> ToolCallEvent:
        return ToolCallEvent(id=self.id or "", name=self.name or "", arguments="".join(self.arguments))


class ToolCallAccumulator:
    """Per-stream map from slot index to :class:`ToolCallRecord`."""

    def __init__(self) -> None:
        self._slots: Dict[int, ToolCallRecord] = {}
        self._completed: List[ToolCallEvent] = []

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, index: object) -> bool:
        return index in self._slots

    def update(self, fragment: ToolCallPartialEvent) -> None:
        """Merge ``fragment`` into its slot, opening the slot on first sight."""
        record = self._slots.get(fragment.index)
        if record is None:
            record = self._slots[fragment.index] = ToolCallRecord()
        if fragment.id and not record.id:
            record.id = fragment.id
        if fragment.name and not record.name:
            record.name = fragment.name
        if fragment.arguments:
            record.arguments.append(fragment.arguments)

    def complete(self, index: int) -> Optional[ToolCallEvent]:
        """Close slot ``index`` and return its tool call (``None`` if unknown)."""
        record = self._slots.pop(index, None)
        if record is None:
            _log.debug("tool call completion for unknown slot %s ignored", index)
            return None
        event = record.to_event()
        self._completed.append(event)
        return event

    def complete_all(self) -> List[ToolCallEvent]:
        """Close every open slot in index order (end of stream)."""
        return [event for index in sorted(self._slots) if (event := self.complete(index)) is not None]

    def drain(self) -> List[ToolCallEvent]:
        """Return and forget tool calls completed since the last drain."""
        done, self._completed = self._completed, []
        return done

    def reset(self) -> None:
        self._slots.clear()
        self._completed.clear()


__all__ = ["ToolCallAccumulator", "ToolCallRecord"]
