"""OpenRouter streaming helpers.

Purpose:
- Detect the ``error`` object OpenRouter embeds in otherwise-200 chunks.
- Accumulate ``reasoning_details`` fragments by ``(type, index)`` so the
  complete entries can be sent back on the next turn, while still streaming
  readable fragments as ``reasoning`` events.

``reasoning.text`` and ``reasoning.summary`` fragments are displayed;
``reasoning.encrypted`` data is only accumulated. The legacy ``reasoning``
string is used when a delta carries no ``reasoning_details``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..base.errors import payload_error
from ..base.streaming import ReasoningEvent, StreamEvent
from ..base.utils import attr_or_key, to_plain

_APPENDED = ("text", "summary", "data")
_REPLACED = ("id", "format", "signature")


class ReasoningDetailsAccumulator:
    """Merge streamed ``reasoning_details`` fragments into complete entries."""

    def __init__(self) -> None:
        self._entries: Dict[Tuple[str, int], Dict[str, Any]] = {}

    def update(self, detail: Any) -> Optional[str]:
        """Merge one fragment; return the text to display, if any."""
        if not isinstance(detail, dict):
            plain = to_plain(detail)
            detail = plain if isinstance(plain, dict) else dict(vars(detail))
        kind = detail.get("type", "")
        index = detail.get("index") or 0
        key = (kind, index)
        existing = self._entries.get(key)
        if existing is None:
            existing = self._entries[key] = {"type": kind, "index": index}
            for name in _APPENDED + _REPLACED:
                if detail.get(name) is not None:
                    existing[name] = detail[name]
        else:
            for name in _APPENDED:
                if detail.get(name) is not None:
                    existing[name] = existing.get(name, "") + detail[name]
            for name in _REPLACED:
                if detail.get(name) is not None:
                    existing[name] = detail[name]
        if kind == "reasoning.text" and isinstance(detail.get("text"), str):
            return detail["text"]
        if kind == "reasoning.summary" and isinstance(detail.get("summary"), str):
            return detail["summary"]
        return None

    def values(self) -> List[Dict[str, Any]]:
        return [dict(entry) for entry in self._entries.values()]

    def __len__(self) -> int:
        return len(self._entries)


def openrouter_reasoning(accumulator: ReasoningDetailsAccumulator):
    """Build the per-stream reasoning extractor bound to ``accumulator``."""

    def _extract(delta: Any) -> Iterator[StreamEvent]:
        details = attr_or_key(delta, "reasoning_details")
        if isinstance(details, list) and details:
            for detail in details:
                text = accumulator.update(detail)
                if text:
                    yield ReasoningEvent(text=text)
            return
        legacy = attr_or_key(delta, "reasoning")
        if isinstance(legacy, str) and legacy:
            yield ReasoningEvent(text=legacy)

    return _extract


def raise_on_error_chunk(chunk: Any, model: Optional[str] = None) -> Iterator[StreamEvent]:
    """Raise for an embedded ``error`` object; yields nothing otherwise."""
    error = attr_or_key(chunk, "error")
    if error is not None:
        code = attr_or_key(error, "code")
        message = attr_or_key(error, "message")
        raise payload_error(
            f"OpenRouter API Error {code}: {message}",
            provider="openrouter",
            model=model,
            status=code if isinstance(code, int) else None,
        )
    return iter(())


__all__ = ["ReasoningDetailsAccumulator", "openrouter_reasoning", "raise_on_error_chunk"]
