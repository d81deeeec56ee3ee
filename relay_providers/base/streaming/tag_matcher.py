"""Streaming splitter for ``<tag>...</tag>`` reasoning spans.

Several OpenAI-compatible vendors inline model reasoning in the content
stream wrapped in ``<think>`` tags. Tags can be split across deltas at any
character, so the matcher keeps the shortest buffer that could still be the
beginning of the next marker and emits everything before it as soon as it is
unambiguous.

Example::

    matcher = TagMatcher("think")
    matcher.update("<thi")          # []
    matcher.update("nk>plan</think>Answer")
    # [TagSpan(True, "plan"), TagSpan(False, "Answer")]
    matcher.final()                 # []
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, NamedTuple

from .events import ReasoningEvent, StreamEvent, TextEvent


class TagSpan(NamedTuple):
    """A determinable run of text; ``matched`` is True inside the tag."""

    matched: bool
    data: str


def _partial_suffix_len(text: str, marker: str) -> int:
    """Length of the longest suffix of ``text`` that is a proper prefix of ``marker``."""
    upper = min(len(text), len(marker) - 1)
    for size in range(upper, 0, -1):
        if marker.startswith(text[-size:]):
            return size
    return 0


class TagMatcher:
    """Incremental splitter for one tag name.

    Not thread-safe; create one per stream.
    """

    def __init__(self, tag: str = "think") -> None:
        if not tag:
            raise ValueError("tag must be a non-empty string")
        self._open = f"<{tag}>"
        self._close = f"</{tag}>"
        self._inside = False
        self._pending = ""

    @property
    def inside(self) -> bool:
        """Whether the matcher is currently between an open and close tag."""
        return self._inside

    def update(self, chunk: str) -> List[TagSpan]:
        """Consume ``chunk`` and return the spans that became determinable."""
        spans: List[TagSpan] = []
        text = self._pending + (chunk or "")
        self._pending = ""
        while text:
            marker = self._close if self._inside else self._open
            idx = text.find(marker)
            if idx >= 0:
                if idx:
                    spans.append(TagSpan(self._inside, text[:idx]))
                text = text[idx + len(marker):]
                self._inside = not self._inside
                continue
            keep = _partial_suffix_len(text, marker)
            emit = text[: len(text) - keep]
            if emit:
                spans.append(TagSpan(self._inside, emit))
            self._pending = text[len(text) - keep:]
            break
        return spans

    def final(self) -> List[TagSpan]:
        """Flush buffered text at end of stream.

        A dangling partial marker is emitted as ordinary content of the
        current state, so an unterminated ``<think>tail`` yields ``tail`` as
        matched content.
        """
        spans: List[TagSpan] = []
        if self._pending:
            spans.append(TagSpan(self._inside, self._pending))
        self._pending = ""
        return spans


def spans_to_events(spans: Iterable[TagSpan]) -> Iterator[StreamEvent]:
    """Map matcher spans to ``reasoning`` (matched) and ``text`` events."""
    for span in spans:
        if span.matched:
            yield ReasoningEvent(text=span.data)
        else:
            yield TextEvent(text=span.data)


__all__ = ["TagMatcher", "TagSpan", "spans_to_events"]
