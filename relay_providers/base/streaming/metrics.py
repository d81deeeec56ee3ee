"""Per-stream metrics collected by :class:`BaseStreamingAdapter`."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .events import UsageEvent


@dataclass
class StreamMetrics:
    """Counters for one ``create_message`` invocation.

    ``input_tokens``/``output_tokens`` hold the latest counts reported by the
    vendor (usage events are cumulative snapshots for most vendors, so the
    largest value wins). ``total_cost`` is set from the terminal usage event.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cache_write_tokens: Optional[int] = None
    cache_read_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    total_cost: Optional[float] = None

    def tokens(self) -> Optional[Dict[str, Any]]:
        """Return the token mapping logged at finalize (``None`` if unknown)."""
        if self.input_tokens is None and self.output_tokens is None:
            return None
        prompt = self.input_tokens or 0
        completion = self.output_tokens or 0
        return {
            "prompt": prompt,
            "completion": completion,
            "total": prompt + completion,
            "cache_write": self.cache_write_tokens,
            "cache_read": self.cache_read_tokens,
            "reasoning": self.reasoning_tokens,
        }


def _max_opt(current: Optional[int], new: Optional[int]) -> Optional[int]:
    if new is None:
        return current
    return new if current is None else max(current, new)


def apply_usage(metrics: StreamMetrics, event: UsageEvent) -> None:
    """Fold a usage event into ``metrics``."""
    if event.total_cost is not None:
        metrics.total_cost = event.total_cost
    if not (event.input_tokens or event.output_tokens or event.cache_write_tokens or event.cache_read_tokens):
        return
    metrics.input_tokens = _max_opt(metrics.input_tokens, event.input_tokens)
    metrics.output_tokens = _max_opt(metrics.output_tokens, event.output_tokens)
    metrics.cache_write_tokens = _max_opt(metrics.cache_write_tokens, event.cache_write_tokens)
    metrics.cache_read_tokens = _max_opt(metrics.cache_read_tokens, event.cache_read_tokens)
    metrics.reasoning_tokens = _max_opt(metrics.reasoning_tokens, event.reasoning_tokens)


__all__ = ["StreamMetrics", "apply_usage"]
