"""Terminal logging for a stream (success, failure or cancellation)."""
from __future__ import annotations

from typing import Optional

from ..logging import LogContext, normalized_log_event
from .metrics import StreamMetrics


def finalize_stream(
    *,
    logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    error_code: Optional[str] = None,
    error: Optional[str] = None,
    cancelled: bool = False,
) -> None:
    """Emit the consolidated ``stream.end`` / ``stream.error`` event."""
    if error_code is not None:
        event = "stream.error"
    elif cancelled:
        event = "stream.cancelled"
    else:
        event = "stream.end"
    normalized_log_event(
        logger,
        event,
        ctx,
        phase="finalize",
        attempt=None,
        emitted=metrics.emitted > 0,
        tokens=metrics.tokens(),
        error_code=error_code,
        emitted_count=metrics.emitted,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        total_cost=metrics.total_cost,
        error=error[:500] if error else None,
    )


__all__ = ["finalize_stream"]
