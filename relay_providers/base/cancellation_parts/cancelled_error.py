"""Cancellation error type."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised by ``raise_if_cancelled`` when a token has been cancelled.

    Streaming handlers do not raise this; they stop yielding and return.
    It exists for callers that drive their own loops around a token.
    """


__all__ = ["CancelledError"]
