"""Cooperative cancellation primitives.

Implementations live under ``cancellation_parts``; this module is the import
path used by handlers and callers.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
