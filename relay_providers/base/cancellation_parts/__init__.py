"""Cancellation token internals."""

from .cancelled_error import CancelledError
from .cancellation_token import CancellationToken
from .state import State

__all__ = ["CancellationToken", "CancelledError", "State"]
