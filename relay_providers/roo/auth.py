"""AuthService Protocol (single-class module)."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

AUTH_STATE_CHANGED = "auth-state-changed"


@runtime_checkable
class AuthService(Protocol):
    """Session-token source for Roo Code Cloud.

    Listeners registered for ``"auth-state-changed"`` are called with the new
    state whenever the user signs in or out.
    """

    def get_session_token(self) -> Optional[str]:
        ...

    def on(self, event: str, listener: Callable[[Any], None]) -> None:
        ...

    def off(self, event: str, listener: Callable[[Any], None]) -> None:
        ...
