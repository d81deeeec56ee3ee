"""Caller-side cancellation facade over a handler stream.

``StreamController`` owns a :class:`CancellationToken`, passes it to the
handler through message metadata and records how iteration ended. Another
thread (or a UI callback) calls :meth:`cancel`; the handler then stops
yielding at its next chunk boundary and iteration ends without an error.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..cancellation import CancellationToken
from ..errors import ProviderError
from .events import StreamEvent, UsageEvent


class StreamController:
    """Cancellable iterator over ``handler.create_message(...)``.

    Example::

        ctl = StreamController(handler, system_prompt, messages)
        for event in ctl:
            if user_pressed_stop():
                ctl.cancel("user")
    """

    def __init__(
        self,
        handler: Any,
        system_prompt: str,
        messages: List[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
        token: CancellationToken | None = None,
    ) -> None:
        self._handler = handler
        self._system_prompt = system_prompt
        self._messages = messages
        self._token = token or CancellationToken()
        meta: Dict[str, Any] = dict(metadata or {})
        meta["cancellation_token"] = self._token
        self._metadata = meta
        self._finished = False
        self._error: ProviderError | None = None
        self._final_usage: UsageEvent | None = None

    def __iter__(self) -> Iterator[StreamEvent]:
        try:
            for evt in self._handler.create_message(self._system_prompt, self._messages, self._metadata):
                if isinstance(evt, UsageEvent) and evt.total_cost is not None:
                    self._final_usage = evt
                yield evt
        except ProviderError as e:
            self._error = e
            raise
        finally:
            self._finished = True

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation; safe to call repeatedly."""
        self._token.cancel(reason)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def finished(self) -> bool:
        """Whether iteration has ended (completed, cancelled or failed)."""
        return self._finished

    @property
    def error(self) -> ProviderError | None:
        return self._error

    @property
    def final_usage(self) -> UsageEvent | None:
        """The terminal cost-carrying usage event, when one was emitted."""
        return self._final_usage


__all__ = ["StreamController"]
