"""ApiHandler Protocol (single-class module).

The uniform contract every provider handler satisfies.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional, Protocol, Sequence, runtime_checkable

from ..models import ModelSelection
from ..streaming import StreamEvent


@runtime_checkable
class ApiHandler(Protocol):
    """Streaming message interface for a single vendor.

    ``create_message`` is a lazy generator: the request is sent when iteration
    starts and events are yielded in transport arrival order. Failures raise
    a single :class:`~relay_providers.base.errors.ProviderError`; nothing is
    retried.
    """

    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[StreamEvent]:
        ...

    def get_model(self) -> ModelSelection:
        """Resolve the configured model; unknown ids fall back, never raise."""
        ...
