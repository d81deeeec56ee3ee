"""relay_providers package

One streaming interface over many LLM vendor APIs.

Public API (re-exported):
    - Version: ``__version__``
    - Factory: :func:`create`, :class:`ProviderFactory`
    - Errors: :class:`ProviderError`, :class:`ErrorCode`
    - Settings and descriptors: :class:`ProviderSettings`, :class:`ModelInfo`
    - Events: the uniform stream event dataclasses

Example::

    from relay_providers import create

    handler = create("anthropic", {"api_key": "...", "model_id": "claude-sonnet-4-5"})
    for event in handler.create_message("You are terse.", [{"role": "user", "content": "hi"}]):
        print(event.to_dict())
"""

from typing import Any

from .base.errors import ErrorCode, ProviderError
from .base.factory import ProviderFactory, SettingsInput, UnknownProviderError
from .base.models import ModelInfo, ModelSelection, ProviderSettings
from .base.streaming import (
    GroundingEvent,
    ReasoningEvent,
    StreamController,
    StreamEvent,
    TextEvent,
    ToolCallEvent,
    ToolCallPartialEvent,
    UsageEvent,
)

__version__ = "0.1.0"


def create(provider: str, settings: SettingsInput = None, **kwargs: Any) -> Any:
    """Create a handler for ``provider`` (see :meth:`ProviderFactory.create`)."""
    return ProviderFactory.create(provider, settings=settings, **kwargs)


__all__ = [
    "__version__",
    "create",
    "ProviderFactory",
    "UnknownProviderError",
    "ProviderError",
    "ErrorCode",
    "ProviderSettings",
    "ModelInfo",
    "ModelSelection",
    "StreamController",
    "StreamEvent",
    "TextEvent",
    "ReasoningEvent",
    "ToolCallPartialEvent",
    "ToolCallEvent",
    "UsageEvent",
    "GroundingEvent",
]
