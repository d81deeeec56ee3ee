"""SupportsCountTokens Protocol (single-class module)."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class SupportsCountTokens(Protocol):
    """Token counting for a list of content blocks.

    Implementations backed by a vendor endpoint fall back to local estimation
    when the endpoint fails.
    """

    def count_tokens(self, content: Sequence[Mapping[str, Any]]) -> int:
        ...
