"""The single exception type surfaced by provider handlers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """A provider failure with a normalized classification.

    Attributes:
        code: Normalized :class:`ErrorCode` for the failure.
        message: User-facing message, already prefixed with the provider
            label (``"Mistral completion error: ..."``).
        provider: Provider key where the error originated (``"mistral"``).
        model: Model id in use when the failure happened, if known.
        retryable: Hint for the caller's retry policy. Handlers never retry.
        status: HTTP status reported by the vendor, if any.
        raw: Original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    status: Optional[int] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    def describe(self) -> str:
        """Compact ``provider:model code: message`` form used in logs."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
