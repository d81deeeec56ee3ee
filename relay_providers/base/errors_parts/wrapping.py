"""Build the user-facing :class:`ProviderError` for a failed vendor call.

Every handler funnels unexpected failures through :func:`completion_error` so
that callers see one message shape, ``"<Label> completion error: <detail>"``,
or a more actionable sentence when the HTTP status identifies the cause.
"""
from __future__ import annotations

from typing import Optional

from .classification import _extract_status, classify_exception, code_for_status
from .error_code import RETRYABLE_CODES, ErrorCode
from .provider_error import ProviderError

_BYTESTRING_MARKER = "Cannot convert argument to a ByteString"


def _status_message(label: str, status: int, detail: str) -> Optional[str]:
    if status == 401:
        return f"{label} authentication failed: invalid API key. {detail}".rstrip()
    if status == 403:
        return f"{label} access forbidden: check API key permissions. {detail}".rstrip()
    if status == 429:
        return f"{label} rate limit exceeded: {detail}"
    if status >= 500:
        return f"{label} server error ({status}): {detail}"
    return None


def completion_error(
    label: str,
    exc: BaseException,
    *,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    status: Optional[int] = None,
) -> ProviderError:
    """Wrap ``exc`` as a classified :class:`ProviderError`.

    ``ProviderError`` instances pass through untouched so wrapping is
    idempotent across nested helpers. ``status`` overrides whatever status can
    be read off the exception (custom HTTP adapters know it directly).
    """
    if isinstance(exc, ProviderError):
        return exc
    detail = str(exc) or exc.__class__.__name__
    status = status if status is not None else _extract_status(exc)
    code = code_for_status(status)
    if code is ErrorCode.UNKNOWN:
        code = classify_exception(exc)
    message = _status_message(label, status, detail) if status is not None else None
    return ProviderError(
        code=code,
        message=message or f"{label} completion error: {detail}",
        provider=provider or label.lower(),
        model=model,
        retryable=code in RETRYABLE_CODES,
        status=status,
        raw=exc,
    )


def handle_openai_error(
    exc: BaseException,
    label: str,
    *,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> ProviderError:
    """OpenAI-SDK flavored variant of :func:`completion_error`.

    Non-ASCII characters in an API key surface from the HTTP stack as an
    opaque encoding error; that case is rewritten into an actionable message.
    """
    if isinstance(exc, ProviderError):
        return exc
    text = str(exc)
    if _BYTESTRING_MARKER in text or isinstance(exc, UnicodeEncodeError):
        return ProviderError(
            code=ErrorCode.AUTH,
            message=f"{label} completion error: Invalid characters in API key. Please check your API key for special characters.",
            provider=provider or label.lower(),
            model=model,
            raw=exc,
        )
    return completion_error(label, exc, provider=provider, model=model)


def payload_error(
    message: str,
    *,
    provider: str,
    model: Optional[str] = None,
    status: Optional[int] = None,
) -> ProviderError:
    """Build the error for a vendor failure embedded in an otherwise-200 stream.

    ``message`` is used verbatim; the numeric vendor code (when any) drives
    classification.
    """
    code = code_for_status(status) if status is not None else classify_exception(Exception(message))
    return ProviderError(
        code=code,
        message=message,
        provider=provider,
        model=model,
        retryable=code in RETRYABLE_CODES,
        status=status,
    )


__all__ = ["completion_error", "handle_openai_error", "payload_error"]
