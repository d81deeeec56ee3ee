"""Public error surface for relay providers.

Implementations live in ``errors_parts``; import from here.
"""

from .errors_parts.error_code import ErrorCode, RETRYABLE_CODES
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, code_for_status
from .errors_parts.wrapping import completion_error, handle_openai_error, payload_error

__all__ = [
    "ErrorCode",
    "RETRYABLE_CODES",
    "ProviderError",
    "classify_exception",
    "code_for_status",
    "completion_error",
    "handle_openai_error",
    "payload_error",
]
