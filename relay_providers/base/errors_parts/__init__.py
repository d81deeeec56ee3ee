"""Error taxonomy components; import from ``relay_providers.base.errors``."""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, code_for_status
from .wrapping import completion_error, handle_openai_error, payload_error

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "code_for_status",
    "completion_error",
    "handle_openai_error",
    "payload_error",
]
