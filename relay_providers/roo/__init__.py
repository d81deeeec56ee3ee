"""Roo Code Cloud handler, auth protocol and catalog fetcher."""

from .auth import AUTH_STATE_CHANGED, AuthService
from .client import RooHandler
from .get_roo_models import fetch_roo_models
from .models import ROO_DEFAULT_MODEL_ID, ROO_FALLBACK_MODEL_INFO

__all__ = [
    "AUTH_STATE_CHANGED",
    "AuthService",
    "RooHandler",
    "fetch_roo_models",
    "ROO_DEFAULT_MODEL_ID",
    "ROO_FALLBACK_MODEL_INFO",
]
