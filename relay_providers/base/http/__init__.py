"""Shared HTTP helpers for custom (non-SDK) adapters."""

from .client import close_all_clients, get_httpx_client
from .streaming import error_detail, iter_sse_response, post_json

__all__ = ["get_httpx_client", "close_all_clients", "error_detail", "iter_sse_response", "post_json"]
