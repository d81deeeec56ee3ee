"""Shared HTTP client pool for custom SSE adapters.

Clients are cached by ``(base_url, purpose)`` so repeated ``create_message``
calls reuse connections. Timeouts come from :func:`get_timeout_config` when a
client is first created. All pooled clients are closed at interpreter exit.
Tests swap the pool entry (or pass a client directly to the handler) to route
requests through ``httpx.MockTransport``.
"""

from __future__ import annotations

import atexit
import threading
from contextlib import suppress
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``base_url`` and ``purpose``.

    Parameters:
        base_url: API base URL set on the client so callers can issue relative
            requests. ``None`` groups clients under a shared key.
        purpose: Short discriminator for separate pools, e.g. ``"stream"``.

    Thread-safety:
        Safe for concurrent use; creation is double-checked under an RLock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().as_httpx()
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and forget every pooled client."""
    with _LOCK:
        for c in _CLIENTS.values():
            # interpreter shutdown; pool teardown failures are not actionable
            with suppress(Exception):
                c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
