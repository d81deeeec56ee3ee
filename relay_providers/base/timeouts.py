"""Centralized timeout configuration for vendor calls.

Values are seconds and come from environment variables so deployments can
tune them without code changes:

``RELAY_TIMEOUT_CONNECT_SECONDS``
    Time allowed to establish a connection (default 10).
``RELAY_TIMEOUT_READ_SECONDS``
    Idle time allowed between streamed chunks (default 600; reasoning models
    can think for minutes before the first token).
``RELAY_TIMEOUT_REQUEST_SECONDS``
    Timeout passed to SDK clients for whole requests (default 600).

The parsed config is cached per process and refreshed when any of the
variables change, which keeps ``monkeypatch.setenv`` usable in tests.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

_ENV_NAMES = (
    "RELAY_TIMEOUT_CONNECT_SECONDS",
    "RELAY_TIMEOUT_READ_SECONDS",
    "RELAY_TIMEOUT_REQUEST_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds)."""

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 600.0
    request_timeout_seconds: float = 600.0

    def as_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout`` (write/pool reuse connect)."""
        return httpx.Timeout(
            self.request_timeout_seconds,
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; fall back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.read_timeout_seconds),
        request_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.request_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
