"""In-memory model catalog cache.

Handlers with dynamic model tables (OpenRouter, Roo, Chutes...) resolve
descriptors through this cache instead of calling the listing endpoint on
every request.

Discipline:
    * entries expire after ``ttl_seconds``;
    * empty or failed fetches are never cached;
    * concurrent refreshes for the same provider key share one in-flight
      fetch: the first caller fetches, later callers wait on its event and
      receive the same result (or the same exception).
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from ...config.defaults import MODEL_CACHE_TTL_SECONDS
from ..logging import get_logger, log_event
from ..models import ModelInfo

Fetcher = Callable[[], Mapping[str, Any]]

_logger = get_logger("catalog")


@dataclass
class _Entry:
    models: Dict[str, ModelInfo]
    fetched_at: float


@dataclass
class _Flight:
    done: threading.Event = field(default_factory=threading.Event)
    result: Optional[Dict[str, ModelInfo]] = None
    error: Optional[BaseException] = None


def _normalize(raw: Mapping[str, Any]) -> Dict[str, ModelInfo]:
    return {k: v if isinstance(v, ModelInfo) else ModelInfo.from_dict(v) for k, v in raw.items()}


class ModelCatalogCache:
    """TTL cache over per-provider fetch functions.

    Args:
        fetchers: provider key -> zero-argument callable returning
            ``{model_id: ModelInfo | dict}``.
        ttl_seconds: freshness window for cached tables.
        clock: monotonic time source (patched in tests).
    """

    def __init__(
        self,
        fetchers: Optional[Mapping[str, Fetcher]] = None,
        ttl_seconds: float = MODEL_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetchers: Dict[str, Fetcher] = dict(fetchers or {})
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._flights: Dict[str, _Flight] = {}
        self._lock = threading.Lock()

    def register(self, provider_key: str, fetcher: Fetcher) -> None:
        with self._lock:
            self._fetchers[provider_key] = fetcher

    def _fresh(self, provider_key: str) -> Optional[Dict[str, ModelInfo]]:
        entry = self._entries.get(provider_key)
        if entry is None or self._clock() - entry.fetched_at > self._ttl:
            return None
        return entry.models

    def get_models_from_cache(self, provider_key: str) -> Optional[Dict[str, ModelInfo]]:
        """Return the cached table if present and fresh; never fetches."""
        with self._lock:
            return self._fresh(provider_key)

    def get_models(self, provider_key: str) -> Dict[str, ModelInfo]:
        """Return the table for ``provider_key``, fetching when stale.

        Providers without a registered fetcher yield an empty mapping.
        """
        with self._lock:
            cached = self._fresh(provider_key)
            if cached is not None:
                return cached
            fetcher = self._fetchers.get(provider_key)
            if fetcher is None:
                return {}
            flight = self._flights.get(provider_key)
            owner = flight is None
            if owner:
                flight = self._flights[provider_key] = _Flight()
        if not owner:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.result or {}
        try:
            models = _normalize(fetcher() or {})
            flight.result = models
        except Exception as e:
            flight.error = e
            log_event(_logger, "catalog.fetch_failed", provider=provider_key, error=str(e))
            raise
        finally:
            with self._lock:
                if flight.result:
                    self._entries[provider_key] = _Entry(models=flight.result, fetched_at=self._clock())
                self._flights.pop(provider_key, None)
            flight.done.set()
        log_event(_logger, "catalog.fetched", provider=provider_key, count=len(models))
        return models

    def flush(self, provider_key: Optional[str] = None) -> None:
        """Drop one provider's table, or every table when no key is given."""
        with self._lock:
            if provider_key is None:
                self._entries.clear()
            else:
                self._entries.pop(provider_key, None)


__all__ = ["ModelCatalogCache"]
