"""Uniform read access to vendor payloads.

SDK streams yield typed objects while tests and custom HTTP adapters hand
over plain decoded JSON. Translators read both through :func:`attr_or_key`
so one code path serves either shape.
"""
from __future__ import annotations

from typing import Any, Mapping


def attr_or_key(obj: Any, name: str, default: Any = None) -> Any:
    """Return ``obj[name]`` for mappings, ``obj.name`` otherwise.

    ``None`` objects and missing fields yield ``default``.
    """
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        value = obj.get(name, default)
    else:
        value = getattr(obj, name, default)
    return default if value is None else value


def to_plain(obj: Any) -> Any:
    """Best-effort conversion of an SDK model to plain dict/list data.

    Pydantic-based SDK objects expose ``model_dump``; everything else is
    returned unchanged.
    """
    dump = getattr(obj, "model_dump", None)
    if callable(dump):
        return dump(exclude_none=True)
    if isinstance(obj, list):
        return [to_plain(item) for item in obj]
    return obj


__all__ = ["attr_or_key", "to_plain"]
