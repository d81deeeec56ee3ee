"""JSON Schema normalization for vendors with strict tool schemas.

Strict mode (OpenAI ``strict: true`` and its imitators) requires every
declared property to be listed in ``required`` and rejects nullable unions.
All helpers return new dictionaries; the caller's schema is never mutated.
"""
from __future__ import annotations

from typing import Any, Dict

_UNSUPPORTED_ARRAY_KEYS = ("minItems", "maxItems")


def _collapse_nullable(prop: Dict[str, Any]) -> Dict[str, Any]:
    kind = prop.get("type")
    if isinstance(kind, list) and "null" in kind:
        remaining = [t for t in kind if t != "null"]
        prop = dict(prop)
        prop["type"] = remaining[0] if len(remaining) == 1 else remaining
    return prop


def ensure_all_required(schema: Any) -> Any:
    """Return ``schema`` with every object property marked required.

    Recurses into nested objects and into arrays whose ``items`` is an object.
    Non-object schemas are returned unchanged.
    """
    if not isinstance(schema, dict) or schema.get("type") != "object":
        return schema
    result = dict(schema)
    properties = result.get("properties")
    if not properties:
        return result
    result["required"] = list(properties.keys())
    new_props: Dict[str, Any] = {}
    for key, prop in properties.items():
        if isinstance(prop, dict):
            prop = _collapse_nullable(prop)
            if prop.get("type") == "object":
                prop = ensure_all_required(prop)
            elif prop.get("type") == "array" and isinstance(prop.get("items"), dict) and prop["items"].get("type") == "object":
                prop = {**prop, "items": ensure_all_required(prop["items"])}
        new_props[key] = prop
    result["properties"] = new_props
    return result


def strip_unsupported_schema_fields(schema: Any) -> Any:
    """Drop array length constraints that Cerebras strict mode rejects."""
    if not isinstance(schema, dict):
        return schema
    result = dict(schema)
    kind = result.get("type")
    if kind == "array" or (isinstance(kind, list) and "array" in kind):
        for key in _UNSUPPORTED_ARRAY_KEYS:
            result.pop(key, None)
    if isinstance(result.get("properties"), dict):
        result["properties"] = {k: strip_unsupported_schema_fields(v) for k, v in result["properties"].items()}
    if "items" in result:
        result["items"] = strip_unsupported_schema_fields(result["items"])
    return result


__all__ = ["ensure_all_required", "strip_unsupported_schema_fields"]
