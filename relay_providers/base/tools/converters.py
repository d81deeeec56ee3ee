"""Translate OpenAI-style tool declarations into vendor-native shapes.

Tools reach ``create_message`` as::

    {"type": "function", "function": {"name", "description", "parameters"}}

Each converter returns fresh dictionaries; nested ``parameters`` objects are
passed through by reference unless a strict-mode normalization applies.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from .schema import ensure_all_required

Tool = Dict[str, Any]


def _function(tool: Tool) -> Dict[str, Any]:
    return tool.get("function") or {}


def convert_openai_tool_to_anthropic(tool: Tool) -> Dict[str, Any]:
    """``{type: function, function: {...}}`` -> ``{name, description, input_schema}``.

    Raises:
        ValueError: for tool types other than ``"function"``.
    """
    if tool.get("type") != "function":
        raise ValueError(f"Unsupported tool type: {tool.get('type')}")
    fn = _function(tool)
    return {
        "name": fn.get("name"),
        "description": fn.get("description") or "",
        "input_schema": fn.get("parameters"),
    }


def convert_openai_tools_to_anthropic(tools: Iterable[Tool]) -> List[Dict[str, Any]]:
    return [convert_openai_tool_to_anthropic(t) for t in tools]


def convert_openai_tools_to_gemini(tools: Iterable[Tool]) -> Dict[str, Any]:
    """Build a single Gemini ``Tool`` dict holding all ``functionDeclarations``."""
    declarations = []
    for tool in tools:
        fn = _function(tool)
        declarations.append(
            {
                "name": fn.get("name"),
                "description": fn.get("description"),
                "parametersJsonSchema": fn.get("parameters"),
            }
        )
    return {"functionDeclarations": declarations}


def convert_tools_for_responses(tools: Iterable[Tool]) -> List[Dict[str, Any]]:
    """Flatten function tools for the OpenAI Responses API with ``strict: True``."""
    out: List[Dict[str, Any]] = []
    for tool in tools:
        if tool.get("type") != "function":
            continue
        fn = _function(tool)
        out.append(
            {
                "type": "function",
                "name": fn.get("name"),
                "description": fn.get("description"),
                "parameters": ensure_all_required(fn.get("parameters")),
                "strict": True,
            }
        )
    return out


def convert_tools_for_openai(
    tools: Optional[Iterable[Tool]],
    schema_transform: Optional[Callable[[Any], Any]] = None,
) -> Optional[List[Tool]]:
    """Apply strict-mode normalization to chat-completions function tools.

    Non-function tools pass through untouched. ``schema_transform`` runs after
    :func:`ensure_all_required` for vendors with further restrictions.
    """
    if tools is None:
        return None
    out: List[Tool] = []
    for tool in tools:
        if tool.get("type") != "function":
            out.append(tool)
            continue
        fn = _function(tool)
        params = ensure_all_required(fn.get("parameters"))
        if schema_transform is not None:
            params = schema_transform(params)
        out.append({**tool, "function": {**fn, "strict": True, "parameters": params}})
    return out


__all__ = [
    "convert_openai_tool_to_anthropic",
    "convert_openai_tools_to_anthropic",
    "convert_openai_tools_to_gemini",
    "convert_tools_for_openai",
    "convert_tools_for_responses",
]
