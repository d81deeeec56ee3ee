"""``tool_choice`` translation from the OpenAI vocabulary.

OpenAI accepts ``"none" | "auto" | "required"`` or
``{"type": "function", "function": {"name": ...}}``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple


def _forced_function(choice: Any) -> Optional[str]:
    if isinstance(choice, dict) and isinstance(choice.get("function"), dict):
        return choice["function"].get("name")
    return None


def to_anthropic_tool_choice(choice: Any, parallel_tool_calls: Optional[bool] = None) -> Optional[Dict[str, Any]]:
    """Anthropic ``tool_choice``; ``None`` for ``"none"`` (callers omit tools).

    Anthropic allows parallel tool use by default, so it is disabled unless
    the caller asked for parallel calls.
    """
    disable_parallel = not parallel_tool_calls
    if choice == "none":
        return None
    name = _forced_function(choice)
    if name:
        return {"type": "tool", "name": name, "disable_parallel_tool_use": disable_parallel}
    if choice == "required":
        return {"type": "any", "disable_parallel_tool_use": disable_parallel}
    return {"type": "auto", "disable_parallel_tool_use": disable_parallel}


def to_gemini_function_calling(choice: Any) -> Tuple[str, Optional[List[str]]]:
    """Return ``(mode, allowed_function_names)`` for Gemini's function-calling config.

    Modes are the ``FunctionCallingConfigMode`` value names. Unknown values
    fall back to ``AUTO`` rather than broadening tool access.
    """
    if choice == "none":
        return "NONE", None
    if choice == "required":
        return "ANY", None
    name = _forced_function(choice)
    if name and isinstance(choice, dict) and choice.get("type") == "function":
        return "ANY", [name]
    return "AUTO", None


def to_mistral_tool_choice(choice: Any) -> str:
    """Mistral requests always force tool use when tools are sent."""
    return "any"


__all__ = ["to_anthropic_tool_choice", "to_gemini_function_calling", "to_mistral_tool_choice"]
