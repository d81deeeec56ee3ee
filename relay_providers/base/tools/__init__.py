"""Tool declaration and ``tool_choice`` conversion helpers."""

from .choice import to_anthropic_tool_choice, to_gemini_function_calling, to_mistral_tool_choice
from .converters import (
    convert_openai_tool_to_anthropic,
    convert_openai_tools_to_anthropic,
    convert_openai_tools_to_gemini,
    convert_tools_for_openai,
    convert_tools_for_responses,
)
from .schema import ensure_all_required, strip_unsupported_schema_fields

__all__ = [
    "convert_openai_tool_to_anthropic",
    "convert_openai_tools_to_anthropic",
    "convert_openai_tools_to_gemini",
    "convert_tools_for_openai",
    "convert_tools_for_responses",
    "ensure_all_required",
    "strip_unsupported_schema_fields",
    "to_anthropic_tool_choice",
    "to_gemini_function_calling",
    "to_mistral_tool_choice",
]
