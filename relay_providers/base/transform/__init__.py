"""Message history conversions from the Anthropic-style canonical shape."""

from .anthropic_format import (
    VALID_ANTHROPIC_BLOCK_TYPES,
    add_cache_breakpoints,
    filter_non_anthropic_blocks,
    system_blocks,
)
from .gemini_format import (
    build_tool_id_map,
    convert_anthropic_content_to_gemini,
    convert_anthropic_message_to_gemini,
)
from .mistral_format import convert_to_mistral_messages
from .openai_format import convert_to_openai_messages
from .r1_format import convert_to_r1_format
from .responses_format import format_responses_input

__all__ = [
    "VALID_ANTHROPIC_BLOCK_TYPES",
    "add_cache_breakpoints",
    "build_tool_id_map",
    "convert_anthropic_content_to_gemini",
    "convert_anthropic_message_to_gemini",
    "convert_to_mistral_messages",
    "convert_to_openai_messages",
    "convert_to_r1_format",
    "filter_non_anthropic_blocks",
    "format_responses_input",
    "system_blocks",
]
