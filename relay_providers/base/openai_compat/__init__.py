"""Shared Chat Completions machinery for OpenAI-compatible vendors."""

from .chat import (
    ChatStreamState,
    CostFn,
    OpenAICompatibleChat,
    ReasoningExtractor,
    chat_reasoning,
    openai_usage_cost,
    translate_chat_chunk,
)
from .handler import BaseOpenAICompatibleHandler, CompatibleProviderProfile
from .usage import parse_chat_usage

__all__ = [
    "BaseOpenAICompatibleHandler",
    "ChatStreamState",
    "CompatibleProviderProfile",
    "CostFn",
    "OpenAICompatibleChat",
    "ReasoningExtractor",
    "chat_reasoning",
    "openai_usage_cost",
    "parse_chat_usage",
    "translate_chat_chunk",
]
