"""SupportsCompletePrompt Protocol (single-class module)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SupportsCompletePrompt(Protocol):
    """Non-streaming single-shot completion used for one-off prompts."""

    def complete_prompt(self, prompt: str) -> str:
        ...
