"""Deterministic mock handler backed by JSON fixtures for offline testing.

Purpose
-------
Implement the handler contract without network traffic so callers (agent
loops, UIs, tests) can exercise the uniform event stream end to end.
Responses come from a declarative fixture catalog keyed by the text of the
last user message.

Fixture entries
---------------
``text``
    Visible answer, streamed in small chunks.
``events``
    Explicit event dictionaries (``text``, ``reasoning``,
    ``tool_call_partial``, ``tool_call``, ``grounding``). Partial tool-call
    fragments are reassembled and completed at the end of the stream.
``usage``
    Token counts; an estimate is used when absent.
``error``
    ``{"status": 429, "message": "..."}`` raises the classified
    :class:`ProviderError` a live vendor failure would.

External dependencies
---------------------
Standard library only. Fixtures are loaded via ``importlib.resources``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from importlib import resources
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from ..base.errors import payload_error
from ..base.logging import LogContext, get_logger, log_provider_error, normalized_log_event
from ..base.models import ModelInfo, ModelSelection, ProviderSettings
from ..base.streaming import (
    GroundingEvent,
    GroundingSource,
    ReasoningEvent,
    StreamEvent,
    TextEvent,
    ToolCallAccumulator,
    ToolCallEvent,
    ToolCallPartialEvent,
    UsageEvent,
    run_event_stream,
)
from ..base.usage import estimate_usage

_FIXTURE_RESOURCE = "chat_completions.json"
_MOCK_INFO = ModelInfo(context_window=128_000, max_tokens=4096, supports_native_tools=True, is_free=True)


@dataclass
class FixtureResponse:
    """A single fixture response entry."""

    prompt_key: str
    events: List[Mapping[str, Any]] = field(default_factory=list)
    usage: Optional[Mapping[str, Any]] = None
    error: Optional[Mapping[str, Any]] = None


def load_fixture_catalog(resource: str = _FIXTURE_RESOURCE) -> Dict[str, Any]:
    """Load the JSON fixture catalog bundled with the mock handler."""
    data = resources.files("relay_providers.mock.fixtures").joinpath(resource).read_text(encoding="utf-8")
    return json.loads(data)


def event_from_dict(data: Mapping[str, Any]) -> StreamEvent:
    """Build a uniform event from its fixture dictionary.

    Raises:
        ValueError: unknown event ``type``.
    """
    kind = data.get("type")
    if kind == "text":
        return TextEvent(text=str(data.get("text", "")))
    if kind == "reasoning":
        return ReasoningEvent(text=str(data.get("text", "")))
    if kind == "tool_call_partial":
        return ToolCallPartialEvent(
            index=int(data.get("index", 0)),
            id=data.get("id"),
            name=data.get("name"),
            arguments=data.get("arguments"),
        )
    if kind == "tool_call":
        arguments = data.get("arguments", "{}")
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        return ToolCallEvent(id=str(data["id"]), name=str(data["name"]), arguments=arguments)
    if kind == "grounding":
        sources = tuple(
            GroundingSource(title=s.get("title", ""), url=s.get("url", ""), snippet=s.get("snippet"))
            for s in data.get("sources", [])
        )
        return GroundingEvent(sources=sources)
    raise ValueError(f"unsupported mock event type: {kind!r}")


def _chunk_text(text: str, chunk_size: int = 16) -> List[str]:
    if not text:
        return []
    return [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)]


def _last_user_text(messages: Sequence[Mapping[str, Any]]) -> str:
    for message in reversed(messages):
        if message.get("role") != "user":
            continue
        content = message.get("content")
        if isinstance(content, str):
            return content.strip() or "*"
        texts = [b.get("text", "") for b in content or [] if isinstance(b, Mapping) and b.get("type") == "text"]
        return " ".join(texts).strip() or "*"
    return "*"


class MockHandler:
    """Handler that replays canned responses instead of calling a vendor.

    Args:
        settings: Accepted for factory compatibility; ``model_id`` is echoed
            back from :meth:`get_model`.
        catalog: Pre-parsed fixture catalog (tests inject their own).
        provider: Provider block to read from the catalog; ``"*"`` is the
            fallback for every provider.
    """

    provider_name = "mock"
    label = "Mock"

    def __init__(
        self,
        settings: Optional[ProviderSettings] = None,
        catalog: Optional[Dict[str, Any]] = None,
        provider: str = "mock",
    ) -> None:
        self.settings = settings or ProviderSettings()
        self._catalog = catalog if catalog is not None else load_fixture_catalog()
        providers = self._catalog.get("providers", {})
        fallback = providers.get("*", {})
        block = providers.get(provider, fallback)
        self._model = str(block.get("model", fallback.get("model", self._catalog.get("default_model", "mock-model"))))
        self._responses: Mapping[str, Any] = block.get("responses", {})
        self._fallback_responses: Mapping[str, Any] = fallback.get("responses", {})
        self._logger = get_logger(f"providers.mock.{provider}")

    def get_model(self) -> ModelSelection:
        return ModelSelection(id=self.settings.model_id or self._model, info=_MOCK_INFO)

    def _select_response(self, prompt: str) -> FixtureResponse:
        raw = (
            self._responses.get(prompt)
            or self._responses.get(prompt.lower())
            or self._fallback_responses.get(prompt)
            or self._fallback_responses.get(prompt.lower())
            or self._responses.get("*")
            or self._fallback_responses.get("*")
            or {}
        )
        events = list(raw.get("events", []))
        if not events and raw.get("text"):
            events = [{"type": "text", "text": chunk} for chunk in _chunk_text(str(raw["text"]))]
        return FixtureResponse(prompt_key=prompt, events=events, usage=raw.get("usage"), error=raw.get("error"))

    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[StreamEvent]:
        meta = metadata or {}
        selection = self.get_model()
        entry = self._select_response(_last_user_text(messages))
        tools = ToolCallAccumulator()

        def _start() -> List[Mapping[str, Any]]:
            if entry.error:
                raise payload_error(
                    str(entry.error.get("message", "mock failure")),
                    provider=self.provider_name,
                    model=selection.id,
                    status=entry.error.get("status"),
                )
            return list(entry.events)

        def _translate(data: Mapping[str, Any]) -> Iterator[StreamEvent]:
            event = event_from_dict(data)
            if isinstance(event, ToolCallPartialEvent):
                tools.update(event)
            yield event

        def _finalize() -> Iterator[StreamEvent]:
            yield from tools.complete_all()
            if entry.usage:
                yield UsageEvent(
                    input_tokens=int(entry.usage.get("input_tokens", 0)),
                    output_tokens=int(entry.usage.get("output_tokens", 0)),
                )
            else:
                yield estimate_usage(system_prompt, messages, selection.info.max_tokens)
            yield UsageEvent(total_cost=0.0)
            normalized_log_event(
                self._logger,
                "stream.mock.complete",
                LogContext(provider=self.provider_name, model=selection.id),
                phase="finalize",
                emitted=bool(entry.events),
                tokens=None,
                prompt_key=entry.prompt_key,
            )

        yield from run_event_stream(
            ctx=LogContext(provider=self.provider_name, model=selection.id, request_id=meta.get("task_id")),
            provider_name=self.provider_name,
            label=self.label,
            model=selection.id,
            starter=_start,
            translator=_translate,
            finalizer=_finalize,
            logger=self._logger,
            cancellation_token=meta.get("cancellation_token"),
        )

    def complete_prompt(self, prompt: str) -> str:
        """Concatenated text of the fixture matching ``prompt``."""
        entry = self._select_response(prompt.strip() or "*")
        if entry.error:
            err = payload_error(
                str(entry.error.get("message", "mock failure")),
                provider=self.provider_name,
                model=self.get_model().id,
                status=entry.error.get("status"),
            )
            log_provider_error(self._logger, err, operation="complete_prompt")
            raise err
        return "".join(e.get("text", "") for e in entry.events if e.get("type") == "text")


__all__ = ["FixtureResponse", "MockHandler", "event_from_dict", "load_fixture_catalog"]
