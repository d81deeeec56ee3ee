"""Pytest configuration for the relay providers test suite.

Every test runs with provider credentials, model/base-URL overrides and the
external config file removed from the environment, so results never depend
on the developer's shell or a stray ``.env`` file.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Iterator, List

import pytest

import relay_providers.base.usage as usage_module
import relay_providers.config as relay_config
from relay_providers.base.logging import get_logger
from relay_providers.config import DEFAULTS, reset_config_cache
from relay_providers.config.env import ENV_ALIASES, ENV_MAP, env_prefix


def _provider_env_names() -> List[str]:
    names = set(ENV_MAP.values())
    for aliases in ENV_ALIASES.values():
        names.update(aliases)
    for provider in DEFAULTS:
        prefix = env_prefix(provider)
        names.update({f"{prefix}_MODEL", f"{prefix}_BASE_URL"})
    names.add("RELAY_PROVIDERS_CONFIG_FILE")
    return sorted(names)


@pytest.fixture(autouse=True)
def isolated_provider_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear provider env vars and skip ``.env`` loading for each test."""

    for name in _provider_env_names():
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(relay_config, "_DOTENV_LOADED", True)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def collect() -> Callable[[Iterable[Any]], List[Any]]:
    """Drain an event iterator into a list."""

    def _collect(events: Iterable[Any]) -> List[Any]:
        return list(events)

    return _collect


@pytest.fixture()
def user_turn() -> Callable[[str], List[dict]]:
    """Build a single-message history for ``text``."""

    def _build(text: str) -> List[dict]:
        return [{"role": "user", "content": text}]

    return _build


class _FakeCompletions:
    """Records ``create`` calls; streams canned chunks or returns one response."""

    def __init__(self, chunks=None, response=None, error: Exception | None = None) -> None:
        self.chunks = list(chunks or [])
        self.response = response
        self.error = error
        self.calls: List[dict] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            return iter(self.chunks)
        return self.response


class FakeOpenAIClient:
    """Stand-in for ``openai.OpenAI`` exposing ``chat.completions.create``."""

    def __init__(self, chunks=None, response=None, error: Exception | None = None) -> None:
        self.completions = _FakeCompletions(chunks, response, error)
        self.chat = self

    @property
    def calls(self) -> List[dict]:
        return self.completions.calls


@pytest.fixture()
def fake_openai_client() -> Callable[..., FakeOpenAIClient]:
    """Factory for chat-completions clients fed with dict chunks."""
    return FakeOpenAIClient


def _chat_chunk(
    content: str | None = None,
    *,
    reasoning: str | None = None,
    tool_calls: list | None = None,
    finish_reason: str | None = None,
    usage: dict | None = None,
    **delta_extra: Any,
) -> dict:
    delta: dict = dict(delta_extra)
    if content is not None:
        delta["content"] = content
    if reasoning is not None:
        delta["reasoning_content"] = reasoning
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    chunk: dict = {"choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}]}
    if usage is not None:
        chunk = {"choices": [], "usage": usage}
    return chunk


@pytest.fixture()
def chat_chunk() -> Callable[..., dict]:
    """Build a Chat Completions chunk dict (``usage=`` builds a usage-only chunk)."""
    return _chat_chunk


class _WordEncoding:
    """Stand-in tiktoken encoding: one token per whitespace-separated word."""

    def encode(self, text: str, disallowed_special=()) -> List[str]:
        return text.split()


@pytest.fixture()
def word_tokenizer(monkeypatch: pytest.MonkeyPatch) -> _WordEncoding:
    """Make local token counting deterministic without tiktoken's vocabularies."""

    encoding = _WordEncoding()
    monkeypatch.setattr(usage_module, "_get_encoding", lambda: encoding)
    return encoding


@pytest.fixture()
def relay_events(caplog: pytest.LogCaptureFixture) -> Iterator[Callable[[str], List[dict]]]:
    """Capture the ``relay`` logger (which does not propagate) and decode events.

    Yields ``events(name)`` returning the JSON payloads logged as ``name``.
    """

    base = get_logger()
    base.addHandler(caplog.handler)

    def _events(name: str) -> List[dict]:
        out = []
        for record in caplog.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if payload.get("event") == name:
                out.append(payload)
        return out

    try:
        yield _events
    finally:
        base.removeHandler(caplog.handler)
