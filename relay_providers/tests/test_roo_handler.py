"""RooHandler: session-token auth, task headers, proxy cost and catalog fallback."""
from __future__ import annotations

import pytest

from relay_providers.base.catalog import ModelCatalogCache
from relay_providers.base.models import ProviderSettings
from relay_providers.base.streaming import TextEvent, UsageEvent
from relay_providers.roo.auth import AUTH_STATE_CHANGED, AuthService
from relay_providers.roo.client import RooHandler, parse_roo_usage, roo_usage_cost
from relay_providers.roo.get_roo_models import models_url, parse_api_price
from relay_providers.roo.models import ROO_FALLBACK_MODEL_INFO

_CATALOG = {
    "roo/thinker": {
        "context_window": 400_000,
        "max_tokens": 32_000,
        "supports_reasoning_effort": True,
        "input_price": 1.0,
        "output_price": 2.0,
    },
    "roo/free": {"context_window": 100_000, "max_tokens": 8_000, "is_free": True},
}


class _FakeAuth:
    def __init__(self, token=None):
        self.token = token
        self.listeners = {}

    def get_session_token(self):
        return self.token

    def on(self, event, listener):
        self.listeners.setdefault(event, []).append(listener)

    def off(self, event, listener):
        self.listeners[event].remove(listener)

    def sign_in(self, token):
        self.token = token
        for listener in list(self.listeners.get(AUTH_STATE_CHANGED, [])):
            listener("active-session")


def _catalog(raising: bool = False) -> ModelCatalogCache:
    def fetch():
        if raising:
            raise RuntimeError("Failed to fetch Roo Code Cloud models: Request timed out after 10 seconds.")
        return _CATALOG

    return ModelCatalogCache({"roo": fetch})


def test_fake_auth_satisfies_protocol():
    assert isinstance(_FakeAuth(), AuthService)  # nosec B101


def test_unknown_model_keeps_id_with_fallback_info(fake_openai_client):
    handler = RooHandler(client=fake_openai_client(), catalog=_catalog())
    selection = handler.fetch_model()
    assert selection.id == "xai/grok-code-fast-1"  # nosec B101
    assert selection.info == ROO_FALLBACK_MODEL_INFO  # nosec B101


def test_catalog_failure_is_logged_not_raised(fake_openai_client):
    settings = ProviderSettings(model_id="roo/thinker")
    handler = RooHandler(settings, client=fake_openai_client(), catalog=_catalog(raising=True))
    selection = handler.fetch_model()
    assert selection.id == "roo/thinker" and selection.info == ROO_FALLBACK_MODEL_INFO  # nosec B101


def test_stream_forwards_task_header_and_proxy_cost(fake_openai_client, chat_chunk, user_turn):
    client = fake_openai_client(
        [
            chat_chunk("<think>kept</think>"),
            chat_chunk(usage={"prompt_tokens": 10, "completion_tokens": 4, "cache_creation_input_tokens": 3, "cost": 0.0123}),
        ]
    )
    handler = RooHandler(ProviderSettings(model_id="roo/thinker"), client=client, catalog=_catalog())
    events = list(handler.create_message("sys", user_turn("hi"), {"task_id": "task-9"}))

    assert events[0] == TextEvent("<think>kept</think>")  # nosec B101
    assert events[1] == UsageEvent(input_tokens=10, output_tokens=4, cache_write_tokens=3)  # nosec B101
    assert events[2].total_cost == pytest.approx(0.0123)  # nosec B101
    call = client.calls[0]
    assert call["extra_headers"] == {"X-Roo-Task-ID": "task-9"}  # nosec B101
    assert call["temperature"] == 0.7 and call["max_tokens"] == 32_000  # nosec B101
    assert call["reasoning"] == {"enabled": False}  # nosec B101


def test_no_task_id_means_no_extra_headers(fake_openai_client, chat_chunk, user_turn):
    client = fake_openai_client([chat_chunk("x")])
    list(RooHandler(client=client, catalog=_catalog()).create_message("sys", user_turn("hi")))
    assert "extra_headers" not in client.calls[0]  # nosec B101


def test_reasoning_effort_payload(fake_openai_client, user_turn):
    settings = ProviderSettings(model_id="roo/thinker", enable_reasoning_effort=True, reasoning_effort="high")
    handler = RooHandler(settings, client=fake_openai_client(), catalog=_catalog())
    params = handler.build_params(handler.fetch_model(), "sys", user_turn("hi"))
    assert params["reasoning"] == {"enabled": True, "effort": "high"}  # nosec B101
    assert "reasoning_effort" not in params  # nosec B101


def test_free_model_costs_nothing():
    info = ModelCatalogCache({"roo": lambda: _CATALOG}).get_models("roo")["roo/free"]
    assert roo_usage_cost(info, UsageEvent(input_tokens=5), {"cost": 1.5}) == 0.0  # nosec B101
    assert roo_usage_cost(ROO_FALLBACK_MODEL_INFO, UsageEvent(), {"cost": 1.5}) == 1.5  # nosec B101
    assert roo_usage_cost(ROO_FALLBACK_MODEL_INFO, UsageEvent(), None) == 0.0  # nosec B101


def test_parse_roo_usage():
    assert parse_roo_usage(None) is None  # nosec B101
    event = parse_roo_usage({"prompt_tokens": 1, "completion_tokens": 2})
    assert event == UsageEvent(input_tokens=1, output_tokens=2)  # nosec B101


def test_auth_listener_lifecycle(fake_openai_client):
    auth = _FakeAuth("tok-1")
    handler = RooHandler(client=fake_openai_client(), catalog=_catalog(), auth_service=auth)
    assert len(auth.listeners[AUTH_STATE_CHANGED]) == 1  # nosec B101
    handler.dispose()
    assert auth.listeners[AUTH_STATE_CHANGED] == []  # nosec B101
    handler.dispose()


def test_injected_client_is_never_replaced(fake_openai_client):
    injected = fake_openai_client()
    auth = _FakeAuth("tok-1")
    handler = RooHandler(client=injected, catalog=_catalog(), auth_service=auth)
    auth.sign_in("tok-2")
    assert handler.client is injected  # nosec B101


def test_owned_client_follows_session_token():
    auth = _FakeAuth(None)
    handler = RooHandler(catalog=_catalog(), auth_service=auth)
    first = handler.client
    assert first.api_key == "unauthenticated"  # nosec B101
    assert handler.client is first  # nosec B101
    auth.sign_in("tok-2")
    assert handler.client is not first and handler.client.api_key == "tok-2"  # nosec B101
    assert str(handler.client.base_url).rstrip("/") == "https://api.roocode.com/proxy/v1"  # nosec B101


@pytest.mark.parametrize(
    "base, expected",
    [
        ("https://api.roocode.com/proxy", "https://api.roocode.com/proxy/v1/models"),
        ("https://api.roocode.com/proxy/v1", "https://api.roocode.com/proxy/v1/models"),
        ("https://api.roocode.com/proxy/v1/", "https://api.roocode.com/proxy/v1/models"),
    ],
)
def test_models_url(base, expected):
    assert models_url(base) == expected  # nosec B101


def test_parse_api_price():
    assert parse_api_price("0.000003") == pytest.approx(3.0)  # nosec B101
    assert parse_api_price(None) is None and parse_api_price("") is None  # nosec B101
