"""``StreamController`` cancellation facade over a handler stream."""
from __future__ import annotations

import pytest

from relay_providers.base.errors import ErrorCode, ProviderError
from relay_providers.base.streaming import StreamController, TextEvent, UsageEvent


class _FakeHandler:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.seen_metadata = None

    def create_message(self, system_prompt, messages, metadata=None):
        self.seen_metadata = metadata
        token = metadata["cancellation_token"]
        for word in ("one", "two", "three"):
            if token.cancelled:
                return
            yield TextEvent(word)
        if self.fail:
            raise ProviderError(code=ErrorCode.SERVER_ERROR, message="Fake server error (500): x", provider="fake")
        yield UsageEvent(input_tokens=1, output_tokens=3)
        yield UsageEvent(total_cost=0.002)


def test_controller_injects_token_and_records_final_usage():
    handler = _FakeHandler()
    ctl = StreamController(handler, "sys", [{"role": "user", "content": "hi"}], metadata={"task_id": "t1"})
    events = list(ctl)
    assert handler.seen_metadata["task_id"] == "t1"  # nosec B101
    assert handler.seen_metadata["cancellation_token"] is ctl.token  # nosec B101
    assert ctl.finished and not ctl.cancelled and ctl.error is None  # nosec B101
    assert ctl.final_usage == UsageEvent(total_cost=0.002)  # nosec B101
    assert len(events) == 5  # nosec B101


def test_controller_cancel_stops_iteration_quietly():
    ctl = StreamController(_FakeHandler(), "sys", [])
    seen = []
    for evt in ctl:
        seen.append(evt)
        ctl.cancel("user")
        ctl.cancel("again")
    assert seen == [TextEvent("one")]  # nosec B101
    assert ctl.cancelled and ctl.token.reason == "user"  # nosec B101
    assert ctl.finished and ctl.final_usage is None  # nosec B101


def test_controller_records_provider_error():
    ctl = StreamController(_FakeHandler(fail=True), "sys", [])
    with pytest.raises(ProviderError):
        list(ctl)
    assert ctl.finished  # nosec B101
    assert ctl.error is not None and ctl.error.code is ErrorCode.SERVER_ERROR  # nosec B101
