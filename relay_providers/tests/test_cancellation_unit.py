"""Unit tests for ``CancellationToken``."""
from __future__ import annotations

import threading

import pytest

from relay_providers.base.cancellation import CancellationToken, CancelledError


def test_cancel_sets_reason_once():
    token = CancellationToken()
    assert not token.cancelled and token.reason is None  # nosec B101
    token.cancel("first")
    token.cancel("second")
    assert token.cancelled and token.reason == "first"  # nosec B101


def test_callbacks_fire_once_and_errors_are_contained():
    token = CancellationToken()
    calls = []

    def boom():
        raise RuntimeError("already closed")

    token.on_cancel(boom)
    token.on_cancel(lambda: calls.append("closed"))
    token.cancel()
    token.cancel()
    assert calls == ["closed"]  # nosec B101


def test_on_cancel_after_cancel_runs_immediately():
    token = CancellationToken()
    token.cancel()
    calls = []
    token.on_cancel(lambda: calls.append(1))
    assert calls == [1]  # nosec B101


def test_parent_cancel_cascades_to_children():
    parent = CancellationToken()
    child = parent.child()
    grandchild = CancellationToken(parent=child)
    parent.cancel("shutdown")
    assert child.cancelled and grandchild.cancelled  # nosec B101
    assert grandchild.reason == "shutdown"  # nosec B101


def test_child_cancel_does_not_affect_parent():
    parent = CancellationToken()
    child = parent.child()
    child.cancel()
    assert not parent.cancelled  # nosec B101


def test_linking_to_cancelled_parent_cancels_child():
    parent = CancellationToken()
    parent.cancel("late")
    child = parent.link_child(CancellationToken())
    assert child.cancelled and child.reason == "late"  # nosec B101


def test_raise_if_cancelled():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("stop")
    with pytest.raises(CancelledError, match="stop"):
        token.raise_if_cancelled()


def test_cancel_from_another_thread():
    token = CancellationToken()
    worker = threading.Thread(target=token.cancel, args=("thread",))
    worker.start()
    worker.join(timeout=5)
    assert token.cancelled and token.reason == "thread"  # nosec B101
