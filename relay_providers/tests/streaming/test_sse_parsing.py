"""SSE line decoding used by the httpx-based adapters."""
from __future__ import annotations

import pytest

from relay_providers.base.streaming import iter_sse_data, parse_sse_line


@pytest.mark.parametrize(
    "line",
    [None, "", "   ", ": keep-alive", "event: message", "data: [DONE]", "data: {not json", "data: [1, 2]", "data:"],
)
def test_parse_sse_line_ignores_non_objects(line):
    assert parse_sse_line(line) is None  # nosec B101


def test_parse_sse_line_decodes_bytes_and_json():
    assert parse_sse_line(b'data: {"a": 1}') == {"a": 1}  # nosec B101
    assert parse_sse_line('data:{"b": 2}\n') == {"b": 2}  # nosec B101


def test_iter_sse_data_stops_at_done_and_skips_noise():
    lines = [
        'data: {"n": 1}',
        "",
        "data: garbage",
        b'data: {"n": 2}',
        "data: [DONE]",
        'data: {"n": 3}',
    ]
    assert [d["n"] for d in iter_sse_data(lines)] == [1, 2]  # nosec B101


def test_iter_sse_data_accepts_compact_done():
    assert list(iter_sse_data(['data: {"n": 1}', "data:[DONE]", 'data: {"n": 2}'])) == [{"n": 1}]  # nosec B101
