"""Server-sent-event framing for custom HTTP adapters.

Vendors stream ``data: <json>`` lines terminated by ``data: [DONE]``.
Malformed frames are logged at debug level and skipped; they never abort the
stream. Interpreting the decoded payload (including embedded error objects)
is the caller's job.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Iterator, Optional, Union

_log = logging.getLogger("relay.streaming.sse")

DONE_SENTINEL = "[DONE]"


def parse_sse_line(line: Union[str, bytes, None]) -> Optional[Dict[str, Any]]:
    """Decode one SSE line into a JSON object.

    Returns ``None`` for blank lines, comments, non-``data`` fields, the
    ``[DONE]`` sentinel and malformed payloads.
    """
    if not line:
        return None
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    line = line.strip()
    if not line.startswith("data:"):
        return None
    payload = line[5:].strip()
    if not payload or payload == DONE_SENTINEL:
        return None
    try:
        data = json.loads(payload)
    except ValueError:
        _log.debug("skipping malformed SSE frame: %.200s", payload)
        return None
    return data if isinstance(data, dict) else None


def iter_sse_data(lines: Iterable[Union[str, bytes]]) -> Iterator[Dict[str, Any]]:
    """Yield decoded ``data:`` payloads until the ``[DONE]`` sentinel."""
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        if line.strip() == f"data: {DONE_SENTINEL}" or line.strip() == f"data:{DONE_SENTINEL}":
            return
        data = parse_sse_line(line)
        if data is not None:
            yield data


__all__ = ["DONE_SENTINEL", "parse_sse_line", "iter_sse_data"]
