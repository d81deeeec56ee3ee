"""Raw ``httpx`` requests for adapters that do not use a vendor SDK.

Non-2xx responses are read in full and raised as ``httpx.HTTPStatusError``
carrying the vendor's error message, so :func:`completion_error` can classify
them by status and include the detail.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, Mapping, Optional

import httpx

from ..streaming.sse import iter_sse_data


def error_detail(response: httpx.Response) -> str:
    """Best-effort human message from an error response body."""
    text = response.text
    try:
        data = json.loads(text)
    except ValueError:
        return text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
        if data.get("message"):
            return str(data["message"])
    return json.dumps(data, indent=2)


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_error:
        raise httpx.HTTPStatusError(
            f"HTTP {response.status_code}: {error_detail(response)}",
            request=response.request,
            response=response,
        )


def iter_sse_response(
    client: httpx.Client,
    path: str,
    *,
    body: Mapping[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> Iterator[Dict[str, Any]]:
    """POST ``body`` and yield decoded ``data:`` payloads.

    The response is closed when the generator finishes or is closed early.
    """
    with client.stream("POST", path, json=dict(body), headers=headers) as resp:
        if resp.is_error:
            resp.read()
            _raise_for_status(resp)
        yield from iter_sse_data(resp.iter_lines())


def post_json(
    client: httpx.Client,
    path: str,
    *,
    body: Mapping[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """POST ``body`` and return the decoded JSON response."""
    resp = client.post(path, json=dict(body), headers=headers)
    _raise_for_status(resp)
    return resp.json()


__all__ = ["error_detail", "iter_sse_response", "post_json"]
