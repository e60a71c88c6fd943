"""Response decoding -- maps raw bodies to the configured response format.

Bodies come either from a live :class:`httpx.Response` or from the cache,
so decoding works on bytes and never needs the transport response.

See Also:
    :class:`~bnetapi.models.ResponseFormat` -- the available shapes.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import httpx

from bnetapi.exceptions import DecodeError
from bnetapi.models import ResponseFormat


def decode_payload(body: bytes, fmt: ResponseFormat, url: str = "") -> Any:
    """Decode a response *body* according to *fmt*.

    Args:
        body: Raw response body.
        fmt: ``json`` for dicts and lists, ``object`` for nested
            :class:`~types.SimpleNamespace` objects, ``raw`` for text.
        url: The request URL, used in error messages.

    Returns:
        The decoded payload.

    Raises:
        DecodeError: If *fmt* needs JSON and *body* is not valid JSON.
    """
    if fmt == ResponseFormat.RAW:
        return body.decode("utf-8", errors="replace")
    try:
        if fmt == ResponseFormat.OBJECT:
            return json.loads(body, object_hook=lambda d: SimpleNamespace(**d))
        return json.loads(body)
    except ValueError as exc:
        raise DecodeError(f"Response from {url or 'API'} is not valid JSON: {exc}") from exc


def error_detail(response: httpx.Response) -> str:
    """Extract a short error description from an error response body."""
    try:
        detail = response.json()
    except ValueError:
        return response.text[:200] if response.text else ""
    if isinstance(detail, dict):
        return str(detail.get("detail") or detail.get("message") or detail.get("error") or "")
    return str(detail)[:200]
