"""Starlette request → HttpRequest."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from reqargs._request import HttpRequest

if TYPE_CHECKING:
    from starlette.requests import Request


async def from_starlette(request: Request) -> HttpRequest:
    """Snapshot a Starlette request, reading its body exactly once.

    Repeated ``Cookie`` headers are joined so every cookie is seen.
    """
    body = await request.body()

    headers: dict[str, str] = {}
    for key, value in request.headers.items():
        key = key.lower()
        if key == "cookie" and key in headers:
            headers[key] = f"{headers[key]}; {value}"
        else:
            headers[key] = value

    # HttpRequest percent-decodes the path itself.
    raw_path = quote(request.url.path, safe="/")
    if request.url.query:
        raw_path = f"{raw_path}?{request.url.query}"

    return HttpRequest(method=request.method, raw_path=raw_path, headers=headers, body=body)
