"""Test utilities for reqargs.

Provides a convenience constructor for HttpRequest so tests and examples
can describe a request by its sources (query, cookies, JSON, form,
multipart) instead of hand-encoding bodies and headers.

For real services, build HttpRequest from your framework's request (see
reqargs.asgi.from_starlette).
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from reqargs._request import HttpRequest

if TYPE_CHECKING:
    from collections.abc import Mapping

MULTIPART_BOUNDARY = "reqargs-test-boundary"


def make_request(
    method: str = "GET",
    path: str = "/",
    *,
    query: Mapping[str, Any] | None = None,
    cookies: Mapping[str, str] | None = None,
    json: Any = None,
    form: Mapping[str, Any] | None = None,
    multipart: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    body: bytes | None = None,
) -> HttpRequest:
    """Build an HttpRequest from its argument sources.

    List values in ``query``, ``form`` and ``multipart`` become repeated
    fields. At most one of ``json``, ``form``, ``multipart`` and ``body``
    should be given; explicit ``headers`` override the derived ones.

    >>> from reqargs.testing import make_request
    >>> req = make_request("GET", "/api/x", query={"n": "1"})
    >>> req.query["n"]
    ('1',)
    """
    hdrs: dict[str, str] = {}
    raw_path = path
    if query:
        raw_path += "?" + urlencode(query, doseq=True)
    if cookies:
        hdrs["Cookie"] = "; ".join(f"{k}={v}" for k, v in cookies.items())

    payload = b""
    if json is not None:
        payload = _json.dumps(json).encode()
        hdrs["Content-Type"] = "application/json"
    elif form is not None:
        payload = urlencode(form, doseq=True).encode()
        hdrs["Content-Type"] = "application/x-www-form-urlencoded"
    elif multipart is not None:
        payload = encode_multipart(multipart)
        hdrs["Content-Type"] = f"multipart/form-data; boundary={MULTIPART_BOUNDARY}"
    if body is not None:
        payload = body

    hdrs.update(headers or {})
    return HttpRequest(method=method, raw_path=raw_path, headers=hdrs, body=payload)


def encode_multipart(fields: Mapping[str, Any], boundary: str = MULTIPART_BOUNDARY) -> bytes:
    """Encode form fields as a multipart/form-data body.

    A ``(filename, bytes)`` tuple value becomes a file part.
    """
    lines: list[bytes] = []
    for name, value in fields.items():
        values = value if isinstance(value, list) else [value]
        for v in values:
            lines.append(f"--{boundary}".encode())
            if isinstance(v, tuple):
                filename, content = v
                lines.append(
                    f'Content-Disposition: form-data; name="{name}"; '
                    f'filename="{filename}"'.encode()
                )
                lines.append(b"Content-Type: application/octet-stream")
                lines.append(b"")
                lines.append(content)
            else:
                lines.append(f'Content-Disposition: form-data; name="{name}"'.encode())
                lines.append(b"")
                lines.append(str(v).encode())
    lines.append(f"--{boundary}--".encode())
    lines.append(b"")
    return b"\r\n".join(lines)
