"""Value extraction — raw request sources → name → list of raw strings.

Sources are merged in C-B-Q order: cookies have the lowest priority, the
body follows, and the URL query string wins. A later source replaces the
whole value list of an earlier one for the same name. Path text beyond the
route prefix is read last and only fills names that are still absent.
"""

from __future__ import annotations

import io
import json
import logging
import posixpath
import string
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl

from python_multipart import parse_form
from python_multipart.exceptions import FormParserError
from python_multipart.multipart import parse_options_header

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from reqargs._request import HttpRequest

logger = logging.getLogger(__name__)

# Methods whose body is read. GET, DELETE and the rest carry no arguments in the body.
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

MAX_MULTIPART_SIZE = 10 << 20


class ExtractionError(Exception):
    """The request body could not be decoded into arguments."""


@dataclass(frozen=True, slots=True)
class ExtractedValues:
    """Raw values per parameter name for one request.

    A name that is present may still map to an empty string ("?flag"),
    which is different from the name being absent.
    """

    values: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def present(self, name: str) -> bool:
        return name in self.values

    def get(self, name: str) -> tuple[str, ...]:
        return self.values.get(name, ())

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


def route_suffix(path: str, route: str) -> str | None:
    """Return the path text after ``route``, or None if the path is outside it.

    The route must end at a segment boundary: "/api/test" covers
    "/api/test" and "/api/test/x" but not "/api/testing".
    """
    if not path.startswith(route):
        return None
    suffix = path[len(route) :]
    if suffix and not suffix.startswith("/"):
        return None
    return suffix


def extract(request: HttpRequest, route: str = "") -> ExtractedValues:
    """Merge cookie, body and query values of a request.

    Must be called at most once per request; bodies are not assumed to be
    replayable by the host.

    Raises:
        ExtractionError: malformed JSON, multipart or form body, or an
            unsupported content type on a body-bearing method.
    """
    vs: dict[str, tuple[str, ...]] = {}
    for name, value in request.cookies.items():
        vs[name] = (value,)

    if request.method in BODY_METHODS:
        vs.update(_decode_body(request))

    vs.update(request.query)

    suffix = route_suffix(request.path, route.rstrip("/"))
    if suffix:
        for key, values in _path_values(suffix).items():
            vs.setdefault(key, values)

    return ExtractedValues(values=MappingProxyType(vs))


def _decode_body(request: HttpRequest) -> dict[str, tuple[str, ...]]:
    ct = request.content_type
    match ct:
        case "application/json":
            return _decode_json(request.body)
        case "multipart/form-data":
            return _decode_multipart(request)
        case "application/x-www-form-urlencoded" | "":
            return _decode_form(request.body)
        case _:
            msg = f"invalid content-type '{ct}'"
            raise ExtractionError(msg)


def _decode_json(body: bytes) -> dict[str, tuple[str, ...]]:
    if not body.strip():
        return {}
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        logger.debug("rejected json body: %s", e)
        msg = f"invalid json body: {e}"
        raise ExtractionError(msg) from e
    if not isinstance(data, dict):
        msg = f"json body must be an object, got {type(data).__name__}"
        raise ExtractionError(msg)

    out: dict[str, tuple[str, ...]] = {}
    for k, v in data.items():
        match v:
            case None:
                continue
            case str():
                out[k] = (v,)
            case list():
                out[k] = tuple(_format_scalar(item) for item in v)
            case _:
                out[k] = (_format_scalar(v),)
    return out


def _format_scalar(value: Any) -> str:
    match value:
        case str():
            return value
        case bool():
            return "true" if value else "false"
        case None:
            return ""
        case dict() | list():
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        case _:
            return str(value)


def _decode_multipart(request: HttpRequest) -> dict[str, tuple[str, ...]]:
    body = request.body
    if len(body) > MAX_MULTIPART_SIZE:
        msg = f"multipart body of {len(body)} bytes exceeds {MAX_MULTIPART_SIZE}"
        raise ExtractionError(msg)

    fields: dict[str, list[str]] = {}

    def on_field(f: Any) -> None:
        name = (f.field_name or b"").decode("utf-8", errors="replace")
        value = (f.value or b"").decode("utf-8", errors="replace")
        fields.setdefault(name, []).append(value)

    def on_file(f: Any) -> None:
        # File parts are not arguments.
        f.close()

    headers = {
        "Content-Type": request.header("content-type") or "",
        "Content-Length": str(len(body)),
    }
    try:
        parse_form(headers, io.BytesIO(body), on_field, on_file)
    except FormParserError as e:
        logger.debug("rejected multipart body: %s", e)
        msg = f"invalid multipart body: {e}"
        raise ExtractionError(msg) from e

    # The parser drops a part cut off before the closing delimiter.
    _, params = parse_options_header(headers["Content-Type"])
    boundary = params.get(b"boundary")
    if not boundary or b"--" + boundary + b"--" not in body:
        logger.debug("rejected multipart body: no closing delimiter")
        msg = "invalid multipart body: missing closing boundary"
        raise ExtractionError(msg)
    return {k: tuple(vs) for k, vs in fields.items()}


def _decode_form(body: bytes) -> dict[str, tuple[str, ...]]:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        msg = f"invalid form body: {e}"
        raise ExtractionError(msg) from e
    if not _valid_escapes(text):
        msg = "invalid form body: malformed percent-escape"
        raise ExtractionError(msg)

    out: dict[str, list[str]] = {}
    for k, v in parse_qsl(text, keep_blank_values=True):
        out.setdefault(k, []).append(v)
    return {k: tuple(vs) for k, vs in out.items()}


def _valid_escapes(text: str) -> bool:
    i = text.find("%")
    while i != -1:
        digits = text[i + 1 : i + 3]
        if len(digits) != 2 or any(c not in string.hexdigits for c in digits):
            return False
        i = text.find("%", i + 3)
    return True


def _path_values(suffix: str) -> dict[str, tuple[str, ...]]:
    # "/a=1&x/flag" exposes a=["1"] and flag=[""]; keys are cut to their last path component.
    out: dict[str, list[str]] = {}
    for k, v in parse_qsl(suffix.lstrip("/"), keep_blank_values=True):
        key = posixpath.basename(k)
        if key:
            out.setdefault(key, []).append(v)
    return {k: tuple(vs) for k, vs in out.items()}
