"""HttpRequest — framework-neutral HTTP request context.

Holds method, path (with optional query string), headers (case-insensitive)
and the raw body. Query parameters, cookies and the media type are parsed
once at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, unquote

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """HTTP request context for argument extraction.

    The path should be provided as-is from the wire (may include query string).
    Headers are stored with lowercased keys for case-insensitive lookup.
    The body is kept as bytes and decoded only by the extractor.
    """

    method: str = "GET"
    raw_path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    # Derived once from raw_path and headers
    _clean_path: str = field(init=False, repr=False)
    _query: Mapping[str, tuple[str, ...]] = field(init=False, repr=False)
    _lower_headers: Mapping[str, str] = field(init=False, repr=False)
    _cookies: Mapping[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

        path, _, query_string = self.raw_path.partition("?")
        object.__setattr__(self, "_clean_path", unquote(path) or "/")
        object.__setattr__(self, "_query", MappingProxyType(_parse_query(query_string)))

        lower = {k.lower(): v for k, v in self.headers.items()}
        object.__setattr__(self, "_lower_headers", MappingProxyType(lower))
        object.__setattr__(
            self, "_cookies", MappingProxyType(_parse_cookies(lower.get("cookie", "")))
        )

    @property
    def path(self) -> str:
        """Percent-decoded path without query string."""
        return self._clean_path

    @property
    def query(self) -> Mapping[str, tuple[str, ...]]:
        """Query parameters, all values per name, blanks kept."""
        return self._query

    @property
    def cookies(self) -> Mapping[str, str]:
        """Cookie values by name. The last cookie of a name wins."""
        return self._cookies

    @property
    def content_type(self) -> str:
        """Media type of the body, lowercased, without parameters."""
        raw = self._lower_headers.get("content-type", "")
        return raw.split(";", 1)[0].strip().lower()

    def header(self, name: str) -> str | None:
        """Get a header value by name (case-insensitive)."""
        return self._lower_headers.get(name.lower())


def _parse_query(query_string: str) -> dict[str, tuple[str, ...]]:
    params: dict[str, list[str]] = {}
    for k, v in parse_qsl(query_string, keep_blank_values=True):
        params.setdefault(k, []).append(v)
    return {k: tuple(vs) for k, vs in params.items()}


def _parse_cookies(header: str) -> dict[str, str]:
    # Lenient: malformed pairs are skipped, never raised.
    cookies: dict[str, str] = {}
    for part in header.split(";"):
        name, sep, value = part.strip().partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        value = value.strip()
        if len(value) > 1 and value[0] == value[-1] == '"':
            value = value[1:-1]
        cookies[name] = value
    return cookies
