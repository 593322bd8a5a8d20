"""HTTP method masks for per-parameter method restrictions.

A parameter declares the verbs it participates in as a comma-separated
string ("GET,POST"). The compiled form is an ``HttpMethod`` flag, or None
when the parameter is unrestricted.
"""

from __future__ import annotations

from enum import Flag, auto

from reqargs._errors import InvalidMethodError


class HttpMethod(Flag):
    """Bit set of the standard HTTP verbs."""

    GET = auto()
    POST = auto()
    DELETE = auto()
    HEAD = auto()
    OPTIONS = auto()
    PUT = auto()
    PATCH = auto()
    CONNECT = auto()
    TRACE = auto()


_NO_METHOD = HttpMethod(0)


def method_value(verb: str) -> HttpMethod:
    """Map a single verb to its flag (case-insensitive).

    Unknown verbs map to the empty flag, which no mask contains.
    """
    member = HttpMethod.__members__.get(verb.strip().upper())
    return member if member is not None else _NO_METHOD


def parse_methods(text: str) -> HttpMethod | None:
    """Parse a comma-separated verb list.

    Returns None for an empty list (no restriction).

    Raises:
        InvalidMethodError: If any verb is not a standard HTTP method.
    """
    verbs = [v.strip() for v in text.split(",")] if text.strip() else []
    if not verbs:
        return None
    mask = _NO_METHOD
    for verb in verbs:
        value = method_value(verb)
        if not value:
            raise InvalidMethodError(verb)
        mask |= value
    return mask


def allows(mask: HttpMethod | None, verb: str) -> bool:
    """Check whether a request verb participates under ``mask``.

    A None mask allows every verb, including non-standard ones.
    """
    if mask is None:
        return True
    return bool(mask & method_value(verb))


def format_methods(mask: HttpMethod | None) -> str:
    """Render a mask as "GET,POST" in declaration order ("" when unrestricted)."""
    if mask is None:
        return ""
    return ",".join(m.name for m in HttpMethod if m in mask)
