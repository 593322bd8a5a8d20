"""Coercion & validation — Schema + HttpRequest → Result.

Evaluation semantics:
- The request is extracted exactly once; a malformed body short-circuits
  into a Result carrying that single diagnostic
- Positional parameters are resolved first, then named ones
- A parameter whose method mask excludes the request method is skipped
  entirely: no value, no diagnostic, not supplied
- Fail-fast within one parameter (first bad raw value stops it),
  fail-slow across parameters (every parameter is attempted)
"""

from __future__ import annotations

import json
import logging
import string
from collections.abc import Callable
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from reqargs._extract import ExtractionError, extract, route_suffix
from reqargs._methods import allows
from reqargs._result import Result
from reqargs._types import (
    BoolList,
    Diagnostic,
    FloatList,
    IntList,
    ParamType,
    StringList,
)

if TYPE_CHECKING:
    from reqargs._request import HttpRequest
    from reqargs._schema import Param, Schema
    from reqargs._types import ValueList

logger = logging.getLogger(__name__)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_OCT_DIGITS = frozenset("01234567")
_DEC_DIGITS = frozenset(string.digits)
_HEX_DIGITS = frozenset(string.hexdigits)

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


# ═══════════════════════════════════════════════════════════════════════════════
# Scalar parsers (raise ValueError)
# ═══════════════════════════════════════════════════════════════════════════════


def parse_int(raw: str) -> int:
    """Parse an integer with base detection.

    ``0x``/``0X`` selects base 16, a leading ``0`` followed by more digits
    selects base 8, anything else is base 10. An optional sign may precede
    the prefix. The result must fit in a signed 64-bit integer.
    """
    s = raw
    sign = 1
    if s and s[0] in "+-":
        sign = -1 if s[0] == "-" else 1
        s = s[1:]

    if s[:2] in ("0x", "0X"):
        digits, base, allowed = s[2:], 16, _HEX_DIGITS
    elif len(s) > 1 and s[0] == "0":
        digits, base, allowed = s[1:], 8, _OCT_DIGITS
    else:
        digits, base, allowed = s, 10, _DEC_DIGITS

    if not digits or any(c not in allowed for c in digits):
        msg = f"invalid integer literal: {raw!r}"
        raise ValueError(msg)

    value = sign * int(digits, base)
    if not INT64_MIN <= value <= INT64_MAX:
        msg = f"integer out of range: {raw!r}"
        raise ValueError(msg)
    return value


def parse_float(raw: str) -> float:
    """Parse a 64-bit float.

    Only ASCII text is accepted; surrounding whitespace and underscores are
    rejected.
    """
    if not raw or not raw.isascii() or raw != raw.strip() or "_" in raw:
        msg = f"invalid float literal: {raw!r}"
        raise ValueError(msg)
    return float(raw)


def parse_bool(raw: str) -> bool:
    """Parse boolean text. An empty string means the flag is set."""
    if raw == "" or raw in _TRUE_WORDS:
        return True
    if raw in _FALSE_WORDS:
        return False
    msg = f"invalid bool literal: {raw!r}"
    raise ValueError(msg)


# type → (parser, value list variant, noun used in diagnostics)
type _Coercer = tuple[Callable[[str], Any], Callable[[tuple[Any, ...]], ValueList], str]

_COERCERS: dict[ParamType, _Coercer] = {
    ParamType.STRING: (str, StringList, "a string"),
    ParamType.INT: (parse_int, IntList, "an integer"),
    ParamType.FLOAT: (parse_float, FloatList, "a float"),
    ParamType.BOOL: (parse_bool, BoolList, "a bool"),
}


def _quote(raw: str) -> str:
    return json.dumps(raw, ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Engine
# ═══════════════════════════════════════════════════════════════════════════════


def positional_args(path: str, route: str) -> tuple[str, ...]:
    """Path segments after the route prefix, leading slash excluded."""
    suffix = route_suffix(path, route)
    if not suffix:
        return ()
    rest = suffix[1:]
    if not rest:
        return ()
    return tuple(rest.split("/"))


def parse(schema: Schema, request: HttpRequest) -> Result:
    """Resolve every declared parameter of ``schema`` against ``request``.

    Never raises for problems with the request itself; the returned
    Result's diagnostics are empty iff the request satisfied the schema.
    """
    try:
        extracted = extract(request, schema.route)
    except ExtractionError as e:
        diag = Diagnostic.capture(str(e))
        logger.debug("%s %s: %s", request.method, request.path, diag.message)
        return Result(schema=schema, diagnostics=(diag,))

    args = positional_args(request.path, schema.route)
    run = _Run(method=request.method)

    for param in schema.positional:
        index = param.position - 1
        present = index < len(args)
        run.resolve(param, (args[index],) if present else (), present)

    for param in schema.named:
        run.resolve(param, extracted.get(param.name), extracted.present(param.name))

    if run.diagnostics:
        logger.debug(
            "%s %s: %d diagnostic(s): %s",
            request.method,
            request.path,
            len(run.diagnostics),
            "; ".join(d.message for d in run.diagnostics),
        )

    return Result(
        schema=schema,
        values=MappingProxyType(run.values),
        supplied=frozenset(run.supplied),
        args=args,
        diagnostics=tuple(run.diagnostics),
    )


class _Run:
    """Accumulates values and diagnostics for one parse call."""

    __slots__ = ("diagnostics", "method", "supplied", "values")

    def __init__(self, method: str) -> None:
        self.method = method
        self.values: dict[str, ValueList] = {}
        self.supplied: set[str] = set()
        self.diagnostics: list[Diagnostic] = []

    def resolve(self, param: Param, raw: tuple[str, ...], present: bool) -> None:
        if not allows(param.methods, self.method):
            return

        name = param.name
        if not raw and param.required:
            self.diagnostics.append(Diagnostic.capture(f"missing {_quote(name)}", name=name))
            return

        coerce, variant, noun = _COERCERS[param.type]
        if not raw:
            self._store(name, variant((param.default,)), present)
            return

        # Bool parameters have no validator hook.
        check = param.validator if param.type is not ParamType.BOOL else None
        typed: list[Any] = []
        for value in raw:
            try:
                item = coerce(value)
            except ValueError:
                self.diagnostics.append(
                    Diagnostic.capture(
                        f"{_quote(value)} is not {noun} (arg:{name})", name=name, raw=value
                    )
                )
                return
            if check is not None:
                problem = check(item)
                if problem:
                    self.diagnostics.append(
                        Diagnostic.capture(
                            f"{_quote(value)} is invalid: {problem} (arg:{name})",
                            name=name,
                            raw=value,
                        )
                    )
                    return
            typed.append(item)
        self._store(name, variant(tuple(typed)), present)

    def _store(self, name: str, values: ValueList, present: bool) -> None:
        self.values[name] = values
        if present:
            self.supplied.add(name)
