"""Core types and protocols for reqargs.

- ParamType names the four value types a parameter can declare
- ValueList is the tagged union of typed value lists stored per parameter
- Validator is the custom-check port a declaration may carry
- Diagnostic is one request-time failure
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable


class ParamType(StrEnum):
    """Declared type of a parameter."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


@dataclass(frozen=True, slots=True)
class StringList:
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class IntList:
    values: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class FloatList:
    values: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class BoolList:
    values: tuple[bool, ...]


# One variant per ParamType; accessors pattern-match on the variant.
type ValueList = StringList | IntList | FloatList | BoolList


def value_list_type(values: ValueList) -> ParamType:
    """Return the ParamType a value list variant carries."""
    match values:
        case StringList():
            return ParamType.STRING
        case IntList():
            return ParamType.INT
        case FloatList():
            return ParamType.FLOAT
        case BoolList():
            return ParamType.BOOL
    msg = f"not a value list: {type(values).__name__}"  # pragma: no cover
    raise TypeError(msg)  # pragma: no cover


@runtime_checkable
class Validator(Protocol):
    """Check a typed value.

    Returns None when the value is acceptable, otherwise a short message
    saying what is wrong. Called with None, a validator returns its own
    description ("must match /^[a-z]+$/"), which the usage document shows.
    """

    def __call__(self, value: Any, /) -> str | None: ...


_TRACE_DEPTH = 8


def _capture_trace() -> tuple[str, ...]:
    frames = traceback.extract_stack(limit=_TRACE_DEPTH + 2)[:-2]
    out: list[str] = []
    for frame in reversed(frames):
        parts = frame.filename.replace("\\", "/").split("/")
        file = "/".join(parts[-2:])
        out.append(f"({file}:{frame.lineno}) {frame.name}")
    return tuple(out)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One request-time failure.

    Value-level diagnostics name the parameter and the offending raw value.
    The call-site trace is captured once, where the diagnostic is produced,
    and takes no part in equality.
    """

    message: str
    name: str | None = None
    raw: str | None = None
    trace: tuple[str, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def capture(
        cls, message: str, name: str | None = None, raw: str | None = None
    ) -> Diagnostic:
        """Create a diagnostic carrying the caller's stack."""
        return cls(message=message, name=name, raw=raw, trace=_capture_trace())

    def __str__(self) -> str:
        return self.message
