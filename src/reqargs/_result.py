"""Result — the per-request outcome of applying a Schema.

Holds the typed value list per parameter, which names the caller supplied
explicitly, the positional path segments, and the diagnostics. A Result
belongs to exactly one request and is never shared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from reqargs._render import UsageError, render
from reqargs._types import (
    BoolList,
    FloatList,
    IntList,
    ParamType,
    StringList,
    value_list_type,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from reqargs._schema import Schema
    from reqargs._types import Diagnostic, ValueList


class ParamTypeMismatchError(TypeError):
    """A typed accessor was used for a parameter of another type.

    This is a programmer error: the calling code disagrees with the schema
    declaration. It is never reported as a request diagnostic.
    """

    def __init__(self, name: str, declared: ParamType, requested: ParamType) -> None:
        self.name = name
        self.declared = declared
        self.requested = requested
        super().__init__(
            f"parameter {name!r} is {declared.value}, not {requested.value}"
        )


@dataclass(frozen=True, slots=True)
class Result:
    """Typed arguments and diagnostics for one request."""

    schema: Schema
    values: Mapping[str, ValueList] = field(default_factory=lambda: MappingProxyType({}))
    supplied: frozenset[str] = frozenset()
    args: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    # ── Inspection ────────────────────────────────────────────────────────

    @property
    def ok(self) -> bool:
        """True iff the request satisfied the schema."""
        return not self.diagnostics

    def has_errors(self) -> bool:
        return bool(self.diagnostics)

    def get(self, name: str) -> ValueList | None:
        """The typed value list stored for ``name``, if any."""
        return self.values.get(name)

    def has(self, name: str) -> bool:
        """Whether ``name`` was supplied by the request (not a default)."""
        return name in self.supplied

    def names(self) -> list[str]:
        """Names with a stored value, sorted."""
        return sorted(self.values)

    def arg(self, index: int) -> str:
        """Positional path segment by 0-based index."""
        return self.args[index]

    def wants_help(self) -> bool:
        """True when the schema's help flag is set on this request."""
        flag = self.schema.help_flag
        return flag is not None and self.bool(flag)

    def usage(self) -> dict[str, Any]:
        """Usage document, with ``err`` when there are diagnostics."""
        return render(self.schema, self.diagnostics)

    def error(self) -> UsageError | None:
        """An exception wrapping the error document, or None when ok."""
        if self.ok:
            return None
        return UsageError(self.usage())

    # ── Typed accessors ───────────────────────────────────────────────────

    def _absent(self, name: str, requested: ParamType) -> None:
        param = self.schema.param(name)
        if param is not None and param.type is not requested:
            raise ParamTypeMismatchError(name, param.type, requested)

    def strings(self, name: str) -> list[str]:
        match self.get(name):
            case StringList(values=vs):
                return list(vs)
            case None:
                self._absent(name, ParamType.STRING)
                return []
            case other:
                raise ParamTypeMismatchError(name, value_list_type(other), ParamType.STRING)

    def string(self, name: str) -> str:
        vs = self.strings(name)
        return vs[0] if vs else ""

    def integers(self, name: str) -> list[int]:
        match self.get(name):
            case IntList(values=vs):
                return list(vs)
            case None:
                self._absent(name, ParamType.INT)
                return []
            case other:
                raise ParamTypeMismatchError(name, value_list_type(other), ParamType.INT)

    def integer(self, name: str) -> int:
        vs = self.integers(name)
        return vs[0] if vs else 0

    def floats(self, name: str) -> list[float]:
        match self.get(name):
            case FloatList(values=vs):
                return list(vs)
            case None:
                self._absent(name, ParamType.FLOAT)
                return []
            case other:
                raise ParamTypeMismatchError(name, value_list_type(other), ParamType.FLOAT)

    def bools(self, name: str) -> list[bool]:
        match self.get(name):
            case BoolList(values=vs):
                return list(vs)
            case None:
                self._absent(name, ParamType.BOOL)
                return []
            case other:
                raise ParamTypeMismatchError(name, value_list_type(other), ParamType.BOOL)

    # float() and bool() shadow the builtins inside the class body; keep them last.

    def float(self, name: str) -> float:
        vs = self.floats(name)
        return vs[0] if vs else 0.0

    def bool(self, name: str) -> bool:
        vs = self.bools(name)
        return vs[0] if vs else False
