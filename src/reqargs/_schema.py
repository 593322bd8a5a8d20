"""Schema — compiled, immutable parameter declarations for one route.

Declarations (ParamSpec) are validated once, eagerly, at service start:

    schema = compile_schema("/api/users", [
        ParamSpec("", memo="list users"),
        ParamSpec("id", type="int", position=1, required=True),
        ParamSpec("q", methods="GET,POST"),
    ])

Compilation fails fast with the first SchemaError. A compiled Schema is
never mutated and may be shared across concurrent requests.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from reqargs._errors import (
    DuplicateNameError,
    DuplicatePositionError,
    InvalidDefaultError,
    InvalidTypeError,
    PositionError,
    PurposeSlotError,
)
from reqargs._methods import HttpMethod, parse_methods
from reqargs._types import ParamType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from reqargs._types import Validator

logger = logging.getLogger(__name__)

_ZERO: dict[ParamType, Any] = {
    ParamType.STRING: "",
    ParamType.INT: 0,
    ParamType.FLOAT: 0.0,
    ParamType.BOOL: False,
}


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """Declaration of one expected parameter.

    An entry with an empty name is the purpose slot: its memo becomes the
    schema's free-text purpose and it may carry nothing else.
    """

    name: str
    type: str = ""
    default: Any = None
    required: bool = False
    position: int = 0
    methods: str = ""
    validator: Validator | None = None
    memo: str = ""


@dataclass(frozen=True, slots=True)
class Param:
    """A compiled ParamSpec: normalized type, typed default, method mask."""

    name: str
    type: ParamType
    default: Any
    required: bool = False
    position: int = 0
    methods: HttpMethod | None = None
    validator: Validator | None = None
    memo: str = ""

    @property
    def positional(self) -> bool:
        return self.position > 0


@dataclass(frozen=True, slots=True)
class Schema:
    """Compiled parameter set for one route.

    ``positional`` is ordered by position, ``named`` by name.
    """

    route: str
    positional: tuple[Param, ...] = ()
    named: tuple[Param, ...] = ()
    purpose: str = ""
    help_flag: str | None = None
    _by_name: Mapping[str, Param] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_name = {p.name: p for p in (*self.positional, *self.named)}
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    def param(self, name: str) -> Param | None:
        """Look up a declared parameter by name."""
        return self._by_name.get(name)

    def params(self) -> list[Param]:
        """All declared parameters, sorted by name."""
        return sorted(self._by_name.values(), key=lambda p: p.name)


def compile_schema(
    route: str,
    specs: Iterable[ParamSpec],
    *,
    help_flag: str | None = None,
) -> Schema:
    """Validate declarations and build an immutable Schema.

    ``help_flag`` adds an implicit optional bool parameter of that name;
    declaring a parameter with the same name is a duplicate.

    Raises:
        DuplicateNameError: two entries share a name
        PurposeSlotError: the empty-name entry sets more than memo
        InvalidTypeError: unknown type name
        InvalidDefaultError: default does not match the declared type
        InvalidMethodError: unknown HTTP verb in methods
        PositionError: negative position
        DuplicatePositionError: two positional entries share an index
    """
    seen: set[str] = set()
    purpose = ""
    positional: list[Param] = []
    named: list[Param] = []

    if help_flag is not None:
        if not help_flag:
            raise DuplicateNameError(help_flag)
        seen.add(help_flag)
        named.append(
            Param(name=help_flag, type=ParamType.BOOL, default=False, memo="show usage")
        )

    for spec in specs:
        if spec.name in seen:
            raise DuplicateNameError(spec.name)
        seen.add(spec.name)

        if not spec.name:
            _check_purpose_slot(spec)
            purpose = spec.memo
            continue

        param = _compile_param(spec)
        if param.positional:
            positional.append(param)
        else:
            named.append(param)

    positional.sort(key=lambda p: p.position)
    for prev, cur in zip(positional, positional[1:], strict=False):
        if prev.position == cur.position:
            raise DuplicatePositionError(prev.name, cur.name, cur.position)
    named.sort(key=lambda p: p.name)

    schema = Schema(
        route=route.rstrip("/"),
        positional=tuple(positional),
        named=tuple(named),
        purpose=purpose,
        help_flag=help_flag,
    )
    logger.debug(
        "compiled schema %r: %d positional, %d named",
        schema.route or "/",
        len(schema.positional),
        len(schema.named),
    )
    return schema


def _check_purpose_slot(spec: ParamSpec) -> None:
    if spec.type:
        raise PurposeSlotError("type")
    if spec.default is not None:
        raise PurposeSlotError("default")
    if spec.required:
        raise PurposeSlotError("required")
    if spec.position:
        raise PurposeSlotError("position")
    if spec.methods:
        raise PurposeSlotError("methods")
    if spec.validator is not None:
        raise PurposeSlotError("validator")


def _compile_param(spec: ParamSpec) -> Param:
    type_name = spec.type.strip().lower() or ParamType.STRING.value
    try:
        ptype = ParamType(type_name)
    except ValueError:
        raise InvalidTypeError(spec.name, spec.type) from None

    if spec.position < 0:
        raise PositionError(spec.name, spec.position)

    return Param(
        name=spec.name,
        type=ptype,
        default=_typed_default(spec.name, ptype, spec.default),
        required=spec.required,
        position=spec.position,
        methods=parse_methods(spec.methods),
        validator=spec.validator,
        memo=spec.memo,
    )


def _typed_default(name: str, ptype: ParamType, default: Any) -> Any:
    if default is None:
        return _ZERO[ptype]
    match ptype:
        case ParamType.STRING if isinstance(default, str):
            return default
        case ParamType.INT if isinstance(default, int) and not isinstance(default, bool):
            return default
        case ParamType.FLOAT if _finite_number(default):
            return float(default)
        case ParamType.BOOL if isinstance(default, bool):
            return default
    raise InvalidDefaultError(name, ptype.value, default)


def _finite_number(value: Any) -> bool:
    # JSON has no spelling for inf or nan.
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False
