"""Compile-time errors.

Every error raised while turning declarations into a Schema is a
SchemaError. They are fatal to start-up: a schema that failed to compile
must never be registered or used to parse requests.
"""

from __future__ import annotations

from typing import Any


class SchemaError(Exception):
    """Errors from schema compilation."""


class DuplicateNameError(SchemaError):
    """Two declarations share a name (the purpose slot and help flag included)."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"arg name {name!r} duplicated")


class InvalidTypeError(SchemaError):
    """A declaration names a type other than string, int, float or bool."""

    def __init__(self, name: str, type_name: str) -> None:
        self.name = name
        self.type_name = type_name
        super().__init__(f"invalid param type {type_name!r} (arg:{name})")


class InvalidDefaultError(SchemaError):
    """A default value does not match the declared parameter type."""

    def __init__(self, name: str, type_name: str, default: Any) -> None:
        self.name = name
        self.type_name = type_name
        self.default = default
        super().__init__(
            f"default value {default!r} is not a valid {type_name} (arg:{name})"
        )


class PositionError(SchemaError):
    """A positional index is negative."""

    def __init__(self, name: str, position: int) -> None:
        self.name = name
        self.position = position
        super().__init__(f"invalid position {position} (arg:{name})")


class DuplicatePositionError(SchemaError):
    """Two positional declarations share an index."""

    def __init__(self, first: str, second: str, position: int) -> None:
        self.first = first
        self.second = second
        self.position = position
        super().__init__(f"same position {position} ({first!r}, {second!r})")


class InvalidMethodError(SchemaError):
    """A method restriction names an unknown HTTP verb."""

    def __init__(self, verb: str) -> None:
        self.verb = verb
        super().__init__(f"invalid http method {verb!r}")


class PurposeSlotError(SchemaError):
    """The empty-name entry carries more than a purpose text."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"purpose entry (empty name) must not set {field!r}")


class InvalidCheckError(SchemaError):
    """A built-in check was constructed with unusable arguments."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid check: {source}")
