"""Config types for config-driven schema construction.

A schema can be declared as plain data (loaded by the caller from JSON or
YAML) instead of ParamSpec objects. The construction path is:
  dict → parse_schema_config() → SchemaConfig → Registry.load_schema() → Schema

Relationship to runtime types:

| Config type   | Runtime type        |
|---------------|---------------------|
| SchemaConfig  | Schema              |
| ParamConfig   | ParamSpec / Param   |
| TypedConfig   | Validator (a check) |
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ═══════════════════════════════════════════════════════════════════════════════
# Config types (frozen dataclasses)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypedConfig:
    """Reference to a registered check type with its configuration.

    - type_url identifies the registered check factory
    - config carries the factory's keyword payload
    """

    type_url: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParamConfig:
    """Config for one parameter. Mirrors ParamSpec, with ``check`` as data."""

    name: str
    type: str = ""
    default: Any = None
    required: bool = False
    position: int = 0
    methods: str = ""
    check: TypedConfig | None = None
    memo: str = ""


@dataclass(frozen=True, slots=True)
class SchemaConfig:
    """Configuration for a Schema.

    ``purpose`` becomes the purpose slot; ``help_flag`` names the implicit
    help parameter, if any.
    """

    route: str
    params: tuple[ParamConfig, ...] = ()
    purpose: str = ""
    help_flag: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════


class ConfigParseError(Exception):
    """Error parsing a config dict into config types."""


def parse_schema_config(data: dict[str, Any]) -> SchemaConfig:
    """Parse a dict into a SchemaConfig.

    Expected shape::

        route: /api/users
        purpose: list users
        help_flag: help
        params:
          - {name: id, type: int, position: 1, required: true}
          - {name: q, check: {type_url: reqargs.v1.Regex, config: {pattern: "^a"}}}

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    route = data.get("route")
    if route is None:
        msg = "missing required field 'route'"
        raise ConfigParseError(msg)
    if not isinstance(route, str):
        msg = f"'route' must be a string, got {type(route).__name__}"
        raise ConfigParseError(msg)

    raw_params = data.get("params", [])
    if not isinstance(raw_params, list):
        msg = f"'params' must be a list, got {type(raw_params).__name__}"
        raise ConfigParseError(msg)

    purpose = _optional_str(data, "purpose", "schema") or ""
    help_flag = _optional_str(data, "help_flag", "schema")

    return SchemaConfig(
        route=route,
        params=tuple(_parse_param(p) for p in raw_params),
        purpose=purpose,
        help_flag=help_flag,
    )


def _parse_param(data: dict[str, Any]) -> ParamConfig:
    """Parse one parameter config dict."""
    if not isinstance(data, dict):
        msg = f"param must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    name = data.get("name")
    if name is None:
        msg = "param missing required field 'name'"
        raise ConfigParseError(msg)
    if not isinstance(name, str) or not name:
        msg = f"param 'name' must be a non-empty string, got {name!r}"
        raise ConfigParseError(msg)

    required = data.get("required", False)
    if not isinstance(required, bool):
        msg = f"param {name!r}: 'required' must be a bool, got {type(required).__name__}"
        raise ConfigParseError(msg)

    position = data.get("position", 0)
    if not isinstance(position, int) or isinstance(position, bool):
        msg = f"param {name!r}: 'position' must be an int, got {type(position).__name__}"
        raise ConfigParseError(msg)

    methods = data.get("methods", "")
    if isinstance(methods, list):
        if not all(isinstance(m, str) for m in methods):
            msg = f"param {name!r}: 'methods' entries must be strings"
            raise ConfigParseError(msg)
        methods = ",".join(methods)
    elif not isinstance(methods, str):
        msg = f"param {name!r}: 'methods' must be a string or list, got {type(methods).__name__}"
        raise ConfigParseError(msg)

    check = None
    if "check" in data:
        check = _parse_typed_config(data["check"])

    return ParamConfig(
        name=name,
        type=_optional_str(data, "type", f"param {name!r}") or "",
        default=data.get("default"),
        required=required,
        position=position,
        methods=methods,
        check=check,
        memo=_optional_str(data, "memo", f"param {name!r}") or "",
    )


def _parse_typed_config(data: dict[str, Any]) -> TypedConfig:
    """Parse a typed config dict."""
    if not isinstance(data, dict):
        msg = f"typed_config must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    if "type_url" not in data:
        msg = "typed_config missing required field 'type_url'"
        raise ConfigParseError(msg)

    type_url = data["type_url"]
    if not isinstance(type_url, str):
        msg = f"type_url must be a string, got {type(type_url).__name__}"
        raise ConfigParseError(msg)

    config = data.get("config", {})
    if not isinstance(config, dict):
        msg = f"config must be a dict, got {type(config).__name__}"
        raise ConfigParseError(msg)

    return TypedConfig(type_url=type_url, config=config)


def _optional_str(data: dict[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    msg = f"{where}: {key!r} must be a string, got {type(value).__name__}"
    raise ConfigParseError(msg)
