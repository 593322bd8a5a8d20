"""Check registry for config-driven schema construction.

The registry enables generic config loading: JSON/YAML config → compiled
Schema without hand-written validator wiring.

- RegistryBuilder → .build() → Registry (immutable)
- Factories are plain callables: (config: dict) → Validator
- load_schema() resolves every ``check`` reference, then compiles

Example::

    builder = register_core_checks(RegistryBuilder())
    builder.check("acme.v1.Sku", lambda cfg: SkuCheck(cfg["prefix"]))
    registry = builder.build()

    config = parse_schema_config(yaml.safe_load(text))
    schema = registry.load_schema(config)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from reqargs._checks import LengthCheck, OneOfCheck, RangeCheck, RegexCheck
from reqargs._errors import SchemaError
from reqargs._schema import ParamSpec, compile_schema

if TYPE_CHECKING:
    from reqargs._config import SchemaConfig, TypedConfig
    from reqargs._schema import Schema
    from reqargs._types import Validator

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownTypeUrlError(SchemaError):
    """A check type_url was not found in the registry."""

    def __init__(self, type_url: str, available: list[str]) -> None:
        self.type_url = type_url
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown check type_url: {type_url!r} (registered: {registered})"
        else:
            msg = f"unknown check type_url: {type_url!r} (no check types are registered)"
        super().__init__(msg)


class InvalidConfigError(SchemaError):
    """A check config payload was malformed or semantically invalid."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type CheckFactory = Callable[[dict[str, Any]], Validator]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register check factories with type URLs, then call build() to produce
    an immutable Registry. No registration is possible after build.
    """

    def __init__(self) -> None:
        self._check_factories: dict[str, CheckFactory] = {}

    def check(self, type_url: str, factory: CheckFactory) -> RegistryBuilder:
        """Register a check factory with a type URL."""
        if type_url in self._check_factories:
            logger.warning("check type_url %r registered twice; last one wins", type_url)
        self._check_factories[type_url] = factory
        return self

    def build(self) -> Registry:
        """Freeze the registry."""
        return Registry(_check_factories=MappingProxyType(dict(self._check_factories)))


def register_core_checks(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the built-in checks.

    Type URLs:
    - reqargs.v1.Regex   { "pattern": str }
    - reqargs.v1.OneOf   { "choices": [..] }
    - reqargs.v1.Range   { "minimum": num?, "maximum": num? }
    - reqargs.v1.Length  { "minimum": int?, "maximum": int? }
    """
    return (
        builder.check("reqargs.v1.Regex", _regex_factory)
        .check("reqargs.v1.OneOf", _one_of_factory)
        .check("reqargs.v1.Range", _range_factory)
        .check("reqargs.v1.Length", _length_factory)
    )


def _regex_factory(config: dict[str, Any]) -> RegexCheck:
    pattern = config.get("pattern")
    if not isinstance(pattern, str):
        msg = "Regex check requires a 'pattern' field (string)"
        raise ValueError(msg)
    return RegexCheck(pattern)


def _one_of_factory(config: dict[str, Any]) -> OneOfCheck:
    choices = config.get("choices")
    if not isinstance(choices, list) or not choices:
        msg = "OneOf check requires a non-empty 'choices' list"
        raise ValueError(msg)
    return OneOfCheck(tuple(choices))


def _range_factory(config: dict[str, Any]) -> RangeCheck:
    for key in ("minimum", "maximum"):
        bound = config.get(key)
        if bound is not None and (
            not isinstance(bound, int | float) or isinstance(bound, bool)
        ):
            msg = f"Range check {key!r} must be a number"
            raise ValueError(msg)
    return RangeCheck(minimum=config.get("minimum"), maximum=config.get("maximum"))


def _length_factory(config: dict[str, Any]) -> LengthCheck:
    minimum = config.get("minimum", 0)
    maximum = config.get("maximum")
    if not isinstance(minimum, int) or (maximum is not None and not isinstance(maximum, int)):
        msg = "Length check bounds must be integers"
        raise ValueError(msg)
    return LengthCheck(minimum=minimum, maximum=maximum)


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of check factories.

    Constructed via RegistryBuilder. Use load_schema() to compile config
    into a runtime Schema.
    """

    _check_factories: MappingProxyType[str, CheckFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load_schema(self, config: SchemaConfig) -> Schema:
        """Load a Schema from configuration.

        Resolves every check through the registered factories, then runs
        the ordinary schema compilation.

        Raises:
            UnknownTypeUrlError: check type_url not registered
            InvalidConfigError: check payload malformed
            SchemaError: any compile error (duplicate name, bad type, ...)
        """
        specs: list[ParamSpec] = []
        if config.purpose:
            specs.append(ParamSpec("", memo=config.purpose))
        for p in config.params:
            specs.append(
                ParamSpec(
                    name=p.name,
                    type=p.type,
                    default=p.default,
                    required=p.required,
                    position=p.position,
                    methods=p.methods,
                    validator=self._load_check(p.check) if p.check is not None else None,
                    memo=p.memo,
                )
            )
        return compile_schema(config.route, specs, help_flag=config.help_flag)

    @property
    def check_count(self) -> int:
        """Number of registered check types."""
        return len(self._check_factories)

    def contains_check(self, type_url: str) -> bool:
        """Check if a check type URL is registered."""
        return type_url in self._check_factories

    def check_type_urls(self) -> list[str]:
        """Return all registered check type URLs (sorted)."""
        return sorted(self._check_factories.keys())

    def _load_check(self, config: TypedConfig) -> Validator:
        factory = self._check_factories.get(config.type_url)
        if factory is None:
            raise UnknownTypeUrlError(config.type_url, list(self._check_factories.keys()))
        try:
            return factory(config.config)
        except Exception as e:
            raise InvalidConfigError(str(e)) from e
