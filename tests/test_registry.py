"""Tests for the check registry (reqargs._registry).

Validates the builder → frozen registry → load_schema pipeline.
"""

import logging

import pytest

from reqargs import (
    InvalidConfigError,
    LengthCheck,
    OneOfCheck,
    RangeCheck,
    RegexCheck,
    Registry,
    RegistryBuilder,
    SchemaError,
    UnknownTypeUrlError,
    parse,
    parse_schema_config,
    register_core_checks,
)
from reqargs.testing import make_request


class TestRegistryBuilder:
    def test_builder_registers_and_freezes(self) -> None:
        builder = RegistryBuilder()
        builder.check("test.Any", lambda cfg: RegexCheck(cfg["pattern"]))
        registry = builder.build()

        assert registry.check_count == 1
        assert registry.contains_check("test.Any")
        assert not registry.contains_check("test.Unknown")

    def test_build_snapshots(self) -> None:
        builder = RegistryBuilder()
        registry = builder.build()
        builder.check("late.Check", lambda cfg: LengthCheck())
        assert registry.check_count == 0

    def test_core_checks(self) -> None:
        registry = register_core_checks(RegistryBuilder()).build()
        assert registry.check_type_urls() == [
            "reqargs.v1.Length",
            "reqargs.v1.OneOf",
            "reqargs.v1.Range",
            "reqargs.v1.Regex",
        ]

    def test_duplicate_registration_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        builder = RegistryBuilder()
        builder.check("x.Y", lambda cfg: LengthCheck())
        with caplog.at_level(logging.WARNING, logger="reqargs"):
            builder.check("x.Y", lambda cfg: LengthCheck(1))
        assert "registered twice" in caplog.text
        assert builder.build().check_count == 1

    def test_empty_registry(self) -> None:
        assert Registry().check_count == 0


class TestLoadSchema:
    def test_checks_resolved(self, registry: Registry) -> None:
        config = parse_schema_config(
            {
                "route": "/api/x",
                "purpose": "demo",
                "params": [
                    {"name": "a", "check": {"type_url": "reqargs.v1.Regex", "config": {"pattern": "^a"}}},
                    {"name": "b", "check": {"type_url": "reqargs.v1.OneOf", "config": {"choices": ["x"]}}},
                    {"name": "c", "type": "int", "check": {"type_url": "reqargs.v1.Range", "config": {"maximum": 3}}},
                    {"name": "d", "check": {"type_url": "reqargs.v1.Length", "config": {"maximum": 2}}},
                ],
            }
        )
        schema = registry.load_schema(config)
        assert schema.purpose == "demo"
        assert schema.param("a").validator == RegexCheck("^a")
        assert schema.param("b").validator == OneOfCheck(("x",))
        assert schema.param("c").validator == RangeCheck(maximum=3)
        assert schema.param("d").validator == LengthCheck(maximum=2)

        result = parse(schema, make_request(query={"a": "abc", "c": "4"}))
        assert [d.message for d in result.diagnostics] == ['"4" is invalid: must be <= 3 (arg:c)']

    def test_custom_check(self) -> None:
        def even_factory(cfg: dict) -> object:
            return lambda v: "must be even" if v is None or v % 2 else None

        registry = RegistryBuilder().check("acme.v1.Even", even_factory).build()
        config = parse_schema_config(
            {"route": "/", "params": [{"name": "n", "type": "int", "check": {"type_url": "acme.v1.Even"}}]}
        )
        schema = registry.load_schema(config)
        assert parse(schema, make_request(query={"n": "4"})).ok
        assert not parse(schema, make_request(query={"n": "5"})).ok

    def test_unknown_type_url(self, registry: Registry) -> None:
        config = parse_schema_config(
            {"route": "/", "params": [{"name": "a", "check": {"type_url": "nope.v1.X"}}]}
        )
        with pytest.raises(UnknownTypeUrlError) as exc_info:
            registry.load_schema(config)
        assert exc_info.value.type_url == "nope.v1.X"
        assert "reqargs.v1.Regex" in exc_info.value.available

    def test_unknown_type_url_empty_registry(self) -> None:
        config = parse_schema_config(
            {"route": "/", "params": [{"name": "a", "check": {"type_url": "x"}}]}
        )
        with pytest.raises(UnknownTypeUrlError, match="no check types are registered"):
            RegistryBuilder().build().load_schema(config)

    @pytest.mark.parametrize(
        ("type_url", "cfg"),
        [
            ("reqargs.v1.Regex", {}),
            ("reqargs.v1.Regex", {"pattern": "("}),
            ("reqargs.v1.OneOf", {"choices": []}),
            ("reqargs.v1.Range", {"minimum": "1"}),
            ("reqargs.v1.Range", {"minimum": 2, "maximum": 1}),
            ("reqargs.v1.Length", {"minimum": "1"}),
        ],
    )
    def test_invalid_check_config(self, registry: Registry, type_url: str, cfg: dict) -> None:
        config = parse_schema_config(
            {"route": "/", "params": [{"name": "a", "check": {"type_url": type_url, "config": cfg}}]}
        )
        with pytest.raises(InvalidConfigError):
            registry.load_schema(config)

    def test_compile_errors_propagate(self, registry: Registry) -> None:
        config = parse_schema_config({"route": "/", "params": [{"name": "a", "type": "uint"}]})
        with pytest.raises(SchemaError):
            registry.load_schema(config)

    def test_help_flag(self, registry: Registry) -> None:
        schema = registry.load_schema(parse_schema_config({"route": "/", "help_flag": "h"}))
        assert parse(schema, make_request(query={"h": ""})).wants_help()
