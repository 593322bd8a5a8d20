"""Shared fixtures for reqargs tests.

Builds the registry used by config-driven tests and a few schemas that
several test modules exercise.
"""

from __future__ import annotations

from typing import Any

import pytest

import reqargs
from reqargs import (
    HttpRequest,
    ParamSpec,
    Registry,
    RegistryBuilder,
    Schema,
    compile_schema,
    parse_schema_config,
    register_core_checks,
)
from reqargs.testing import make_request

# ─── YAML → reqargs type conversion ─────────────────────────────────────────


def make_registry() -> Registry:
    """Registry with the built-in checks."""
    return register_core_checks(RegistryBuilder()).build()


def load_schema(spec: dict[str, Any]) -> Schema:
    """Compile a YAML ``schema`` mapping through the config path."""
    return make_registry().load_schema(parse_schema_config(spec))


def request_from_spec(spec: dict[str, Any]) -> HttpRequest:
    """Build an HttpRequest from a YAML ``request`` mapping."""
    body = spec.get("body")
    return make_request(
        str(spec.get("method", "GET")),
        str(spec.get("path", "/")),
        cookies=spec.get("cookies"),
        json=spec.get("json"),
        form=spec.get("form"),
        headers={str(k): str(v) for k, v in spec.get("headers", {}).items()},
        body=body.encode() if body is not None else None,
    )


def error_class(name: str) -> type[Exception]:
    """Resolve an exception class exported by reqargs."""
    cls = getattr(reqargs, name)
    assert isinstance(cls, type) and issubclass(cls, Exception), name
    return cls


# ─── Shared schemas ─────────────────────────────────────────────────────────


@pytest.fixture
def registry() -> Registry:
    return make_registry()


@pytest.fixture
def users_schema() -> Schema:
    """A route with positional, named, restricted and checked parameters."""
    return compile_schema(
        "/api/users",
        [
            ParamSpec("", memo="look up users"),
            ParamSpec("id", type="int", position=1, required=True, memo="user id"),
            ParamSpec("tab", position=2, default="profile"),
            ParamSpec("limit", type="int", default=20, memo="page size"),
            ParamSpec("verbose", type="bool"),
            ParamSpec("token", required=True, methods="POST,PUT"),
            ParamSpec("name", validator=reqargs.RegexCheck("^[a-z]+$")),
        ],
        help_flag="help",
    )
