"""Tests for Result accessors (reqargs._result)."""

import json

import pytest

from reqargs import (
    FloatList,
    ParamSpec,
    ParamType,
    ParamTypeMismatchError,
    Result,
    Schema,
    StringList,
    UsageError,
    compile_schema,
    parse,
)
from reqargs.testing import make_request


@pytest.fixture
def schema() -> Schema:
    return compile_schema(
        "/api/x",
        [
            ParamSpec("s"),
            ParamSpec("i", type="int", default=3),
            ParamSpec("f", type="float"),
            ParamSpec("b", type="bool"),
            ParamSpec("seg", position=1),
        ],
    )


class TestAccessors:
    def test_typed_values(self, schema: Schema) -> None:
        req = make_request(
            "GET", "/api/x/one", query={"s": ["a", "b"], "i": "0x10", "f": "2.5", "b": ""}
        )
        result = parse(schema, req)
        assert result.ok
        assert result.strings("s") == ["a", "b"]
        assert result.string("s") == "a"
        assert result.integers("i") == [16]
        assert result.integer("i") == 16
        assert result.floats("f") == [2.5]
        assert result.float("f") == 2.5
        assert result.bools("b") == [True]
        assert result.bool("b") is True
        assert result.string("seg") == "one"
        assert result.arg(0) == "one"

    def test_defaults(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x"))
        assert result.integer("i") == 3
        assert result.string("s") == ""
        assert result.float("f") == 0.0
        assert result.bool("b") is False
        assert result.names() == ["b", "f", "i", "s", "seg"]

    def test_undeclared_name_is_zero(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x"))
        assert result.strings("nope") == []
        assert result.string("nope") == ""
        assert result.integer("nope") == 0
        assert result.float("nope") == 0.0
        assert result.bool("nope") is False
        assert result.get("nope") is None

    def test_absent_after_error_is_zero(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x", query={"i": "x"}))
        assert not result.ok
        assert result.integers("i") == []
        assert result.integer("i") == 0

    def test_wrong_variant_raises(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x", query={"i": "1"}))
        with pytest.raises(ParamTypeMismatchError) as exc_info:
            result.string("i")
        assert exc_info.value.name == "i"
        assert exc_info.value.declared is ParamType.INT
        assert exc_info.value.requested is ParamType.STRING
        with pytest.raises(TypeError):
            result.bools("s")

    def test_wrong_type_raises_even_when_absent(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x", query={"i": "x"}))
        with pytest.raises(ParamTypeMismatchError):
            result.float("i")

    def test_returned_lists_are_copies(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x", query={"s": "a"}))
        result.strings("s").append("b")
        assert result.strings("s") == ["a"]


class TestInspection:
    def test_empty_result(self, schema: Schema) -> None:
        result = Result(schema=schema)
        assert result.ok
        assert not result.has_errors()
        assert result.names() == []
        assert result.error() is None

    def test_hand_built_values(self, schema: Schema) -> None:
        result = Result(schema=schema, values={"s": StringList(("x",)), "f": FloatList((1.0,))})
        assert result.string("s") == "x"
        assert result.float("f") == 1.0

    def test_error_wraps_usage(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x", query={"i": "x"}))
        assert result.has_errors()
        err = result.error()
        assert isinstance(err, UsageError)
        assert err.messages == ['"x" is not an integer (arg:i)']
        assert json.loads(str(err)) == result.usage()

    def test_usage_without_errors_has_no_err(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x"))
        assert "err" not in result.usage()

    def test_wants_help_needs_flag(self, schema: Schema) -> None:
        result = parse(schema, make_request("GET", "/api/x", query={"help": ""}))
        assert not result.wants_help()
