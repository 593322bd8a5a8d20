"""Tests for the coercion & validation engine (reqargs._parse)."""

import logging

import pytest

from reqargs import (
    INT64_MAX,
    INT64_MIN,
    BoolList,
    HttpRequest,
    IntList,
    ParamSpec,
    StringList,
    compile_schema,
    parse,
    parse_bool,
    parse_float,
    parse_int,
    positional_args,
)
from reqargs.testing import make_request


class TestParseInt:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("0x1A", 26),
            ("0X1a", 26),
            ("010", 8),
            ("10", 10),
            ("0", 0),
            ("-0x10", -16),
            ("+7", 7),
            ("-010", -8),
            (str(INT64_MAX), INT64_MAX),
            (str(INT64_MIN), INT64_MIN),
        ],
    )
    def test_valid(self, raw: str, expected: int) -> None:
        assert parse_int(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "-", "0x", "0xZZ", "08", "1.5", " 1", "1_000", "abc", str(INT64_MAX + 1)],
    )
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_int(raw)


class TestParseFloat:
    def test_valid(self) -> None:
        assert parse_float("1.5") == 1.5
        assert parse_float("-2e-3") == -0.002
        assert parse_float("3") == 3.0

    @pytest.mark.parametrize("raw", ["", " 1.0", "1.0 ", "1_0.5", "x", "\u0661\u0662", "\uff11.5"])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_float(raw)

    def test_non_ascii_value_diagnosed(self) -> None:
        schema = compile_schema("/", [ParamSpec("r", type="float")])
        result = parse(schema, make_request(query={"r": "\u0661\u0662"}))
        assert [d.message for d in result.diagnostics] == [
            '"\u0661\u0662" is not a float (arg:r)'
        ]


class TestParseBool:
    @pytest.mark.parametrize("raw", ["", "1", "t", "T", "TRUE", "true", "True"])
    def test_true(self, raw: str) -> None:
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false(self, raw: str) -> None:
        assert parse_bool(raw) is False

    @pytest.mark.parametrize("raw", ["notabool", "yes", "tRuE", " true"])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_bool(raw)


class TestPositionalArgs:
    def test_segments_after_route(self) -> None:
        assert positional_args("/api/x/1/two", "/api/x") == ("1", "two")

    def test_no_suffix(self) -> None:
        assert positional_args("/api/x", "/api/x") == ()
        assert positional_args("/api/x/", "/api/x") == ()

    def test_outside_route(self) -> None:
        assert positional_args("/api/xy/1", "/api/x") == ()

    def test_empty_segments_kept(self) -> None:
        assert positional_args("/api/x/a//b", "/api/x") == ("a", "", "b")


class TestParse:
    def test_bool_flag_semantics(self) -> None:
        schema = compile_schema("/", [ParamSpec("v", type="bool", default=True)])
        assert parse(schema, make_request(query={"v": ""})).get("v") == BoolList((True,))
        assert parse(schema, make_request()).get("v") == BoolList((True,))
        result = parse(schema, make_request(query={"v": "notabool"}))
        assert [d.message for d in result.diagnostics] == ['"notabool" is not a bool (arg:v)']

    def test_missing_required_single_diagnostic(self) -> None:
        schema = compile_schema("/", [ParamSpec("a", required=True), ParamSpec("b")])
        result = parse(schema, make_request())
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].message == 'missing "a"'
        assert result.diagnostics[0].name == "a"
        assert result.get("a") is None

    def test_restricted_param_absent_on_other_method(self) -> None:
        schema = compile_schema("/", [ParamSpec("p", required=True, methods="POST")])
        result = parse(schema, make_request("GET", query={"p": "x"}))
        assert result.ok
        assert result.get("p") is None
        assert not result.has("p")

    def test_body_failure_short_circuits(self) -> None:
        schema = compile_schema("/", [ParamSpec("a", required=True), ParamSpec("b", type="int")])
        req = HttpRequest("POST", "/?b=zz", {"Content-Type": "application/xml"}, b"<a/>")
        result = parse(schema, req)
        assert [d.message for d in result.diagnostics] == [
            "invalid content-type 'application/xml'"
        ]
        assert result.names() == []

    def test_validator_failure(self) -> None:
        def even(value: object) -> str | None:
            if value is None:
                return "must be even"
            return None if value % 2 == 0 else "odd"

        schema = compile_schema("/", [ParamSpec("n", type="int", validator=even)])
        result = parse(schema, make_request(query={"n": ["2", "3", "x"]}))
        assert [d.message for d in result.diagnostics] == ['"3" is invalid: odd (arg:n)']
        assert result.diagnostics[0].raw == "3"
        assert result.get("n") is None

    def test_validator_not_run_on_default(self) -> None:
        calls: list[object] = []

        def record(value: object) -> str | None:
            calls.append(value)
            return "never"

        schema = compile_schema("/", [ParamSpec("s", default="d", validator=record)])
        result = parse(schema, make_request())
        assert result.ok
        assert result.get("s") == StringList(("d",))
        assert calls == []

    def test_has_distinguishes_default(self) -> None:
        schema = compile_schema("/", [ParamSpec("n", type="int", default=5)])
        supplied = parse(schema, make_request(query={"n": "5"}))
        defaulted = parse(schema, make_request())
        assert supplied.get("n") == defaulted.get("n") == IntList((5,))
        assert supplied.has("n")
        assert not defaulted.has("n")

    def test_positional_before_named(self) -> None:
        schema = compile_schema(
            "/r",
            [ParamSpec("a", required=True), ParamSpec("p", type="int", position=1)],
        )
        result = parse(schema, make_request("GET", "/r/x"))
        assert [d.message for d in result.diagnostics] == [
            '"x" is not an integer (arg:p)',
            'missing "a"',
        ]

    def test_diagnostic_trace_captured(self) -> None:
        schema = compile_schema("/", [ParamSpec("a", required=True)])
        diag = parse(schema, make_request()).diagnostics[0]
        assert diag.trace
        assert any("_parse.py" in frame for frame in diag.trace)

    def test_diagnostics_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        schema = compile_schema("/", [ParamSpec("a", required=True)])
        with caplog.at_level(logging.DEBUG, logger="reqargs"):
            parse(schema, make_request())
        assert 'missing "a"' in caplog.text

    def test_schema_reused_across_requests(self) -> None:
        schema = compile_schema("/", [ParamSpec("n", type="int")])
        first = parse(schema, make_request(query={"n": "1"}))
        second = parse(schema, make_request(query={"n": "2"}))
        assert first.integer("n") == 1
        assert second.integer("n") == 2
