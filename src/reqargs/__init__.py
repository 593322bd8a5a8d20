"""reqargs — HTTP request-argument resolution and validation.

A schema of expected parameters is compiled once; each request is then
resolved against it into typed values or a structured error document.

All public types are exported from this module for flat imports:

    from reqargs import ParamSpec, compile_schema, parse, HttpRequest

The Starlette adapter lives in ``reqargs.asgi`` (install the ``asgi`` extra).
"""

__version__ = "0.1.0"

# Checks
from reqargs._checks import LengthCheck, OneOfCheck, RangeCheck, RegexCheck

# Config types (dict → SchemaConfig)
from reqargs._config import (
    ConfigParseError,
    ParamConfig,
    SchemaConfig,
    TypedConfig,
    parse_schema_config,
)

# Schema errors
from reqargs._errors import (
    DuplicateNameError,
    DuplicatePositionError,
    InvalidCheckError,
    InvalidDefaultError,
    InvalidMethodError,
    InvalidTypeError,
    PositionError,
    PurposeSlotError,
    SchemaError,
)

# Extraction
from reqargs._extract import (
    BODY_METHODS,
    MAX_MULTIPART_SIZE,
    ExtractedValues,
    ExtractionError,
    extract,
    route_suffix,
)

# Methods
from reqargs._methods import (
    HttpMethod,
    allows,
    format_methods,
    method_value,
    parse_methods,
)

# Engine
from reqargs._parse import (
    INT64_MAX,
    INT64_MIN,
    parse,
    parse_bool,
    parse_float,
    parse_int,
    positional_args,
)

# Registry (SchemaConfig → Schema)
from reqargs._registry import (
    CheckFactory,
    InvalidConfigError,
    Registry,
    RegistryBuilder,
    UnknownTypeUrlError,
    register_core_checks,
)

# Rendering
from reqargs._render import (
    UsageError,
    describe,
    render,
    render_json,
    specs_from_usage,
    usage_uri,
)
from reqargs._request import HttpRequest
from reqargs._result import ParamTypeMismatchError, Result
from reqargs._schema import Param, ParamSpec, Schema, compile_schema

# Values
from reqargs._types import (
    BoolList,
    Diagnostic,
    FloatList,
    IntList,
    ParamType,
    StringList,
    Validator,
    ValueList,
    value_list_type,
)

__all__ = [
    # Request
    "HttpRequest",
    "HttpMethod",
    "method_value",
    "parse_methods",
    "allows",
    "format_methods",
    # Values
    "ParamType",
    "StringList",
    "IntList",
    "FloatList",
    "BoolList",
    "ValueList",
    "value_list_type",
    "Validator",
    "Diagnostic",
    # Schema
    "ParamSpec",
    "Param",
    "Schema",
    "compile_schema",
    "SchemaError",
    "DuplicateNameError",
    "InvalidTypeError",
    "InvalidDefaultError",
    "PositionError",
    "DuplicatePositionError",
    "InvalidMethodError",
    "PurposeSlotError",
    "InvalidCheckError",
    # Extraction
    "extract",
    "route_suffix",
    "ExtractedValues",
    "ExtractionError",
    "BODY_METHODS",
    "MAX_MULTIPART_SIZE",
    # Engine
    "parse",
    "parse_int",
    "parse_float",
    "parse_bool",
    "positional_args",
    "INT64_MIN",
    "INT64_MAX",
    "Result",
    "ParamTypeMismatchError",
    # Rendering
    "render",
    "render_json",
    "usage_uri",
    "describe",
    "specs_from_usage",
    "UsageError",
    # Checks
    "RegexCheck",
    "OneOfCheck",
    "RangeCheck",
    "LengthCheck",
    # Config types
    "TypedConfig",
    "ParamConfig",
    "SchemaConfig",
    "ConfigParseError",
    "parse_schema_config",
    # Registry
    "CheckFactory",
    "RegistryBuilder",
    "Registry",
    "register_core_checks",
    "UnknownTypeUrlError",
    "InvalidConfigError",
]
