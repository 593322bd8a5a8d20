"""Usage/error document rendering.

One code path produces both views of a schema: the help document (no
diagnostics) and the error document (with an ``err`` list). Field names
are stable: ``for``, ``uri``, ``arg``, ``err``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from reqargs._methods import format_methods
from reqargs._schema import ParamSpec
from reqargs._types import ParamType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reqargs._schema import Param, Schema
    from reqargs._types import Diagnostic


class UsageError(Exception):
    """Carries a rendered error document; str() is its JSON."""

    def __init__(self, doc: dict[str, Any]) -> None:
        self.doc = doc
        super().__init__(render_json(doc))

    @property
    def messages(self) -> list[str]:
        return list(self.doc.get("err", []))


def _stub(param: Param) -> str:
    return f"<{param.name}>" if param.required else f"[{param.name}]"


def usage_uri(schema: Schema) -> str:
    """Canonical usage string: route, positional stubs, then named stubs."""
    uri = "/".join([schema.route, *(_stub(p) for p in schema.positional)]) or "/"
    if schema.named:
        uri += "?" + "&".join(_stub(p) for p in schema.named)
    return uri


def describe(param: Param) -> dict[str, Any]:
    """Descriptor of one parameter for the ``arg`` list."""
    d: dict[str, Any] = {
        "name": param.name,
        "type": param.type.value,
        "required": param.required,
    }
    if not param.required:
        d["default"] = param.default
    if param.methods is not None:
        d["methods"] = format_methods(param.methods)
    if param.validator is not None and param.type is not ParamType.BOOL:
        check = param.validator(None)
        if check:
            d["check"] = check
    d["memo"] = param.memo
    return d


def render(schema: Schema, diagnostics: Iterable[Diagnostic] = ()) -> dict[str, Any]:
    """Build the usage document; ``err`` is present only with diagnostics."""
    doc: dict[str, Any] = {
        "for": schema.purpose,
        "uri": usage_uri(schema),
        "arg": [describe(p) for p in schema.params()],
    }
    errs = [d.message for d in diagnostics]
    if errs:
        doc["err"] = errs
    return doc


def render_json(doc: dict[str, Any]) -> str:
    """Serialize a document the way it is served: indented, non-ASCII kept."""
    return json.dumps(doc, indent=4, ensure_ascii=False)


def specs_from_usage(doc: dict[str, Any]) -> list[ParamSpec]:
    """Rebuild declarations from a rendered usage document.

    Names, types, required flags, defaults, method restrictions and memos
    come from ``arg``; positions are recovered from the stubs in ``uri``.
    Validators cannot be recovered and are left unset.
    """
    positions: dict[str, int] = {}
    path = str(doc.get("uri", "")).partition("?")[0]
    stubs = [s for s in path.split("/") if s[:1] in ("<", "[") and s[-1:] in (">", "]")]
    for i, stub in enumerate(stubs, start=1):
        positions[stub[1:-1]] = i

    specs: list[ParamSpec] = []
    if doc.get("for"):
        specs.append(ParamSpec("", memo=str(doc["for"])))
    for entry in doc.get("arg", []):
        name = entry["name"]
        specs.append(
            ParamSpec(
                name=name,
                type=entry.get("type", ""),
                default=entry.get("default"),
                required=bool(entry.get("required", False)),
                position=positions.get(name, 0),
                methods=entry.get("methods", ""),
                memo=entry.get("memo", ""),
            )
        )
    return specs
