"""Handler — binds a compiled Schema to a request processor.

The handler parses every request against its schema before the processor
runs. Help requests and invalid requests are answered with the usage
document; only a valid request reaches the processor.

A processor is any async callable ``(result, request) -> Response``.
``not_implemented`` is the default processor and answers 501.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from starlette.responses import PlainTextResponse, Response

from reqargs._parse import parse
from reqargs._render import render_json
from reqargs.asgi._request import from_starlette

if TYPE_CHECKING:
    from starlette.requests import Request

    from reqargs._result import Result
    from reqargs._schema import Schema

logger = logging.getLogger(__name__)


class RequestProc(Protocol):
    """Processes a request whose arguments satisfied the schema."""

    async def __call__(self, result: Result, request: Request, /) -> Response: ...


async def not_implemented(result: Result, request: Request, /) -> Response:
    """Default processor: 501 Not Implemented."""
    return PlainTextResponse("Not Implemented", status_code=501)


def usage_response(doc: dict[str, Any], status_code: int = 200) -> Response:
    """Serve a usage/error document as indented JSON."""
    return Response(render_json(doc), status_code=status_code, media_type="application/json")


@dataclass(frozen=True, slots=True)
class Handler:
    """A schema plus the processor that consumes its Result."""

    schema: Schema
    proc: RequestProc = not_implemented

    async def endpoint(self, request: Request) -> Response:
        """Starlette endpoint: parse, then answer help, errors or delegate."""
        result = parse(self.schema, await from_starlette(request))
        if result.wants_help():
            return usage_response(result.usage())
        if not result.ok:
            return usage_response(result.usage(), status_code=400)
        try:
            return await self.proc(result, request)
        except Exception:
            logger.exception("processor for %s failed", self.schema.route or "/")
            raise
