"""Handler registry — compiled schemas bound to processors, as routes.

The registry is an explicit object owned by the composition root:
built once at start-up, read-only afterwards. Nothing is registered
globally.

    registry = (
        HandlerRegistryBuilder()
        .handle(users_schema, list_users)
        .handle(health_schema)          # answers 501 until implemented
        .build()
    )
    app = registry.app(cors=True)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.routing import Route

from reqargs._errors import SchemaError
from reqargs._methods import HttpMethod
from reqargs.asgi._cors import cors_middleware
from reqargs.asgi._handler import Handler, not_implemented

if TYPE_CHECKING:
    from reqargs._schema import Schema
    from reqargs.asgi._handler import RequestProc

# Starlette limits function endpoints to GET unless told otherwise;
# method masks are enforced per parameter instead.
_ALL_METHODS = [m.name for m in HttpMethod if m.name]


class RouteConflictError(SchemaError):
    """Two schemas were registered for the same route."""

    def __init__(self, route: str) -> None:
        self.route = route
        super().__init__(f"route {route!r} registered twice")


class HandlerRegistryBuilder:
    """Collects handlers, then freezes them into a HandlerRegistry."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def handle(
        self, schema: Schema, proc: RequestProc = not_implemented
    ) -> HandlerRegistryBuilder:
        """Bind ``proc`` to ``schema.route``.

        Raises:
            RouteConflictError: If the route already has a handler.
        """
        route = schema.route or "/"
        if route in self._handlers:
            raise RouteConflictError(route)
        self._handlers[route] = Handler(schema=schema, proc=proc)
        return self

    def build(self) -> HandlerRegistry:
        """Freeze the registry. No further registration is possible."""
        return HandlerRegistry(_handlers=MappingProxyType(dict(self._handlers)))


@dataclass(frozen=True, slots=True)
class HandlerRegistry:
    """Immutable route → Handler table."""

    _handlers: MappingProxyType[str, Handler] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __len__(self) -> int:
        return len(self._handlers)

    def handler(self, route: str) -> Handler | None:
        """Look up the handler registered for a route."""
        return self._handlers.get(route.rstrip("/") or "/")

    def route_list(self) -> list[str]:
        """Registered routes, sorted."""
        return sorted(self._handlers)

    def routes(self) -> list[Route]:
        """Starlette routes: each route itself plus everything beneath it.

        Starlette takes the first match, so deeper routes come first and
        the root route comes last.
        """
        out: list[Route] = []
        order = sorted(self._handlers, key=lambda r: (r == "/", -r.count("/"), r))
        for route in order:
            endpoint = self._handlers[route].endpoint
            base = "" if route == "/" else route
            out.append(Route(route, endpoint, methods=_ALL_METHODS))
            out.append(Route(f"{base}/{{rest:path}}", endpoint, methods=_ALL_METHODS))
        return out

    def app(self, *, cors: bool = False, debug: bool = False) -> Starlette:
        """A Starlette application serving every registered handler."""
        middleware = [cors_middleware()] if cors else None
        return Starlette(debug=debug, routes=self.routes(), middleware=middleware)
