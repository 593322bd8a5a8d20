"""reqargs.asgi — Starlette integration.

    from reqargs.asgi import HandlerRegistryBuilder

Requires the ``asgi`` extra (starlette).
"""

from reqargs.asgi._cors import CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS, cors_middleware
from reqargs.asgi._handler import Handler, RequestProc, not_implemented, usage_response
from reqargs.asgi._registry import HandlerRegistry, HandlerRegistryBuilder, RouteConflictError
from reqargs.asgi._request import from_starlette

__all__ = [
    "from_starlette",
    "RequestProc",
    "not_implemented",
    "usage_response",
    "Handler",
    "HandlerRegistryBuilder",
    "HandlerRegistry",
    "RouteConflictError",
    "cors_middleware",
    "CORS_ALLOW_METHODS",
    "CORS_ALLOW_HEADERS",
]
