"""CORS header injection.

Allows any origin, the verbs browsers use against argument-parsing
endpoints, and the usual request headers. Preflight (OPTIONS) requests
are answered by the middleware before any handler runs.
"""

from __future__ import annotations

from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

CORS_ALLOW_METHODS = ("DELETE", "POST", "GET", "OPTIONS")
CORS_ALLOW_HEADERS = (
    "Content-Type",
    "Access-Control-Allow-Headers",
    "Authorization",
    "X-Requested-With",
)


def cors_middleware() -> Middleware:
    """CORSMiddleware configured with the allow lists above."""
    return Middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=list(CORS_ALLOW_METHODS),
        allow_headers=list(CORS_ALLOW_HEADERS),
    )
