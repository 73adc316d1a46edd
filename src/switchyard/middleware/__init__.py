"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

or an object exposing ``process(request, next)``. Entries are validated
when they are registered, and run in registration order per route.
"""

from switchyard.middleware.protocol import Middleware, Next, ProcessMiddleware
from switchyard.middleware.specs import (
    FunctionMiddleware,
    MethodMiddleware,
    MiddlewareSpec,
    call_middleware,
    normalize_middleware,
)

__all__ = [
    "FunctionMiddleware",
    "MethodMiddleware",
    "Middleware",
    "MiddlewareSpec",
    "Next",
    "ProcessMiddleware",
    "call_middleware",
    "normalize_middleware",
]
