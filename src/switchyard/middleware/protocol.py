"""Middleware protocols and the Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Any: ...

or any object (or class) exposing ``process(request, next)``. No base
class required. The router checks the shape, not the lineage.

``next`` is the active route context: calling it runs the next
middleware, or the route handler once the pipeline is exhausted. Its
``route``, ``name`` and ``attributes`` describe the matched route.
Return values that aren't responses are converted the same way handler
results are.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from switchyard.http.request import Request
from switchyard.http.response import Response

# The next step in the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for callable middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware, instantiated per dispatch
        class RequireLogin:
            def __call__(self, request: Request, next: Next) -> Any:
                if request.get_attribute("user") is None:
                    return Redirect("/login")
                return next(request)
    """

    def __call__(self, request: Request, next: Next) -> Any: ...


@runtime_checkable
class ProcessMiddleware(Protocol):
    """Protocol for middleware exposing a ``process`` entry point."""

    def process(self, request: Request, next: Next) -> Any: ...
