"""Route registry and dispatch entry point.

Routes are registered during setup, bucketed by HTTP method in
registration order, and indexed by name. Registration order is the only
tie-break: the first route in a method's bucket that accepts the path
wins.

Group prefixes and middleware apply through a registration scope. Each
``group()`` / ``middleware()`` call swaps in a derived scope for the
duration of its callback and restores the previous one afterwards, even
if the callback raises. Routes copy what the scope holds when they are
added, so later scope changes never reach them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import StrEnum
from functools import partial
from typing import Any

import anyio

from switchyard.config import RouterConfig
from switchyard.contracts import Container, accepts_route_arguments, missing_route_members
from switchyard.errors import ConfigurationError, MissingRoute, NoMatch, Unauthorized
from switchyard.http.request import Request
from switchyard.middleware.specs import normalize_middleware
from switchyard.routing.route import Route

logger = logging.getLogger("switchyard.routing")

_MODULE_PATH = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")


class RouteMethod(StrEnum):
    """HTTP methods with a dedicated registration helper."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True, slots=True)
class RegistrationScope:
    """Prefix and middleware active while routes are being added."""

    prefix: str = ""
    middlewares: tuple[Any, ...] = ()

    def nested(self, prefix: str = "", middlewares: Iterable[Any] = ()) -> RegistrationScope:
        """Return a child scope with *prefix* appended and new *middlewares* added."""
        combined = list(self.middlewares)
        for entry in middlewares:
            if entry not in combined:
                combined.append(entry)
        return replace(self, prefix=self.prefix + prefix, middlewares=tuple(combined))


type Registrar = Callable[[Router], Any]


class Router:
    """Registry of routes with grouped registration and async dispatch.

    Usage::

        router = Router()
        router.get("/", home, "home")

        def admin(r: Router) -> None:
            r.get("/posts/{id:\\d+}", "PostController@edit", "admin.post.edit")

        router.middleware(RequireLogin, lambda r: r.group("/admin", admin))

        response = await router.run(Request.build("GET", "/admin/posts/3"))
        router.generate_uri("admin.post.edit", {"id": 3})   # "/admin/posts/3"
    """

    __slots__ = (
        "_config",
        "_container",
        "_controller_namespace",
        "_names",
        "_route_class",
        "_routes",
        "_scope",
    )

    def __init__(
        self,
        container: Container | None = None,
        *,
        config: RouterConfig | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        self._container = container
        self._controller_namespace: str | None = None
        self._routes: dict[str, list[Route]] = {}
        self._names: dict[str, Route] = {}
        self._route_class: type = Route
        self._scope = RegistrationScope()
        if self._config.controller_namespace is not None:
            self.set_controller_namespace(self._config.controller_namespace)

    # -- Registration --

    def add(self, method: str, path: str, callback: Any, name: str | None = None) -> Route:
        """Register *callback* for *method* at *path* under the active scope."""
        if name is None:
            name = callback if isinstance(callback, str) else path
        config = replace(self._config, controller_namespace=self._controller_namespace)
        route = self._route_class(self._scope.prefix + path, callback, name, config=config)
        route.set_middlewares(self._scope.middlewares)
        self.add_route(method, route)
        return route

    def add_route(self, method: str, route: Route) -> Router:
        """File a pre-built route. A route with a taken name replaces it in the name index."""
        method = method.upper()
        previous = self._names.get(route.name)
        if previous is not None and previous is not route:
            logger.debug("Route name %r now refers to %s %r", route.name, method, route.path)
        self._names[route.name] = route
        self._routes.setdefault(method, []).append(route)
        logger.debug("Registered %s %r as %r", method, route.path, route.name)
        return self

    def get(self, path: str, callback: Any, name: str | None = None) -> Route:
        """Register a GET route.

        *callback* is a callable, a controller class, ``"Controller@action"``
        (or ``"Controller#action"``), a ``(Controller, "action")`` pair, or
        ``{"controller": Controller, "action": "action"}``.
        """
        return self.add(RouteMethod.GET, path, callback, name)

    def post(self, path: str, callback: Any, name: str | None = None) -> Route:
        """Register a POST route. See ``get()`` for the accepted callbacks."""
        return self.add(RouteMethod.POST, path, callback, name)

    def put(self, path: str, callback: Any, name: str | None = None) -> Route:
        """Register a PUT route. See ``get()`` for the accepted callbacks."""
        return self.add(RouteMethod.PUT, path, callback, name)

    def patch(self, path: str, callback: Any, name: str | None = None) -> Route:
        """Register a PATCH route. See ``get()`` for the accepted callbacks."""
        return self.add(RouteMethod.PATCH, path, callback, name)

    def delete(self, path: str, callback: Any, name: str | None = None) -> Route:
        """Register a DELETE route. See ``get()`` for the accepted callbacks."""
        return self.add(RouteMethod.DELETE, path, callback, name)

    def head(self, path: str, callback: Any, name: str | None = None) -> Route:
        """Register a HEAD route. See ``get()`` for the accepted callbacks."""
        return self.add(RouteMethod.HEAD, path, callback, name)

    def options(self, path: str, callback: Any, name: str | None = None) -> Route:
        """Register an OPTIONS route. See ``get()`` for the accepted callbacks."""
        return self.add(RouteMethod.OPTIONS, path, callback, name)

    def any(
        self,
        method: RouteMethod | str,
        path: str,
        callback: Any,
        name: str | None = None,
    ) -> Route:
        """Register a route for any HTTP *method*."""
        return self.add(str(method), path, callback, name)

    # -- Scoping --

    @contextmanager
    def _scoped(self, scope: RegistrationScope) -> Iterator[None]:
        previous = self._scope
        self._scope = scope
        try:
            yield
        finally:
            self._scope = previous

    def group(self, prefix: str, fn: Registrar) -> Router:
        """Prefix every route *fn* registers with *prefix*."""
        with self._scoped(self._scope.nested(prefix=prefix)):
            fn(self)
        return self

    def middleware(self, entry: Any, fn: Registrar) -> Router:
        """Apply middleware *entry* to every route *fn* registers."""
        return self.middlewares([entry], fn)

    def middlewares(self, entries: Iterable[Any], fn: Registrar) -> Router:
        """Apply middleware *entries*, in order, to every route *fn* registers.

        Entries already active in an enclosing scope are not added twice.
        """
        entries = list(entries)
        for entry in entries:
            normalize_middleware(entry)
        with self._scoped(self._scope.nested(middlewares=entries)):
            fn(self)
        return self

    # -- Configuration --

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def controller_namespace(self) -> str | None:
        return self._controller_namespace

    def set_controller_namespace(self, namespace: str) -> Router:
        """Set the dotted module path string controller names are imported from."""
        if not _MODULE_PATH.match(namespace):
            msg = f"Invalid controller namespace {namespace!r}: expected a dotted module path"
            raise ConfigurationError(msg)
        self._controller_namespace = namespace
        return self

    @property
    def route_class(self) -> type:
        return self._route_class

    def set_route_class(self, route_class: type) -> Router:
        """Use *route_class* to build routes added from now on."""
        if not isinstance(route_class, type):
            msg = f"Route class must be a class, got {route_class!r}"
            raise ConfigurationError(msg)
        missing = missing_route_members(route_class)
        if missing:
            msg = f"Route class {route_class.__qualname__!r} is missing {', '.join(missing)}"
            raise ConfigurationError(msg)
        if not accepts_route_arguments(route_class):
            msg = (
                f"Route class {route_class.__qualname__!r} must accept "
                "(path, callback, name, *, config)"
            )
            raise ConfigurationError(msg)
        self._route_class = route_class
        return self

    @property
    def container(self) -> Container | None:
        return self._container

    def set_container(self, container: Container | None) -> Router:
        """Set the container dispatch resolves dependencies from."""
        self._container = container
        return self

    # -- Introspection --

    def get_route(self, name: str) -> Route | None:
        return self._names.get(name)

    @property
    def routes(self) -> dict[str, list[Route]]:
        """Registered routes grouped by method, in registration order."""
        return {method: list(bucket) for method, bucket in self._routes.items()}

    def generate_uri(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        fragment: str | None = None,
    ) -> str:
        """Build the URI of the route named *name*."""
        route = self._names.get(name)
        if route is None:
            raise MissingRoute(name)
        return route.generate_uri(params, fragment)

    # -- Dispatch --

    def _match(self, request: Request) -> tuple[Route, dict[str, str]] | None:
        for route in self._routes.get(request.method.upper(), ()):
            attributes = route.match(request.path)
            if attributes is not None:
                return route, attributes
        return None

    async def resolve(self, request: Request, throw_on_failure: bool = True) -> Route | None:
        """Return the route matching *request* if its policy allows it.

        With ``throw_on_failure=False``, a request that matches nothing or
        is denied returns ``None`` instead of raising ``NoMatch`` or
        ``Unauthorized``. Every other error still raises.
        """
        found = self._match(request)
        if found is None:
            logger.debug("No route for %s %s", request.method, request.path)
            if throw_on_failure:
                raise NoMatch(request.method, request.path)
            return None

        route, attributes = found
        route.resolve(request.path)
        context = route.context(request, attributes, container=self._container)
        if await context.authorize():
            return route
        if throw_on_failure:
            raise Unauthorized(route.name, method=request.method, path=request.path)
        return None

    async def run(self, request: Request) -> Any:
        """Match *request* and dispatch it. Always raises on no match or denial."""
        found = self._match(request)
        if found is None:
            logger.debug("No route for %s %s", request.method, request.path)
            raise NoMatch(request.method, request.path)
        route, attributes = found
        logger.debug("Dispatching %s %s to %r", request.method, request.path, route.name)
        return await route.run(request, attributes, container=self._container)

    # -- Blocking entry points --

    def resolve_sync(self, request: Request, throw_on_failure: bool = True) -> Route | None:
        """``resolve()`` for callers without a running event loop."""
        return anyio.run(partial(self.resolve, request, throw_on_failure))

    def run_sync(self, request: Request) -> Any:
        """``run()`` for callers without a running event loop."""
        return anyio.run(self.run, request)
