"""Route definitions and per-dispatch route contexts.

A ``Route`` is configured during setup and not modified by dispatch,
apart from ``attributes``, which records the last ``resolve()`` for
introspection. Every ``run()`` creates a fresh ``RouteContext`` holding
that dispatch's attributes, bound request, and middleware cursor, so one
route can serve concurrent requests.

Dispatch order, short-circuiting on the first failure::

    bind request -> policy -> middleware -> target -> parameters -> invoke -> response
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from switchyard._internal.invoke import invoke
from switchyard.config import RouterConfig
from switchyard.contracts import Container
from switchyard.errors import Unauthorized
from switchyard.http.request import Request
from switchyard.middleware.specs import MiddlewareSpec, call_middleware, normalize_middleware
from switchyard.routing.handlers import (
    HandlerTarget,
    InlineFunction,
    bind_action,
    instantiate,
    load_controller,
    normalize_handler,
)
from switchyard.routing.negotiation import negotiate
from switchyard.routing.policy import PolicySpec, evaluate_policy, normalize_policy
from switchyard.routing.resolver import ParameterResolver
from switchyard.routing.signature import HandlerSignature
from switchyard.routing.template import PathTemplate

logger = logging.getLogger("switchyard.routing")


class Route:
    """One path template bound to a handler, with its own policy and middleware.

    Usage::

        route = Route("/post/{id:\\d+}-{slug:[a-z]+}", show_post, "post.show")
        route.set_policy(CanViewPosts)
        if route.resolve("/post/1-hello"):
            response = await route.run(request)
    """

    __slots__ = (
        "_container",
        "_handler",
        "_inline_signature",
        "_middlewares",
        "_pipeline",
        "_policy",
        "_template",
        "attributes",
        "callback",
        "controller_namespace",
        "name",
        "redirect_statuses",
        "response_class",
        "route_attribute",
    )

    def __init__(
        self,
        path: str,
        callback: Any,
        name: str | None = None,
        *,
        config: RouterConfig | None = None,
    ) -> None:
        config = config or RouterConfig()
        self._template = PathTemplate(
            path,
            default_pattern=config.default_pattern,
            case_sensitive=config.case_sensitive,
        )
        self.name: str = name if name is not None else path
        self.callback = callback
        self._handler: HandlerTarget = normalize_handler(callback, self.name)
        self._inline_signature: HandlerSignature | None = None
        self._middlewares: tuple[Any, ...] = ()
        self._pipeline: tuple[MiddlewareSpec, ...] = ()
        self._policy: PolicySpec = True
        self._container: Container | None = None
        self.attributes: dict[str, str] = {}
        self.controller_namespace = config.controller_namespace
        self.redirect_statuses = config.redirect_statuses
        self.route_attribute = config.route_attribute
        self.response_class: type = config.response_class

    def __repr__(self) -> str:
        return f"Route({self.path!r}, name={self.name!r})"

    # -- Template --

    @property
    def path(self) -> str:
        """The slash-trimmed path template."""
        return self._template.path

    @property
    def template(self) -> PathTemplate:
        return self._template

    @property
    def handler(self) -> HandlerTarget:
        """The normalized handler spec."""
        return self._handler

    def where(self, name: str, regex: str) -> Route:
        """Bind path parameter *name* to *regex*. Returns the route for chaining."""
        self._template.bind(name, regex)
        return self

    def match(self, url: str) -> dict[str, str] | None:
        """Return the attributes *url* yields, or ``None``. Never dispatches."""
        return self._template.match(url)

    def resolve(self, url: str) -> bool:
        """Match *url* and record the attributes on the route."""
        matched = self._template.match(url)
        if matched is None:
            return False
        self.attributes = matched
        return True

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def generate_uri(
        self,
        params: Mapping[str, Any] | None = None,
        fragment: str | None = None,
    ) -> str:
        """Build a concrete URI for this route. See ``PathTemplate.generate``."""
        return self._template.generate(params, fragment)

    # -- Configuration --

    @property
    def policy(self) -> PolicySpec:
        return self._policy

    def set_policy(self, policy: Any) -> Route:
        """Set the route policy. See ``switchyard.routing.policy``."""
        self._policy = normalize_policy(policy)
        return self

    @property
    def middlewares(self) -> tuple[Any, ...]:
        """Middleware entries as registered, in run order."""
        return self._middlewares

    @property
    def pipeline(self) -> tuple[MiddlewareSpec, ...]:
        return self._pipeline

    def has_middleware(self, entry: Any) -> bool:
        return entry in self._middlewares

    def set_middlewares(self, entries: Iterable[Any]) -> Route:
        """Append middleware entries, skipping ones already present."""
        for entry in entries:
            spec = normalize_middleware(entry)
            if self.has_middleware(entry):
                continue
            self._middlewares = (*self._middlewares, entry)
            self._pipeline = (*self._pipeline, spec)
        return self

    def set_controller_namespace(self, namespace: str | None) -> Route:
        self.controller_namespace = namespace
        return self

    @property
    def container(self) -> Container | None:
        return self._container

    def set_container(self, container: Container | None) -> Route:
        self._container = container
        return self

    def set_response_class(self, response_class: type) -> Route:
        self.response_class = response_class
        return self

    # -- Dispatch --

    def context(
        self,
        request: Request,
        attributes: Mapping[str, str] | None = None,
        *,
        container: Container | None = None,
    ) -> RouteContext:
        """Bind *request* to a fresh dispatch context.

        *attributes* defaults to the ones recorded by the last ``resolve()``.
        A container set on the route takes precedence over *container*.
        """
        return RouteContext(
            self,
            request,
            self.attributes if attributes is None else attributes,
            self._container if self._container is not None else container,
        )

    async def run(
        self,
        request: Request,
        attributes: Mapping[str, str] | None = None,
        *,
        container: Container | None = None,
    ) -> Any:
        """Dispatch *request* through policy, middleware, and handler."""
        return await self.context(request, attributes, container=container).dispatch()

    def handler_signature(self, target: Any, owner: type | None = None) -> HandlerSignature:
        """Signature of the dispatch target; cached for inline functions."""
        if owner is not None:
            return HandlerSignature.of(target, owner=owner)
        if self._inline_signature is None:
            self._inline_signature = HandlerSignature.of(target)
        return self._inline_signature


class RouteContext:
    """The state of one dispatch through a route.

    Attached to the request under the route attribute key and passed to
    middleware as ``next``: calling it advances the pipeline.
    """

    __slots__ = ("_cursor", "_handled", "attributes", "container", "request", "route")

    def __init__(
        self,
        route: Route,
        request: Request,
        attributes: Mapping[str, str],
        container: Container | None,
    ) -> None:
        self.route = route
        self.attributes = dict(attributes)
        self.container = container
        self._cursor = 0
        self._handled: Any = None
        self.request = request.with_attributes(self.attributes).with_attribute(
            route.route_attribute, self
        )

    def __repr__(self) -> str:
        return f"RouteContext({self.route.name!r}, attributes={self.attributes!r})"

    @property
    def name(self) -> str:
        return self.route.name

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def _resolver(self) -> ParameterResolver:
        return ParameterResolver(self.request, self.attributes, self.container)

    async def authorize(self) -> bool:
        """Evaluate the route policy for this dispatch."""
        return await evaluate_policy(
            self.route.policy,
            self._resolver(),
            route_name=self.route.name,
            container=self.container,
        )

    async def dispatch(self) -> Any:
        route = self.route
        if not await self.authorize():
            raise Unauthorized(route.name, method=self.request.method, path=self.request.path)

        if route.pipeline:
            response = await self(self.request)
            if getattr(response, "status", None) in route.redirect_statuses:
                logger.debug("Middleware redirected route %r", route.name)
                return response
            if self._handled is not None:
                return response

        return await self.handle()

    async def __call__(self, request: Request) -> Any:
        """Run the next middleware, or the handler once none are left."""
        self.request = request
        pipeline = self.route.pipeline
        if self._cursor >= len(pipeline):
            if self._handled is None:
                self._handled = await self.handle()
            return self._handled
        spec = pipeline[self._cursor]
        self._cursor += 1
        result = await call_middleware(spec, request, self, self.container)
        return await negotiate(result, response_class=self.route.response_class)

    async def handle(self) -> Any:
        """Resolve the target and its parameters, invoke it, normalize the result."""
        route = self.route
        target, owner = self._target()
        signature = route.handler_signature(target, owner)
        kwargs = self._resolver().resolve(signature)
        result = await invoke(target, **kwargs)
        return await negotiate(result, response_class=route.response_class)

    def _target(self) -> tuple[Any, type | None]:
        handler = self.route.handler
        if isinstance(handler, InlineFunction):
            return handler.fn, None
        cls = load_controller(handler.controller, self.route.controller_namespace)
        instance = instantiate(cls, self.container)
        return bind_action(instance, handler.action), cls
