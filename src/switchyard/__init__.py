"""Switchyard — request routing with policies, middleware, and parameter binding.

Matches a request's method and path to a registered handler, then
dispatches through a policy gate, the route's middleware, and parameter
binding before invoking the handler.

Basic usage::

    from switchyard import Request, Router

    router = Router()

    def show(id: int, slug: str) -> dict:
        return {"id": id, "slug": slug}

    router.get("/post/{id:\\d+}-{slug:[a-z]+}", show, "post.show")

    response = await router.run(Request.build("GET", "/post/1-hello"))
    router.generate_uri("post.show", {"id": 1, "slug": "hello"})  # "/post/1-hello"
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Container",
    "MissingContainer",
    "MissingRoute",
    "NoMatch",
    "Policy",
    "PolicyError",
    "Redirect",
    "Request",
    "Response",
    "Route",
    "RouteContext",
    "RouteMethod",
    "Router",
    "RouterConfig",
    "SwitchyardError",
    "TargetNotFound",
    "Unauthorized",
    "UnresolvableParameter",
    "UriParameterError",
]

_ERRORS = frozenset(
    {
        "ConfigurationError",
        "MissingContainer",
        "MissingRoute",
        "NoMatch",
        "PolicyError",
        "SwitchyardError",
        "TargetNotFound",
        "Unauthorized",
        "UnresolvableParameter",
        "UriParameterError",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name in ("Router", "RouteMethod"):
        from switchyard.routing import router as _router

        return getattr(_router, name)

    if name in ("Route", "RouteContext"):
        from switchyard.routing import route as _route

        return getattr(_route, name)

    if name == "Policy":
        from switchyard.routing.policy import Policy

        return Policy

    if name == "RouterConfig":
        from switchyard.config import RouterConfig

        return RouterConfig

    if name == "Container":
        from switchyard.contracts import Container

        return Container

    if name in ("Request", "Response", "Redirect"):
        from switchyard import http as _http

        return getattr(_http, name)

    if name in _ERRORS:
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
