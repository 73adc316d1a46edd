"""Switchyard exception hierarchy.

Shared across Router, Route, resolver, and middleware so every module
raises and catches the same types. Nothing in the core swallows these:
they propagate out of ``resolve()``, ``run()``, and ``generate_uri()``
and the caller decides how to present them.
"""

from typing import Any


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when route or router configuration is invalid.

    Covers bad controller namespaces, route classes that do not satisfy
    the route contract, invalid middleware entries, empty handler specs,
    policies missing the required capability, and handler parameters
    declared without a type annotation.
    """


class RoutingError(SwitchyardError):
    """Base for the two dispatch outcomes ``resolve()`` can soften."""

    def __init__(self, message: str, *, method: str = "", path: str = "") -> None:
        super().__init__(message)
        self.method = method
        self.path = path


class NoMatch(RoutingError):  # noqa: N818
    """No registered route accepts the request method and path."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"No matching route for {method} {path!r}", method=method, path=path)


class Unauthorized(RoutingError):  # noqa: N818
    """The matched route's policy denied the request."""

    def __init__(self, route_name: str, *, method: str = "", path: str = "") -> None:
        super().__init__(f"Unauthorized route {route_name!r}", method=method, path=path)
        self.route_name = route_name


class MissingContainer(SwitchyardError):
    """A dependency had to come from the container but none is configured."""

    def __init__(self, dependency: str | None = None) -> None:
        what = f"injection dependency {dependency!r}" if dependency else "injection dependencies"
        super().__init__(
            f"Missing router container: {what} can not be resolved without a container"
        )
        self.dependency = dependency


class UnresolvableParameter(SwitchyardError):
    """No source could supply a value for a handler or policy parameter."""

    def __init__(self, parameter: str, target: str, owner: str | None = None) -> None:
        where = f"{owner}.{target}" if owner else target
        super().__init__(f"Can not resolve argument {parameter!r} passed to {where!r}")
        self.parameter = parameter
        self.target = target
        self.owner = owner


class MissingRoute(SwitchyardError):
    """No route is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Can not generate a URI: no route named {name!r}")
        self.name = name


class UriParameterError(SwitchyardError):
    """A URI-generation value is missing or does not match its bound regex."""

    def __init__(
        self,
        parameter: str,
        *,
        value: Any = None,
        pattern: str | None = None,
    ) -> None:
        if pattern is None:
            msg = f"Missing route parameter {parameter!r}"
        else:
            msg = (
                f"Parameter value {value!r} of route parameter {parameter!r} "
                f"does not match required regex {pattern!r}"
            )
        super().__init__(msg)
        self.parameter = parameter
        self.value = value
        self.pattern = pattern


class TargetNotFound(SwitchyardError):  # noqa: N818
    """A controller class or its action method does not exist."""


class PolicyError(SwitchyardError):
    """A policy could not be instantiated, resolved, or invoked.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, route_name: str, detail: str) -> None:
        super().__init__(f"Policy for route {route_name!r} failed: {detail}")
        self.route_name = route_name
