"""Middleware entries — validated and normalized at registration.

Accepted entries::

    timing                        a function or callable object -> FunctionMiddleware
    Authenticate                  a class with process() or __call__
    Authenticate()                an instance with process()
    (Authenticate, "handle")      a class or instance plus a method name

Classes are instantiated per dispatch: with no arguments when their
constructor needs none, else through the container.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from switchyard._internal.invoke import invoke
from switchyard.contracts import Container
from switchyard.errors import ConfigurationError
from switchyard.routing.handlers import instantiate
from switchyard.routing.signature import defines

_INVALID = (
    "Invalid route middleware {entry!r}: a middleware must be a callable, "
    "a class defining process() or __call__, an object with process(), "
    "or a (class, method) pair"
)


@dataclass(frozen=True, slots=True)
class FunctionMiddleware:
    """A callable invoked as ``fn(request, next)``."""

    fn: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class MethodMiddleware:
    """A class or instance plus the method invoked as ``method(request, next)``."""

    owner: Any
    method: str


type MiddlewareSpec = FunctionMiddleware | MethodMiddleware


def _invalid(entry: Any) -> ConfigurationError:
    return ConfigurationError(_INVALID.format(entry=entry))


def normalize_middleware(entry: Any) -> MiddlewareSpec:
    """Validate *entry* and collapse it into a ``MiddlewareSpec``."""
    if isinstance(entry, type):
        for method in ("process", "__call__"):
            if defines(entry, method):
                return MethodMiddleware(entry, method)
        raise _invalid(entry)
    if isinstance(entry, Sequence) and not isinstance(entry, str):
        if len(entry) != 2 or not isinstance(entry[1], str):
            raise _invalid(entry)
        owner, method = entry
        owner_class = owner if isinstance(owner, type) else type(owner)
        if not defines(owner_class, method):
            raise _invalid(entry)
        return MethodMiddleware(owner, method)
    if isinstance(entry, str):
        raise _invalid(entry)
    if callable(getattr(entry, "process", None)):
        return MethodMiddleware(entry, "process")
    if callable(entry):
        return FunctionMiddleware(entry)
    raise _invalid(entry)


async def call_middleware(
    spec: MiddlewareSpec,
    request: Any,
    next: Callable[..., Any],
    container: Container | None = None,
) -> Any:
    """Run one middleware and return whatever it produced."""
    if isinstance(spec, FunctionMiddleware):
        return await invoke(spec.fn, request, next)
    owner = spec.owner
    instance = instantiate(owner, container) if isinstance(owner, type) else owner
    return await invoke(getattr(instance, spec.method), request, next)
