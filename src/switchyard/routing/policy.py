"""Route policies — the boolean gate evaluated before dispatch.

A policy is normalized when it is set on a route::

    True / False                   -> the literal
    lambda name: name == "john"    -> Predicate
    CanEditPost                    -> BoundMethod(CanEditPost, "__call__")
    (CanEditPost, "check")         -> BoundMethod(CanEditPost, "check")

Class policies must subclass ``Policy``. Their parameters, like a
predicate's, are resolved exactly as handler parameters are.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from switchyard._internal.invoke import invoke
from switchyard.contracts import Container
from switchyard.errors import ConfigurationError, PolicyError, SwitchyardError
from switchyard.routing.resolver import ParameterResolver
from switchyard.routing.signature import HandlerSignature, defines

logger = logging.getLogger("switchyard.routing")


class Policy:
    """Base class for class-based policies.

    Subclasses expose one or more methods returning a truthy value to
    allow the request::

        class OwnsPost(Policy):
            def __call__(self, request: Request, id: int) -> bool:
                return request.get_attribute("user_id") == id
    """


@dataclass(frozen=True, slots=True)
class Predicate:
    """A callable policy."""

    fn: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class BoundMethod:
    """A ``Policy`` subclass plus the method to call on an instance."""

    cls: type[Policy]
    method: str = "__call__"


type PolicySpec = bool | Predicate | BoundMethod


def _bound_method(cls: Any, method: Any) -> BoundMethod:
    if not isinstance(cls, type) or not issubclass(cls, Policy):
        msg = f"{cls!r} class must subclass {Policy.__module__}.Policy"
        raise ConfigurationError(msg)
    if not isinstance(method, str) or not defines(cls, method):
        msg = f"Policy method {method!r} does not exist in class {cls.__qualname__!r}"
        raise ConfigurationError(msg)
    return BoundMethod(cls, method)


def normalize_policy(policy: Any) -> PolicySpec:
    """Validate *policy* and collapse it into a ``PolicySpec``."""
    if isinstance(policy, bool):
        return policy
    if isinstance(policy, (Predicate, BoundMethod)):
        return policy
    if isinstance(policy, type):
        return _bound_method(policy, "__call__")
    if isinstance(policy, Sequence) and not isinstance(policy, str):
        if len(policy) != 2:
            msg = f"Policy pair must be (class, method), got {policy!r}"
            raise ConfigurationError(msg)
        return _bound_method(policy[0], policy[1])
    if callable(policy):
        return Predicate(policy)
    msg = f"Policy must be a bool, a callable, or a Policy class, got {policy!r}"
    raise ConfigurationError(msg)


def _policy_instance(cls: type[Policy], container: Container | None) -> Policy:
    if container is not None and container.has(cls):
        return container.get(cls)
    return cls()


async def evaluate_policy(
    spec: PolicySpec,
    resolver: ParameterResolver,
    *,
    route_name: str,
    container: Container | None = None,
) -> bool:
    """Evaluate *spec* and coerce the outcome to ``bool``.

    Switchyard errors (unresolvable or unannotated parameters, a missing
    container) propagate as they are; any other failure is wrapped in
    ``PolicyError``.
    """
    if isinstance(spec, bool):
        return spec

    try:
        if isinstance(spec, Predicate):
            target = spec.fn
            signature = HandlerSignature.of(target)
        else:
            instance = _policy_instance(spec.cls, container)
            target = getattr(instance, spec.method)
            signature = HandlerSignature.of(target, owner=spec.cls)
        kwargs = resolver.resolve(signature)
        allowed = bool(await invoke(target, **kwargs))
    except SwitchyardError:
        raise
    except Exception as exc:
        raise PolicyError(route_name, str(exc) or type(exc).__name__) from exc

    if not allowed:
        logger.debug("Policy denied route %r", route_name)
    return allowed
