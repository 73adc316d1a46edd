"""Handler signatures — the one place that inspects callables.

The resolver works from ``ParameterSpec`` values (name, annotation,
default) and never touches ``inspect`` itself. A parameter declared
without an annotation is a configuration error: the resolver can't pick
a source for it.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from switchyard.errors import ConfigurationError

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One declared parameter of a handler, policy, or middleware method."""

    name: str
    annotation: Any
    has_default: bool = False
    default: Any = None


@dataclass(frozen=True, slots=True)
class HandlerSignature:
    """The resolvable parameters of a callable.

    ``target`` is the callable's name and ``owner`` its class name when
    the callable is a method; both only feed error messages.
    """

    target: str
    owner: str | None
    parameters: tuple[ParameterSpec, ...]

    @classmethod
    def of(cls, target: Callable[..., Any], owner: type | None = None) -> HandlerSignature:
        """Inspect *target* (a function or a bound method).

        Raises ``ConfigurationError`` naming the first parameter that has
        no annotation.
        """
        target_name = getattr(target, "__name__", None) or type(target).__name__
        owner_name = owner.__qualname__ if owner is not None else None
        try:
            sig = inspect.signature(target, eval_str=True)
        except (TypeError, ValueError) as exc:
            msg = f"Cannot inspect the signature of {target_name!r}: {exc}"
            raise ConfigurationError(msg) from exc
        except NameError as exc:
            msg = f"Cannot evaluate the annotations of {target_name!r}: {exc}"
            raise ConfigurationError(msg) from exc

        specs: list[ParameterSpec] = []
        for name, param in sig.parameters.items():
            if param.kind in _VARIADIC:
                continue
            if param.annotation is inspect.Parameter.empty:
                where = f"{owner_name}.{target_name}" if owner_name else target_name
                msg = f"The type of argument {name!r} in {where!r} is not given"
                raise ConfigurationError(msg)
            has_default = param.default is not inspect.Parameter.empty
            specs.append(
                ParameterSpec(
                    name=name,
                    annotation=param.annotation,
                    has_default=has_default,
                    default=param.default if has_default else None,
                )
            )
        return cls(target=target_name, owner=owner_name, parameters=tuple(specs))


def requires_arguments(cls: type) -> bool:
    """True if constructing *cls* needs at least one argument."""
    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    return any(
        param.default is inspect.Parameter.empty and param.kind not in _VARIADIC
        for param in sig.parameters.values()
    )


def defines(cls: type, name: str) -> bool:
    """True if *cls* or a base other than ``object`` defines attribute *name*."""
    return any(name in vars(base) for base in cls.__mro__ if base is not object)
