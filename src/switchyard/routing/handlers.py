"""Handler specs — normalized once, when the route is built.

Every accepted callback form collapses into one of two variants::

    lambda: "hi"                                 -> InlineFunction
    PostController                               -> ClassAction(PostController, "__call__")
    "PostController@show" / "PostController#show" -> ClassAction("PostController", "show")
    "PostController"                             -> ClassAction("PostController", "__call__")
    (PostController, "show")                     -> ClassAction(PostController, "show")
    {"controller": PostController, "action": "show"}

String controller names stay strings until dispatch, where they are
imported relative to the route's controller namespace.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from switchyard.contracts import Container
from switchyard.errors import ConfigurationError, MissingContainer, TargetNotFound
from switchyard.routing.signature import requires_arguments

DEFAULT_ACTION = "__call__"


@dataclass(frozen=True, slots=True)
class InlineFunction:
    """A plain callable handler."""

    fn: Callable[..., Any]

    def describe(self) -> str:
        return getattr(self.fn, "__qualname__", repr(self.fn))


@dataclass(frozen=True, slots=True)
class ClassAction:
    """A controller class (or its importable name) plus the method to call."""

    controller: type | str
    action: str = DEFAULT_ACTION

    @property
    def controller_name(self) -> str:
        if isinstance(self.controller, type):
            return self.controller.__qualname__
        return self.controller

    def describe(self) -> str:
        return f"{self.controller_name}.{self.action}"


type HandlerTarget = InlineFunction | ClassAction


def _split_action(callback: str) -> tuple[str, str]:
    for separator in ("@", "#"):
        if separator in callback:
            controller, action = callback.split(separator, 1)
            return controller, action
    return callback, DEFAULT_ACTION


def normalize_handler(callback: Any, route_name: str) -> HandlerTarget:
    """Collapse *callback* into an ``InlineFunction`` or ``ClassAction``.

    Raises ``ConfigurationError`` for empty or unrecognized specs.
    """
    controller: Any
    action: Any
    if isinstance(callback, type):
        return ClassAction(callback)
    if isinstance(callback, str):
        if not callback:
            msg = f"{route_name} callback argument must not be empty"
            raise ConfigurationError(msg)
        controller, action = _split_action(callback)
    elif isinstance(callback, Mapping):
        if not callback:
            msg = f"{route_name} callback argument must not be empty"
            raise ConfigurationError(msg)
        controller = callback.get("controller")
        action = callback.get("action", DEFAULT_ACTION)
    elif isinstance(callback, Sequence):
        if not callback:
            msg = f"{route_name} callback argument must not be empty"
            raise ConfigurationError(msg)
        if len(callback) != 2:
            msg = f"{route_name} callback must be a (controller, action) pair, got {callback!r}"
            raise ConfigurationError(msg)
        controller, action = callback
    elif callable(callback):
        return InlineFunction(callback)
    else:
        msg = f"{route_name} callback {callback!r} is neither callable nor a controller spec"
        raise ConfigurationError(msg)

    if not controller or not isinstance(controller, (type, str)):
        msg = f"{route_name} controller argument must not be empty"
        raise ConfigurationError(msg)
    if not action or not isinstance(action, str):
        msg = f"{route_name} controller action argument must not be empty"
        raise ConfigurationError(msg)
    return ClassAction(controller, action)


def load_controller(controller: type | str, namespace: str | None = None) -> type:
    """Return the controller class, importing it by name if needed.

    *namespace* is a dotted module path prepended to string names.
    Raises ``TargetNotFound`` if the module or class does not exist.
    """
    if isinstance(controller, type):
        return controller

    qualified = f"{namespace}.{controller}" if namespace else controller
    module_name, _, class_name = qualified.rpartition(".")
    if not module_name:
        msg = f"The class {qualified!r} does not exist"
        raise TargetNotFound(msg)
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        msg = f"The class {qualified!r} does not exist"
        raise TargetNotFound(msg) from exc

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        msg = f"The class {qualified!r} does not exist"
        raise TargetNotFound(msg)
    return cls


def instantiate(cls: type, container: Container | None) -> Any:
    """Build *cls* with no arguments, or fetch it from *container*.

    The container is only consulted when the constructor needs arguments.
    """
    if not requires_arguments(cls):
        return cls()
    if container is None:
        raise MissingContainer(cls.__qualname__)
    try:
        return container.get(cls)
    except LookupError as exc:
        msg = f"The class {cls.__qualname__!r} can not be resolved from the container"
        raise TargetNotFound(msg) from exc


def bind_action(instance: Any, action: str) -> Callable[..., Any]:
    """Return the bound *action* method of *instance*."""
    method = getattr(instance, action, None)
    if method is None or not callable(method):
        msg = f"The method {action!r} does not exist in class {type(instance).__qualname__!r}"
        raise TargetNotFound(msg)
    return method
