"""Capabilities the router consumes — checked by shape, not lineage.

``Container`` is the dependency resolver contract: anything with
``has(key)`` and ``get(key)`` works, keyed by a name or a type.

``ROUTE_CONTRACT`` lists the members a pluggable route class must
expose before ``Router.set_route_class()`` accepts it. The router also
builds routes as ``route_class(path, callback, name, config=config)``,
so the constructor must take those arguments.
"""

from __future__ import annotations

import inspect
from typing import Any, Protocol, runtime_checkable

# Members a route class must expose to be pluggable into a Router.
# Instance data (name, path, attributes) must be visible on the class,
# as a property or a slot.
ROUTE_CONTRACT: tuple[str, ...] = (
    "name",
    "path",
    "match",
    "resolve",
    "context",
    "run",
    "generate_uri",
    "attributes",
    "policy",
    "middlewares",
    "set_middlewares",
)
@runtime_checkable
class Container(Protocol):
    """Dependency resolver contract.

    ``get`` must raise ``LookupError`` (``KeyError`` is one) when *key*
    cannot be resolved, so absence is distinguishable from a resolved
    ``None``::

        class Services:
            def __init__(self) -> None:
                self._entries: dict[object, object] = {}

            def has(self, key: object) -> bool:
                return key in self._entries

            def get(self, key: object) -> object:
                return self._entries[key]
    """

    def has(self, key: Any) -> bool: ...

    def get(self, key: Any) -> Any: ...


def missing_route_members(route_class: type) -> list[str]:
    """Return the route-contract members *route_class* does not expose."""
    return [member for member in ROUTE_CONTRACT if not hasattr(route_class, member)]


def accepts_route_arguments(route_class: type) -> bool:
    """Whether *route_class* can be built the way the router builds routes."""
    try:
        signature = inspect.signature(route_class)
    except (TypeError, ValueError):
        return False
    try:
        signature.bind("/", None, None, config=None)
    except TypeError:
        return False
    return True
