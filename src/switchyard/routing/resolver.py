"""Parameter resolution — bind declared parameters to values.

Each parameter is resolved from the first source that applies:

1. Annotated with the request type     -> the live request
2. A matched path attribute by name    -> the attribute
3. A declared default                  -> the default
4. Annotated with a non-builtin class  -> ``container.get(annotation)``
5. Anything else                       -> ``container.get(name)``

Matched attributes are bound as the strings the path captured. Conversion
is opt-in by annotation: a parameter annotated ``int``, ``float`` or
``bool`` receives the converted scalar (see ``switchyard.routing.params``),
while ``str``, ``Any`` and other annotations receive the raw string.

Steps 4 and 5 need a container (``MissingContainer`` otherwise); a key
the container doesn't have raises ``UnresolvableParameter``. The same
resolver serves handlers and policies.
"""

from collections.abc import Mapping
from typing import Any

from switchyard.contracts import Container
from switchyard.errors import MissingContainer, UnresolvableParameter
from switchyard.http.request import Request
from switchyard.routing.params import convert_attribute
from switchyard.routing.signature import HandlerSignature, ParameterSpec


def is_request_type(annotation: Any) -> bool:
    """True if *annotation* names the request type (or a subclass)."""
    return isinstance(annotation, type) and issubclass(annotation, Request)


def is_injectable_type(annotation: Any) -> bool:
    """True if *annotation* is a class the container can be asked for by type.

    Builtin scalars and containers (``str``, ``int``, ``dict``...) are
    resolved by parameter name instead.
    """
    return isinstance(annotation, type) and annotation.__module__ != "builtins"


class ParameterResolver:
    """Resolves parameters against one dispatch's request, attributes, and container."""

    __slots__ = ("_attributes", "_container", "_request")

    def __init__(
        self,
        request: Request,
        attributes: Mapping[str, str],
        container: Container | None = None,
    ) -> None:
        self._request = request
        self._attributes = attributes
        self._container = container

    def resolve(self, signature: HandlerSignature) -> dict[str, Any]:
        """Return keyword arguments for every parameter in *signature*."""
        return {spec.name: self.resolve_one(spec, signature) for spec in signature.parameters}

    def resolve_one(self, spec: ParameterSpec, signature: HandlerSignature) -> Any:
        if is_request_type(spec.annotation):
            return self._request
        if spec.name in self._attributes:
            return convert_attribute(self._attributes[spec.name], spec.annotation)
        if spec.has_default:
            return spec.default
        if is_injectable_type(spec.annotation):
            return self._from_container(spec.annotation, spec, signature)
        return self._from_container(spec.name, spec, signature)

    def _from_container(self, key: Any, spec: ParameterSpec, signature: HandlerSignature) -> Any:
        container = self._container
        if container is None:
            dependency = key.__qualname__ if isinstance(key, type) else str(key)
            raise MissingContainer(dependency)
        if not container.has(key):
            raise UnresolvableParameter(spec.name, signature.target, signature.owner)
        try:
            return container.get(key)
        except LookupError as exc:
            raise UnresolvableParameter(spec.name, signature.target, signature.owner) from exc
