"""Immutable HTTP request.

Frozen metadata plus an attribute bag. The request is honest about
what it is: received data that doesn't change. Attaching attributes
returns a new request, the original is never modified.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urlsplit

from switchyard.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``attributes`` carries values attached during dispatch: the
    matched path attributes and the active route context.
    """

    method: str
    path: str
    query: QueryParams = field(default_factory=QueryParams)
    attributes: Mapping[str, Any] = field(default_factory=dict)

    # -- Attribute bag --

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return attribute *name*, or *default* if it was never attached."""
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> Request:
        """Return a new Request with *name* set to *value*."""
        return replace(self, attributes={**self.attributes, name: value})

    def with_attributes(self, values: Mapping[str, Any]) -> Request:
        """Return a new Request with every pair in *values* attached."""
        if not values:
            return self
        return replace(self, attributes={**self.attributes, **values})

    # -- Factories --

    @classmethod
    def build(cls, method: str, url: str) -> Request:
        """Create a Request from a method and a URL or ``path?query`` string."""
        parts = urlsplit(url)
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            query=QueryParams(parts.query),
        )
