"""Responses produced by dispatch.

Handlers and middleware may return a ``Response`` directly; anything
else is wrapped by ``switchyard.routing.negotiation.negotiate``. The
router only ever reads ``status`` (to spot middleware redirects).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """A response value. ``with_*()`` calls return modified copies.

    Middleware decorate the handler's response this way::

        response = await next(request)
        return response.with_header("X-Served-By", "switchyard")
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Accessors --

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return default


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect to *url*, turned into a response with a ``Location`` header."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()
