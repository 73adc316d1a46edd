"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass, field

from switchyard.http.response import Response


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(controller_namespace="myapp.controllers")
    """

    # Dotted module path that string controller names are imported from
    controller_namespace: str | None = None

    # Request attribute under which the active route context is attached
    route_attribute: str = "_route"

    # Middleware responses with these statuses end dispatch immediately
    redirect_statuses: frozenset[int] = field(default_factory=lambda: frozenset({301, 302, 308}))

    # Regex used for ``:name`` parameters with no explicit binding
    default_pattern: str = r"[^/]+"

    # Paths match case-insensitively unless this is set
    case_sensitive: bool = False

    # Class that wraps non-response handler and middleware results
    response_class: type = Response
