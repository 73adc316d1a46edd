"""Return value normalization — maps handler results to responses.

isinstance-based dispatch, no magic, fully predictable. The same rules
apply to values returned by middleware.
"""

import json as json_module
from typing import Any

from switchyard._internal.invoke import invoke
from switchyard.http.response import Redirect, Response


async def negotiate(value: Any, *, response_class: type = Response) -> Any:
    """Convert a handler's return value to a response.

    Dispatch order:

    1. ``Response`` / ``response_class`` instance -> pass through
    2. ``Redirect``                 -> empty body, status + Location header
    3. ``None``                     -> empty body
    4. ``str`` / ``bytes``          -> body as is
    5. ``dict`` / ``list`` / ``tuple`` -> JSON body
    6. callable                     -> called (and awaited), its output becomes the body
    7. anything else                -> ``str(value)``
    """
    match value:
        case Response():
            return value
        case _ if isinstance(value, response_class):
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case None:
            return response_class(body="")
        case str() | bytes():
            return response_class(body=value)
        case dict() | list() | tuple():
            response = response_class(body=json_module.dumps(value, default=str))
            if isinstance(response, Response):
                response = response.with_content_type("application/json")
            return response
        case _ if callable(value):
            output = await invoke(value)
            if output is None:
                return response_class(body="")
            return response_class(body=output if isinstance(output, (str, bytes)) else str(output))
        case _:
            return response_class(body=str(value))
