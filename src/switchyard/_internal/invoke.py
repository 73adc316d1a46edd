"""Invoke helpers — call sync or async callables uniformly.

Handlers, middleware, and policies can be ``def`` or ``async def``. Any
code that calls a user-provided callable must handle both cases. This
module provides a single helper so the sync/async check lives in exactly
one place.

Usage::

    from switchyard._internal.invoke import invoke

    result = await invoke(handler, *args, **kwargs)
"""

import inspect
from typing import Any


async def invoke(target: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *target* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        def show(id: int) -> str:
            return f"post {id}"

        # async: the coroutine is awaited
        async def show(id: int, repo: PostRepository) -> dict:
            return await repo.fetch(id)
    """
    result = target(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
