"""Sync/async handler adapter.

Handlers may be ``def`` or ``async def``. Middleware always awaits
``next(request, writer)``, so every handler that enters a chain goes
through ``ensure_async`` first and the sync/async check lives here only.
"""

import functools
import inspect
from typing import Any


def ensure_async(handler: Any) -> Any:
    """Return a coroutine function that calls *handler* and awaits if needed.

    ``async def`` functions are returned unchanged. Anything else (plain
    functions, callable objects, bound methods) is wrapped::

        def index(request, writer):
            writer.write("hi")

        handler = ensure_async(index)
        await handler(request, writer)
    """
    if inspect.iscoroutinefunction(handler):
        return handler

    @functools.wraps(handler)
    async def adapted(*args: Any, **kwargs: Any) -> Any:
        result = handler(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    return adapted
