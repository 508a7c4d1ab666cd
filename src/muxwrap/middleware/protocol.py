"""Handler and Middleware type aliases.

A handler is any callable matching::

    async def handler(request: Request, writer: ResponseWriter) -> None: ...

A middleware takes the next handler and returns a new one::

    def tag(next: Handler) -> Handler:
        async def handler(request: Request, writer: ResponseWriter) -> None:
            writer.set_header("X-Tag", "1")
            await next(request, writer)
        return handler

No base class required. Middleware may skip ``next`` to short-circuit,
or run code before and after awaiting it.
"""

from collections.abc import Awaitable, Callable
from typing import TypeAlias

from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter

# The terminal or wrapped request handler
Handler: TypeAlias = Callable[[Request, ResponseWriter], Awaitable[None]]

# Handler -> Handler decorator, applied per request by the mux
Middleware: TypeAlias = Callable[[Handler], Handler]
