"""Strict method guard."""

from typing import Any

from muxwrap._internal.invoke import ensure_async
from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.methods import Method
from muxwrap.middleware.protocol import Handler, Middleware

METHOD_NOT_ALLOWED = 405


def reject_method(writer: ResponseWriter, allowed: tuple[str, ...]) -> None:
    """Write a bare 405 with an ``Allow`` header listing *allowed*."""
    writer.set_header("Allow", ", ".join(allowed))
    writer.write_header(METHOD_NOT_ALLOWED)


def strict_method(*methods: Method | str) -> Middleware:
    """Only let requests whose method is one of *methods* reach ``next``.

    Comparison is exact (``"get"`` is not ``GET``). Anything else gets
    405 and ``next`` is never awaited. With no methods at all every
    request is rejected::

        guarded = strict_method(Method.GET, Method.HEAD)(handler)
    """
    allowed = tuple(Method.parse(m).value for m in methods)

    def middleware(next: Any) -> Handler:
        inner = ensure_async(next)

        async def guarded(request: Request, writer: ResponseWriter) -> None:
            if request.method not in allowed:
                reject_method(writer, allowed)
                return
            await inner(request, writer)

        return guarded

    return middleware
