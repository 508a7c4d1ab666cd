"""Prefix stripping for handlers mounted under a path namespace."""

from typing import Any

from muxwrap._internal.invoke import ensure_async
from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.middleware.protocol import Handler
from muxwrap.routing.pathmux import not_found


def strip_prefix(prefix: str, handler: Any) -> Handler:
    """Serve requests by removing *prefix* from the path before *handler*.

    The stripped prefix moves to ``request.root_path``, so the full URL is
    still available. Paths that do not start with *prefix* get 404. An
    empty remainder becomes ``/``::

        strip_prefix("/api", api)  # "/api/widgets" -> "/widgets", "/api" -> "/"
    """
    inner = ensure_async(handler)

    async def stripped(request: Request, writer: ResponseWriter) -> None:
        if not request.path.startswith(prefix):
            await not_found(request, writer)
            return
        rest = request.path[len(prefix) :] or "/"
        await inner(request.with_path(rest, f"{request.root_path}{prefix}"), writer)

    return stripped
