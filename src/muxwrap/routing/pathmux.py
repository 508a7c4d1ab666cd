"""Pattern table with exact and subtree matching.

Two kinds of pattern:

- ``/about`` matches the path ``/about`` only.
- ``/static/`` matches ``/static/`` and everything below it.

The longest matching pattern wins, so ``/static/img/`` beats ``/static/``
and any registered pattern beats ``/``. A request for ``/static`` (no
trailing slash) when only ``/static/`` is registered is redirected to
``/static/`` with 301.
"""

import logging
from typing import Any

from muxwrap._internal.invoke import ensure_async
from muxwrap.errors import ConfigurationError, DuplicateRegistration
from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.middleware.protocol import Handler

logger = logging.getLogger("muxwrap.routing")


async def not_found(request: Request, writer: ResponseWriter) -> None:
    """Plain-text 404 used when no pattern matches."""
    writer.write_header(404)
    writer.write("404 page not found\n")


def _redirect(location: str) -> Handler:
    async def redirect(request: Request, writer: ResponseWriter) -> None:
        target = location
        if request.query_string:
            target = f"{target}?{request.query_string.decode('latin-1')}"
        logger.debug("redirect %s -> %s", request.url, target)
        writer.set_header("Location", target)
        writer.write_header(301)

    return redirect


class PathMux:
    """Pattern -> handler table.

    Usage::

        paths = PathMux()
        paths.handle("/", index)
        paths.handle("/static/", assets)
        handler, pattern = paths.resolve(request)

    Registration is not thread-safe; finish it before serving.
    """

    __slots__ = ("_entries", "_subtrees")

    def __init__(self) -> None:
        self._entries: dict[str, Handler] = {}
        # Subtree patterns, longest first
        self._subtrees: list[str] = []

    def handle(self, pattern: str, handler: Any) -> None:
        """Register *handler* for *pattern*.

        Raises:
            ConfigurationError: Empty or relative pattern, or no handler.
            DuplicateRegistration: *pattern* already has a handler.
        """
        if not pattern or not pattern.startswith("/"):
            msg = f"Invalid pattern {pattern!r}: patterns must start with '/'"
            raise ConfigurationError(msg)
        if handler is None:
            msg = f"No handler given for pattern {pattern!r}"
            raise ConfigurationError(msg)
        if pattern in self._entries:
            raise DuplicateRegistration(pattern)

        self._entries[pattern] = ensure_async(handler)
        if pattern.endswith("/"):
            self._subtrees.append(pattern)
            self._subtrees.sort(key=len, reverse=True)
        logger.debug("registered pattern %s", pattern)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._entries

    @property
    def patterns(self) -> tuple[str, ...]:
        """Registered patterns in registration order."""
        return tuple(self._entries)

    def resolve(self, request: Request) -> tuple[Handler, str]:
        """Return ``(handler, matched_pattern)`` for *request*.

        Unmatched paths resolve to ``(not_found, "")``.
        """
        path = request.path

        handler = self._entries.get(path)
        if handler is not None:
            return handler, path

        slashed = f"{path}/"
        if slashed in self._entries:
            return _redirect(f"{request.root_path}{slashed}"), slashed

        for pattern in self._subtrees:
            if path.startswith(pattern):
                return self._entries[pattern], pattern

        return not_found, ""

    async def __call__(self, request: Request, writer: ResponseWriter) -> None:
        handler, _ = self.resolve(request)
        await handler(request, writer)
