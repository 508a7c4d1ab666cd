"""Per-pattern method dispatch.

One ``MethodDispatcher`` is created for each pattern the first time a
method handler is registered for it. It is registered with the path
table once and then only grows.
"""

from typing import Any

from muxwrap.errors import ConfigurationError, DuplicateRegistration
from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.methods import Method
from muxwrap.middleware.protocol import Handler
from muxwrap.middleware.strict import reject_method, strict_method


class MethodDispatcher:
    """At most one handler per HTTP method, for a single pattern.

    Requests with an unregistered method get 405 and an ``Allow`` header
    listing the methods that are registered.
    """

    __slots__ = ("_handlers", "pattern")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._handlers: dict[Method, Handler] = {}

    def register(self, method: Method | str, handler: Any) -> None:
        """Add *handler* for *method*.

        The stored handler is also wrapped with ``strict_method(method)``.

        Raises:
            ConfigurationError: *handler* is ``None``.
            DuplicateRegistration: *method* already has a handler here.
        """
        method = Method.parse(method)
        if handler is None:
            msg = f"No handler given for {method.value} {self.pattern!r}"
            raise ConfigurationError(msg)
        if method in self._handlers:
            raise DuplicateRegistration(self.pattern, method.value)
        self._handlers[method] = strict_method(method)(handler)

    @property
    def methods(self) -> tuple[Method, ...]:
        """Registered methods, in registration order."""
        return tuple(self._handlers)

    def __contains__(self, method: object) -> bool:
        return method in self._handlers

    async def __call__(self, request: Request, writer: ResponseWriter) -> None:
        try:
            method = Method(request.method)
        except ValueError:
            method = None
        handler = self._handlers.get(method) if method is not None else None
        if handler is None:
            reject_method(writer, tuple(m.value for m in self._handlers))
            return
        await handler(request, writer)

    def __repr__(self) -> str:
        methods = ", ".join(m.value for m in self._handlers)
        return f"MethodDispatcher({self.pattern!r}, [{methods}])"
