"""The Mux: route builder and ASGI application.

Mutable during setup (method handlers, raw handlers, embeds, middleware).
Frozen once it starts serving through ASGI or ``run()``.
"""

import logging
import threading
from typing import Any

from muxwrap._internal.asgi import Receive, Scope, Send
from muxwrap.config import MuxConfig
from muxwrap.errors import ConfigurationError, DuplicateRegistration
from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.methods import Method
from muxwrap.middleware.chain import use
from muxwrap.middleware.protocol import Middleware
from muxwrap.routing.dispatcher import MethodDispatcher
from muxwrap.routing.pathmux import PathMux
from muxwrap.routing.strip import strip_prefix
from muxwrap.sender import send_response

logger = logging.getLogger("muxwrap.routing")


class Mux:
    """Per-method routing and global middleware over a ``PathMux``.

    Usage::

        mux = Mux(ElapsedTime())

        @mux.get("/users")
        async def list_users(request, writer):
            writer.write("[]")

        mux.post("/users", create_user)
        mux.embed("/admin/", admin_mux)
        mux.push(RequestCounter())

    Middleware passed to the constructor or to ``push()`` wraps every
    request, first registered outermost. The list is read on each request,
    so middleware pushed between two direct ``serve()`` calls applies to
    the second.

    Thread safety:
        Registration is single-threaded and must finish before serving.
        The freeze transition uses a Lock + double-check so exactly one
        thread performs it when several ASGI workers start at once.
    """

    __slots__ = (
        "_dispatchers",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_mounted",
        "_paths",
        "config",
    )

    def __init__(self, *middleware: Middleware, config: MuxConfig | None = None) -> None:
        self.config: MuxConfig = config or MuxConfig()
        self._paths = PathMux()
        self._middleware: list[Middleware] = list(middleware)
        self._dispatchers: dict[str, MethodDispatcher] = {}
        self._mounted: list[Mux] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Per-method registration --

    def get(self, pattern: str, handler: Any = None) -> Any:
        """Register a GET-only handler. Without *handler*, return a decorator."""
        return self._method_route(Method.GET, pattern, handler)

    def post(self, pattern: str, handler: Any = None) -> Any:
        """Register a POST-only handler. Without *handler*, return a decorator."""
        return self._method_route(Method.POST, pattern, handler)

    def put(self, pattern: str, handler: Any = None) -> Any:
        """Register a PUT-only handler. Without *handler*, return a decorator."""
        return self._method_route(Method.PUT, pattern, handler)

    def head(self, pattern: str, handler: Any = None) -> Any:
        """Register a HEAD-only handler. Without *handler*, return a decorator."""
        return self._method_route(Method.HEAD, pattern, handler)

    def delete(self, pattern: str, handler: Any = None) -> Any:
        """Register a DELETE-only handler. Without *handler*, return a decorator."""
        return self._method_route(Method.DELETE, pattern, handler)

    def _method_route(self, method: Method, pattern: str, handler: Any) -> Any:
        if handler is not None:
            self.register_method(method, pattern, handler)
            return handler

        def decorator(func: Any) -> Any:
            self.register_method(method, pattern, func)
            return func

        return decorator

    def register_method(self, method: Method | str, pattern: str, handler: Any) -> None:
        """Register *handler* for one method on *pattern*.

        Raises:
            ConfigurationError: *handler* is ``None``.
            DuplicateRegistration: The method is already registered for
                *pattern*, or *pattern* was registered with ``handle()``.
        """
        self._check_not_frozen()
        method = Method.parse(method)
        if handler is None:
            msg = f"No handler given for {method.value} {pattern!r}"
            raise ConfigurationError(msg)

        dispatcher = self._dispatchers.get(pattern)
        if dispatcher is None:
            if pattern in self._paths:
                raise DuplicateRegistration(pattern, method.value)
            dispatcher = MethodDispatcher(pattern)
            self._paths.handle(pattern, dispatcher)
            self._dispatchers[pattern] = dispatcher

        dispatcher.register(method, handler)
        logger.debug("registered %s %s", method.value, pattern)

    # -- Raw registration --

    def handle(self, pattern: str, handler: Any) -> None:
        """Register *handler* for every method on *pattern*.

        No method check is applied.

        Raises:
            DuplicateRegistration: *pattern* is already registered, either
                raw or through a per-method call.
        """
        self._check_not_frozen()
        self._paths.handle(pattern, self._as_handler(pattern, handler))
        self._track_mounted(handler)

    def embed(self, pattern: str, handler: Any) -> None:
        """Mount *handler* (often another ``Mux``) under *pattern*.

        The pattern minus its trailing slash is stripped from the path
        before *handler* sees it: under ``"/api/"`` a request for
        ``/api/widgets`` arrives as ``/widgets`` and ``/api/`` as ``/``.
        Only one trailing slash is removed, and under the root pattern
        ``"/"`` nothing is stripped.
        """
        self._check_not_frozen()
        strip = pattern.removesuffix("/")
        self._paths.handle(pattern, strip_prefix(strip, self._as_handler(pattern, handler)))
        self._track_mounted(handler)

    def _as_handler(self, pattern: str, handler: Any) -> Any:
        # A mounted Mux is served through serve(), not its ASGI __call__.
        if handler is None:
            msg = f"No handler given for pattern {pattern!r}"
            raise ConfigurationError(msg)
        if isinstance(handler, Mux):
            if handler is self:
                msg = "A mux cannot be mounted inside itself"
                raise ConfigurationError(msg)
            return handler.serve
        return handler

    def _track_mounted(self, handler: Any) -> None:
        # Called only after the path table accepted the pattern.
        if isinstance(handler, Mux):
            self._mounted.append(handler)

    # -- Middleware --

    def push(self, middleware: Middleware) -> None:
        """Append *middleware* to the global chain (innermost so far)."""
        self._check_not_frozen()
        self._middleware.append(middleware)

    # -- Introspection --

    @property
    def routes(self) -> dict[str, tuple[Method, ...] | None]:
        """Registered patterns mapped to their methods (``None`` for raw handlers)."""
        result: dict[str, tuple[Method, ...] | None] = {}
        for pattern in self._paths.patterns:
            dispatcher = self._dispatchers.get(pattern)
            result[pattern] = dispatcher.methods if dispatcher is not None else None
        return result

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return tuple(self._middleware)

    # -- Serving --

    async def serve(self, request: Request, writer: ResponseWriter) -> None:
        """Resolve *request*, wrap the handler in the global chain, run it."""
        handler, _ = self._paths.resolve(request)
        await use(handler, *self._middleware)(request, writer)

    def freeze(self) -> None:
        """End the registration phase. Safe to call more than once."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._frozen = True
            for child in self._mounted:
                child.freeze()
            logger.debug(
                "mux frozen: %d patterns, %d middleware",
                len(self._paths.patterns),
                len(self._middleware),
            )

    @property
    def frozen(self) -> bool:
        return self._frozen

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze and serve with pounce using ``self.config``."""
        from muxwrap.server import run_server

        self.freeze()
        run_server(self, host or self.config.host, port or self.config.port, self.config)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan directly, serves HTTP scopes, ignores the rest.
        Handler exceptions are not caught; the server reports them.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        self.freeze()
        request = Request.from_asgi(scope, receive)
        writer = ResponseWriter()
        await self.serve(request, writer)
        await send_response(writer.to_response(), send, method=request.method)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup and acknowledge the lifespan messages."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self.freeze()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the mux after it has started serving requests. "
                "Register handlers and middleware before calling mux.run()."
            )
            raise RuntimeError(msg)
