"""muxwrap: per-method routing and ordered middleware over a path mux.

Basic usage::

    from muxwrap import ElapsedTime, Mux

    mux = Mux(ElapsedTime())

    @mux.get("/")
    async def index(request, writer):
        writer.write("Hello, World!")

    mux.run()

A ``Mux`` is an ASGI 3.0 application, so any ASGI server can host it.
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DuplicateRegistration",
    "ElapsedTime",
    "Handler",
    "Method",
    "Middleware",
    "Mux",
    "MuxConfig",
    "MuxError",
    "Request",
    "RequestCounter",
    "Response",
    "ResponseWriter",
    "count",
    "strict_method",
    "use",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import muxwrap`` fast while providing a clean top-level API.
    """
    if name == "Mux":
        from muxwrap.app import Mux

        return Mux

    if name == "MuxConfig":
        from muxwrap.config import MuxConfig

        return MuxConfig

    if name == "Method":
        from muxwrap.methods import Method

        return Method

    if name == "Request":
        from muxwrap.http.request import Request

        return Request

    if name in ("Response", "ResponseWriter"):
        from muxwrap.http import response

        return getattr(response, name)

    if name in ("ConfigurationError", "DuplicateRegistration", "MuxError"):
        from muxwrap import errors

        return getattr(errors, name)

    if name in (
        "ElapsedTime",
        "Handler",
        "Middleware",
        "RequestCounter",
        "count",
        "strict_method",
        "use",
    ):
        from muxwrap import middleware

        return getattr(middleware, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
