"""Middleware: plain ``Handler -> Handler`` callables, no base class.

A middleware takes the next handler and returns a new one. Lists of
middleware are applied first-outermost by ``use()``.

Built-in middleware:
    strict_method -- Reject requests whose method is not in an allowed set (405)
    ElapsedTime -- Report the time spent in the inner chain
    RequestCounter -- Thread-safe in-flight request counter
    count -- Wrap one handler with a private RequestCounter
"""

from muxwrap.middleware.chain import use
from muxwrap.middleware.instrument import ElapsedTime, RequestCounter, count, log_elapsed
from muxwrap.middleware.protocol import Handler, Middleware
from muxwrap.middleware.strict import strict_method

__all__ = [
    "ElapsedTime",
    "Handler",
    "Middleware",
    "RequestCounter",
    "count",
    "log_elapsed",
    "strict_method",
    "use",
]
