"""Middleware chain composition."""

from typing import Any

from muxwrap._internal.invoke import ensure_async
from muxwrap.middleware.protocol import Handler, Middleware


def use(handler: Any, *middleware: Middleware) -> Handler:
    """Wrap *handler* in *middleware*, first item outermost.

    ``use(h, m0, m1, m2)`` is ``m0(m1(m2(h)))``: on a request, m0's code
    before ``next`` runs first and its code after ``next`` runs last.
    With no middleware the (async-adapted) handler comes back as is.

    Composition does not call anything but the middleware factories, so
    it is safe to run once per request.
    """
    wrapped: Handler = ensure_async(handler)
    for mw in reversed(middleware):
        wrapped = ensure_async(mw(wrapped))
    return wrapped
