"""Instrumentation middleware: elapsed time and in-flight request counting.

Both are independent of routing: push them onto a mux like any other
middleware, or wrap a single handler with them.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeAlias

from muxwrap._internal.invoke import ensure_async
from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.middleware.protocol import Handler

logger = logging.getLogger("muxwrap.middleware")

ElapsedCallback: TypeAlias = Callable[[ResponseWriter, Request, float], None]


def log_elapsed(writer: ResponseWriter, request: Request, elapsed: float) -> None:
    """Default ``ElapsedTime`` callback: one DEBUG line per request."""
    logger.debug("%s took %.3fms", request.url, elapsed * 1000)


class ElapsedTime:
    """Report how long the rest of the chain took.

    The clock starts right before ``next`` is awaited and stops right
    after it returns, so the figure covers every inner middleware and the
    handler but none of this middleware's own work. *callback* receives
    ``(writer, request, elapsed_seconds)``::

        mux.push(ElapsedTime(lambda w, r, s: stats.observe(r.path, s)))
    """

    __slots__ = ("callback",)

    def __init__(self, callback: ElapsedCallback | None = None) -> None:
        self.callback = callback or log_elapsed

    def __call__(self, next: Any) -> Handler:
        inner = ensure_async(next)
        callback = self.callback

        async def timed(request: Request, writer: ResponseWriter) -> None:
            start = time.perf_counter()
            await inner(request, writer)
            elapsed = time.perf_counter() - start
            callback(writer, request, elapsed)

        return timed


class RequestCounter:
    """Thread-safe count of requests currently inside the wrapped handler.

    Every increment has a matching decrement, even when the handler
    raises, so ``in_flight`` returns to zero once traffic stops::

        counter = RequestCounter()
        mux.push(counter)
        ...
        counter.in_flight  # requests being served right now
        counter.peak       # highest in_flight seen
        counter.total      # requests finished
    """

    __slots__ = ("_in_flight", "_lock", "_peak", "_total")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._in_flight = 0
        self._peak = 0
        self._total = 0

    def acquire(self) -> int:
        """Count one more request in flight; return the new count."""
        with self._lock:
            self._in_flight += 1
            if self._in_flight > self._peak:
                self._peak = self._in_flight
            return self._in_flight

    def release(self) -> int:
        """Count one request as finished; return the new in-flight count."""
        with self._lock:
            if self._in_flight == 0:
                msg = "RequestCounter.release() called more times than acquire()"
                raise RuntimeError(msg)
            self._in_flight -= 1
            self._total += 1
            return self._in_flight

    @contextmanager
    def track(self) -> Iterator[int]:
        """Hold one in-flight slot for the duration of the block."""
        count = self.acquire()
        try:
            yield count
        finally:
            self.release()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    @property
    def peak(self) -> int:
        with self._lock:
            return self._peak

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    def __call__(self, next: Any) -> Handler:
        inner = ensure_async(next)

        async def counted(request: Request, writer: ResponseWriter) -> None:
            with self.track():
                await inner(request, writer)

        return counted


def count(next: Any) -> Handler:
    """Wrap *next* with its own private ``RequestCounter``.

    The counter is exposed as ``handler.counter``::

        handler = count(index)
        mux.handle("/", handler)
        handler.counter.total
    """
    counter = RequestCounter()
    counted = counter(next)
    counted.counter = counter  # type: ignore[attr-defined]
    return counted
