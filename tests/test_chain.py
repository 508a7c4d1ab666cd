"""Tests for muxwrap.middleware.chain: middleware composition order."""

import pytest

from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.middleware.chain import use


def _writes(payload: str):
    """Middleware that writes *payload* before calling next."""

    def middleware(next):
        async def handler(request, writer):
            writer.write(payload)
            await next(request, writer)

        return handler

    return middleware


def _records(name: str, log: list[str]):
    """Middleware that logs its before/after steps."""

    def middleware(next):
        async def handler(request, writer):
            log.append(f"{name}:before")
            await next(request, writer)
            log.append(f"{name}:after")

        return handler

    return middleware


async def _four(request: Request, writer: ResponseWriter) -> None:
    writer.write("4")


@pytest.mark.anyio
class TestUse:
    async def test_first_middleware_runs_first(self) -> None:
        writer = ResponseWriter()
        handler = use(_four, _writes("1"), _writes("2"), _writes("3"))
        await handler(Request("GET", "/"), writer)
        assert writer.body == b"1234"

    async def test_after_steps_run_in_reverse(self) -> None:
        log: list[str] = []

        async def terminal(request, writer):
            log.append("handler")

        handler = use(terminal, _records("a", log), _records("b", log), _records("c", log))
        await handler(Request("GET", "/"), ResponseWriter())
        assert log == [
            "a:before",
            "b:before",
            "c:before",
            "handler",
            "c:after",
            "b:after",
            "a:after",
        ]

    async def test_short_circuit_skips_inner_chain(self) -> None:
        def deny(next):
            async def handler(request, writer):
                writer.write_header(403)

            return handler

        writer = ResponseWriter()
        await use(_four, deny, _writes("never"))(Request("GET", "/"), writer)
        assert writer.status == 403
        assert writer.body == b""

    async def test_sync_handler_is_adapted(self) -> None:
        def plain(request, writer):
            writer.write("sync")

        writer = ResponseWriter()
        await use(plain, _writes(">"))(Request("GET", "/"), writer)
        assert writer.body == b">sync"


class TestUseWithoutMiddleware:
    def test_async_handler_returned_unchanged(self) -> None:
        assert use(_four) is _four

    def test_composition_calls_only_factories(self) -> None:
        built: list[str] = []

        def factory(next):
            built.append("factory")

            async def handler(request, writer):
                raise AssertionError("handler must not run during composition")

            return handler

        use(_four, factory, factory)
        assert built == ["factory", "factory"]
