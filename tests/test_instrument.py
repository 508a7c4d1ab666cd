"""Tests for muxwrap.middleware.instrument: ElapsedTime and RequestCounter."""

import logging
import threading
import time

import anyio
import pytest

from muxwrap.app import Mux
from muxwrap.http.request import Request
from muxwrap.http.response import ResponseWriter
from muxwrap.middleware.instrument import ElapsedTime, RequestCounter, count, log_elapsed
from muxwrap.testing import TestClient


@pytest.mark.anyio
class TestElapsedTime:
    async def test_reports_handler_duration(self) -> None:
        reported: list[float] = []

        def sleepy(request, writer):
            time.sleep(0.05)
            writer.write("done")

        mux = Mux(ElapsedTime(lambda writer, request, elapsed: reported.append(elapsed)))
        mux.get("/slow", sleepy)
        async with TestClient(mux) as client:
            response = await client.get("/slow")

        assert response.text == "done"
        assert len(reported) == 1
        assert 0.05 <= reported[0] < 0.5

    async def test_covers_inner_middleware(self) -> None:
        reported: list[float] = []

        def slow_middleware(next):
            async def handler(request, writer):
                time.sleep(0.03)
                await next(request, writer)

            return handler

        mux = Mux(ElapsedTime(lambda w, r, elapsed: reported.append(elapsed)), slow_middleware)
        mux.handle("/", lambda request, writer: time.sleep(0.03))
        async with TestClient(mux) as client:
            await client.get("/")

        assert 0.06 <= reported[0] < 0.5

    async def test_callback_sees_writer_and_request(self) -> None:
        captured: list[tuple[int, str]] = []
        timer = ElapsedTime(lambda writer, request, elapsed: captured.append((writer.status, request.path)))

        async def teapot(request, writer):
            writer.write_header(418)

        await timer(teapot)(Request("GET", "/tea"), ResponseWriter())
        assert captured == [(418, "/tea")]

    async def test_default_callback_logs_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = Mux(ElapsedTime())
        mux.get("/", lambda request, writer: writer.write("ok"))

        with caplog.at_level(logging.DEBUG, logger="muxwrap.middleware"):
            async with TestClient(mux) as client:
                await client.get("/?q=1")

        records = [r for r in caplog.records if r.name == "muxwrap.middleware"]
        assert len(records) == 1
        assert records[0].levelno == logging.DEBUG
        assert records[0].getMessage().startswith("/?q=1 took ")

    def test_default_callback(self) -> None:
        assert ElapsedTime().callback is log_elapsed


class TestRequestCounter:
    def test_track_acquires_and_releases(self) -> None:
        counter = RequestCounter()
        with counter.track() as current:
            assert current == 1
            assert counter.in_flight == 1
        assert counter.in_flight == 0
        assert counter.total == 1

    def test_track_releases_on_error(self) -> None:
        counter = RequestCounter()
        with pytest.raises(KeyError), counter.track():
            raise KeyError("boom")
        assert counter.in_flight == 0

    def test_release_without_acquire_raises(self) -> None:
        with pytest.raises(RuntimeError, match="more times than acquire"):
            RequestCounter().release()

    def test_threads_never_corrupt_the_count(self) -> None:
        counter = RequestCounter()
        workers = 8
        rounds = 2000

        def hammer() -> None:
            for _ in range(rounds):
                with counter.track():
                    pass

        threads = [threading.Thread(target=hammer) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter.in_flight == 0
        assert counter.total == workers * rounds
        assert 1 <= counter.peak <= workers


@pytest.mark.anyio
class TestRequestCounterMiddleware:
    async def test_concurrent_requests(self) -> None:
        requests = 20
        counter = RequestCounter()
        observed: list[int] = []

        async def slow(request, writer):
            observed.append(counter.in_flight)
            await anyio.sleep(0.02)
            writer.write("ok")

        mux = Mux(counter)
        mux.get("/slow", slow)

        async with TestClient(mux) as client:
            async with anyio.create_task_group() as tg:
                for _ in range(requests):
                    tg.start_soon(client.get, "/slow")

        assert len(observed) == requests
        assert max(observed) <= requests
        assert 2 <= counter.peak <= requests
        assert counter.in_flight == 0
        assert counter.total == requests

    async def test_count_returns_to_zero_after_handler_error(self) -> None:
        counter = RequestCounter()
        mux = Mux(counter)

        async def broken(request, writer):
            assert counter.in_flight == 1
            raise ValueError("boom")

        mux.get("/", broken)
        async with TestClient(mux) as client:
            with pytest.raises(ValueError):
                await client.get("/")
        assert counter.in_flight == 0

    async def test_count_wraps_a_single_handler(self) -> None:
        handler = count(lambda request, writer: writer.write("hi"))
        mux = Mux()
        mux.handle("/", handler)
        mux.handle("/other", lambda request, writer: None)

        async with TestClient(mux) as client:
            await client.get("/")
            await client.get("/")
            await client.get("/other")

        assert handler.counter.total == 2
        assert handler.counter.in_flight == 0
