"""Tests for the hello example."""

import pytest

from muxwrap.testing import TestClient

pytestmark = pytest.mark.anyio


class TestHelloMux:
    """Every route in the hello example, through the ASGI pipeline."""

    async def test_index(self, example_mux) -> None:
        async with TestClient(example_mux) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Hello, World!"

    async def test_index_rejects_post(self, example_mux) -> None:
        async with TestClient(example_mux) as client:
            response = await client.post("/")
            assert response.status == 405
            assert response.header("allow") == "GET"

    async def test_echo(self, example_mux) -> None:
        async with TestClient(example_mux) as client:
            response = await client.post(
                "/echo", body=b"hi there", headers={"Content-Type": "text/x-note"}
            )
            assert response.status == 200
            assert response.text == "hi there"
            assert response.content_type == "text/x-note"

    async def test_raw_handler_accepts_any_method(self, example_mux) -> None:
        async with TestClient(example_mux) as client:
            for method in ("GET", "PUT", "DELETE", "PATCH"):
                response = await client.request(method, "/ping")
                assert response.status == 200
                assert response.text == f"pong ({method})"

    async def test_unknown_path(self, example_mux) -> None:
        async with TestClient(example_mux) as client:
            response = await client.get("/nowhere")
            assert response.status == 404
            assert response.text == "404 page not found\n"
