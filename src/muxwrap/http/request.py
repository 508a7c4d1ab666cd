"""Immutable HTTP request.

Frozen metadata with async body access. Prefix stripping for embedded
handlers produces a new ``Request`` through ``with_path()``; the original
is never mutated, so outer middleware keeps seeing the path it received.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs

from muxwrap._internal.asgi import Receive, Scope
from muxwrap.http.headers import Headers


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is what routing sees. ``root_path`` accumulates the prefixes
    stripped by ``Mux.embed()``, so ``root_path + path`` is always the
    path the client asked for.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query_string: bytes = b""
    root_path: str = ""
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = _empty_receive

    # Private: body cache, shared with copies made by with_path()
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def url(self) -> str:
        """Full request path as the client sent it, with query string."""
        full = f"{self.root_path}{self.path}"
        if self.query_string:
            return f"{full}?{self.query_string.decode('latin-1')}"
        return full

    @property
    def query(self) -> dict[str, str]:
        """First value of each query parameter."""
        parsed = parse_qs(self.query_string.decode("latin-1"), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    # -- Derived requests --

    def with_path(self, path: str, root_path: str | None = None) -> Request:
        """Return a copy routed at *path* (and optionally a new root path)."""
        if root_path is None:
            return replace(self, path=path)
        return replace(self, path=path, root_path=root_path)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body. Cached after the first call."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        raw = await self.body()
        return json_module.loads(raw)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            root_path=scope.get("root_path", ""),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
