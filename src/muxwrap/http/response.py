"""Response writing.

``ResponseWriter`` is the mutable capability handlers and middleware write
to, one per request. ``Response`` is the frozen snapshot taken once the
middleware chain returns; the sender and the test client only ever see
the snapshot.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger("muxwrap.http")

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """A finished HTTP response."""

    body: bytes = b""
    status: int = 200
    content_type: str = DEFAULT_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive)."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return default

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")


class ResponseWriter:
    """Accumulates status, headers and body for one request.

    Mirrors the usual writer contract:

    - ``write_header(status)`` commits the status once; later calls are
      ignored with a warning.
    - ``write(data)`` commits 200 if no status was written yet.

    Usage::

        async def hello(request, writer):
            writer.set_header("Content-Type", "text/html; charset=utf-8")
            writer.write("<h1>hi</h1>")
    """

    __slots__ = ("_body", "_status", "content_type", "headers")

    def __init__(self) -> None:
        self.headers: list[tuple[str, str]] = []
        self.content_type: str = DEFAULT_CONTENT_TYPE
        self._status: int | None = None
        self._body: list[bytes] = []

    # -- Headers --

    def set_header(self, name: str, value: str) -> None:
        """Replace every value of header *name* with *value*."""
        if name.lower() == "content-type":
            self.content_type = value
            return
        wanted = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != wanted]
        self.headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        """Append a value for header *name*, keeping existing ones."""
        self.headers.append((name, value))

    def get_header(self, name: str) -> str | None:
        if name.lower() == "content-type":
            return self.content_type
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    # -- Status and body --

    def write_header(self, status: int) -> None:
        """Commit the response status. Only the first call has an effect."""
        if self._status is not None:
            logger.warning(
                "superfluous write_header(%d); status already %d", status, self._status
            )
            return
        self._status = status

    def write(self, data: str | bytes) -> int:
        """Append *data* to the body and return the number of bytes written."""
        if self._status is None:
            self._status = 200
        chunk = data.encode("utf-8") if isinstance(data, str) else data
        self._body.append(chunk)
        return len(chunk)

    @property
    def status(self) -> int:
        """The committed status, or 200 if nothing was committed."""
        return self._status if self._status is not None else 200

    @property
    def written(self) -> bool:
        return self._status is not None

    @property
    def body(self) -> bytes:
        return b"".join(self._body)

    def to_response(self) -> Response:
        """Freeze the current state into a ``Response``."""
        return Response(
            body=self.body,
            status=self.status,
            content_type=self.content_type,
            headers=tuple(self.headers),
        )
