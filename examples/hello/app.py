"""Hello World, the smallest muxwrap app.

Demonstrates per-method registration, the decorator form, a raw handler
that accepts every method, and the 405 returned for the wrong method.

Run:
    python app.py
"""

from muxwrap import Mux, Request, ResponseWriter

mux = Mux()


@mux.get("/")
def index(request: Request, writer: ResponseWriter) -> None:
    writer.write("Hello, World!")


@mux.post("/echo")
async def echo(request: Request, writer: ResponseWriter) -> None:
    writer.set_header("Content-Type", request.content_type or "text/plain")
    writer.write(await request.body())


def ping(request: Request, writer: ResponseWriter) -> None:
    writer.write(f"pong ({request.method})")


mux.handle("/ping", ping)


if __name__ == "__main__":
    mux.run()
