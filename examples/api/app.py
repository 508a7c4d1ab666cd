"""Widget API, a nested mux with instrumentation.

Demonstrates:
- A sub-mux embedded under ``/api/`` (the prefix is stripped)
- Per-method handlers sharing one pattern
- ElapsedTime reporting through a custom callback
- A RequestCounter shared by the whole app

Run:
    cd examples/api && python app.py
"""

import logging
import threading

from muxwrap import ElapsedTime, Mux, Request, RequestCounter, ResponseWriter

logger = logging.getLogger("example.api")

counter = RequestCounter()
timings: list[tuple[str, float]] = []


def record(writer: ResponseWriter, request: Request, elapsed: float) -> None:
    timings.append((request.url, elapsed))
    logger.info("%s %s -> %d in %.3fms", request.method, request.url, writer.status, elapsed * 1000)


mux = Mux(ElapsedTime(record))
mux.push(counter)

api = Mux()
_widgets: dict[str, str] = {}
_lock = threading.Lock()


@api.get("/widgets")
def list_widgets(request: Request, writer: ResponseWriter) -> None:
    with _lock:
        names = sorted(_widgets)
    writer.set_header("Content-Type", "application/json")
    writer.write('{"widgets": [%s]}' % ", ".join(f'"{name}"' for name in names))


@api.post("/widgets")
async def create_widget(request: Request, writer: ResponseWriter) -> None:
    payload = await request.json()
    name = payload.get("name", "")
    if not name:
        writer.write_header(400)
        writer.write("name required")
        return
    with _lock:
        _widgets[name] = payload.get("color", "grey")
    writer.write_header(201)
    writer.write(name)


@api.delete("/widgets")
def clear_widgets(request: Request, writer: ResponseWriter) -> None:
    with _lock:
        _widgets.clear()
    writer.write_header(204)


@mux.get("/stats")
def stats(request: Request, writer: ResponseWriter) -> None:
    writer.write(f"in_flight={counter.in_flight} total={counter.total} peak={counter.peak}")


mux.embed("/api/", api)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    mux.run()
