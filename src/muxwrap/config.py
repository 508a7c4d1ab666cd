"""Mux configuration.

MuxConfig is a frozen dataclass: immutable after creation, no string-key
dict lookups. Only ``Mux.run()`` reads it; the routing layer itself has
no tunables.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MuxConfig:
    """Server settings used by ``Mux.run()``.

    All fields have sensible defaults. Override what you need::

        config = MuxConfig(port=3000, workers=4)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False  # single worker + reload
    workers: int = 0  # 0 = auto-detect from CPU count

    # Logging (forwarded to pounce)
    log_level: str = "info"
    log_format: str = "text"

    # Connections
    max_connections: int = 1000
    keep_alive_timeout: float = 5.0
    request_timeout: float = 30.0
