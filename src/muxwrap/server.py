"""Serve a Mux with pounce.

Pounce's ``run()`` takes an import string (e.g., ``"myapp:mux"``), but
here we hold a live ``Mux`` object, so ``pounce.Server`` is used directly
with the ASGI callable.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from muxwrap.config import MuxConfig

if TYPE_CHECKING:
    from muxwrap.app import Mux

logger = logging.getLogger("muxwrap.server")


def run_server(
    mux: Mux,
    host: str,
    port: int,
    config: MuxConfig | None = None,
) -> None:
    """Start a pounce server for *mux* and block until it stops.

    In debug mode a single worker with reload is used; otherwise the
    worker count comes from ``config.workers`` (0 = one per CPU).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    cfg = config or MuxConfig()
    server_config = ServerConfig(
        host=host,
        port=port,
        workers=1 if cfg.debug else cfg.workers,
        reload=cfg.debug,
        log_level=cfg.log_level,
        log_format=cfg.log_format,
        max_connections=cfg.max_connections,
        keep_alive_timeout=cfg.keep_alive_timeout,
        request_timeout=cfg.request_timeout,
    )
    logger.info(
        "serving %d patterns on http://%s:%d", len(mux.routes), host, port
    )
    server = Server(server_config, mux)
    server.run()
