"""Development server.

Starts a pounce ASGI server with the live wren App object. Requires
the ``server`` extra (``pip install wren[server]``).
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


def configure_logging(level: str = "info") -> None:
    """Send ``wren.*`` log records to stderr at *level*.

    Only touches the ``wren`` logger, and only once: calling it again
    adjusts the level without stacking handlers.
    """
    root = logging.getLogger("wren")
    root.setLevel(level.upper())
    if not any(getattr(h, "_wren_dev", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        handler._wren_dev = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a pounce server with the given App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but wren has a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        app_path: Optional ``"module:attribute"`` import string, so
            pounce can reimport the app on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    server = Server(config, app, app_path=app_path)
    server.run()
