"""Access logging stage.

Emits one line per request on the ``wren.access`` logger, in the
compact development format::

    GET /users/42 200 1.234 ms - 57
"""

import logging
import time

from wren.http.request import Request
from wren.http.response import Response

access_logger = logging.getLogger("wren.access")

_STARTED = "wren.logger.started"


class RequestLogger:
    """Log method, URL, status, elapsed time and body length.

    The start time is recorded when the stage runs; the line is written
    from the ``after`` hook, so it covers handler time and error
    responses too. Register it first to time the whole chain.

    Usage::

        app.use(RequestLogger())
    """

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or access_logger

    def __call__(self, request: Request) -> None:
        request.state[_STARTED] = time.perf_counter()

    def after(self, request: Request, response: Response) -> Response:
        started = request.state.get(_STARTED)
        elapsed = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        self._logger.info(
            "%s %s %d %.3f ms - %s",
            request.method,
            request.url,
            response.status,
            elapsed,
            len(response.body_bytes) if response.body else "-",
        )
        return response
