"""Error channel — routes failures through registered error-stages.

Each error-stage whose filter matches sees ``(error, request)`` in
registration order and either answers (any response value), defers
(``None``), or raises. A raised error, or an answer that fails to
render, replaces the current one and propagation continues with the
next error-stage. When no stage
answers, ``default_error_response`` does.
"""

import json as json_module
import logging

from kida import Environment

from wren._internal.invoke import invoke
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.pipeline.chain import StageEntry
from wren.pipeline.outcome import Continue, Fail, Halt, resolve
from wren.server.negotiation import has_explicit_status, negotiate

logger = logging.getLogger("wren.server")


def error_status(exc: Exception) -> int:
    """HTTP status for *exc*: its own for HTTPError, else 500."""
    return exc.status if isinstance(exc, HTTPError) else 500


async def run_error_channel(
    exc: Exception,
    request: Request,
    error_stages: tuple[StageEntry, ...],
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    """Produce the response for a failed request."""
    current = exc
    for entry in error_stages:
        if not entry.applies_to(request.path) or not entry.handles(current):
            continue
        try:
            outcome = resolve(await invoke(entry.stage, current, request))
        except Exception as raised:
            logger.debug("Error-stage %r raised %r", entry.stage, raised)
            current = raised
            continue

        match outcome:
            case Fail(error=error):
                current = error
            case Continue():
                pass
            case Halt(value=value):
                try:
                    response = negotiate(value, kida_env=kida_env)
                except Exception as raised:
                    logger.debug("Error-stage %r answered with %r: %r", entry.stage, value, raised)
                    current = raised
                    continue
                # Keep the error's status unless the stage chose one
                if not has_explicit_status(value) and response.status == 200:
                    response = response.with_status(error_status(current))
                return response

    return default_error_response(current, request, debug)


def default_error_response(exc: Exception, request: Request, debug: bool) -> Response:
    """Terminal error-stage: always answers.

    ``HTTPError`` -> its own status and detail (JSON when the client
    accepts JSON). Anything else is logged with its traceback and
    answered with a generic 500.
    """
    if isinstance(exc, HTTPError):
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
        return _detail_response(
            exc.status, exc.detail or f"Error {exc.status}", request, exc.headers
        )

    logger.exception("500 %s %s", request.method, request.path, exc_info=exc)
    detail = "Internal Server Error"
    if debug:
        detail = f"{detail}: {type(exc).__name__}: {exc}"
    return _detail_response(500, detail, request)


def _detail_response(
    status: int,
    detail: str,
    request: Request,
    headers: tuple[tuple[str, str], ...] = (),
) -> Response:
    if request.accepts_json:
        response = Response(
            body=json_module.dumps({"error": detail, "status": status}),
            status=status,
            content_type="application/json",
        )
    else:
        response = Response(body=detail, status=status, content_type="text/plain; charset=utf-8")
    for name, value in headers:
        response = response.with_header(name, value)
    return response
