"""ASGI handler — the dispatcher.

The only component that touches raw ASGI directly. Converts the scope
to a typed Request, runs the stage chain, resolves the route, runs the
route's own stages and the handler, and sends exactly one Response
back through ASGI send().
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from kida import Environment

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.errors import NotFound, ResponseAlreadyFinalized
from wren.http.request import Request
from wren.http.response import Response
from wren.pipeline.chain import StageEntry, apply_after_hooks, run_stages
from wren.pipeline.outcome import Continue, Fail, Halt, resolve
from wren.routing.route import RouteMatch
from wren.routing.router import Router
from wren.server.errors import run_error_channel
from wren.server.negotiation import has_explicit_status, negotiate
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")


class ResponseSlot:
    """Holds the one response a request may produce.

    ``finalize`` accepts a response once; a second call raises
    ``ResponseAlreadyFinalized``.
    """

    __slots__ = ("_response",)

    def __init__(self) -> None:
        self._response: Response | None = None

    @property
    def finalized(self) -> bool:
        return self._response is not None

    @property
    def response(self) -> Response:
        if self._response is None:
            msg = "No response has been finalized for this request."
            raise RuntimeError(msg)
        return self._response

    def finalize(self, response: Response) -> Response:
        if self._response is not None:
            msg = (
                f"Response already finalized with status {self._response.status}; "
                f"refusing a second response with status {response.status}."
            )
            raise ResponseAlreadyFinalized(msg)
        self._response = response
        return response


def default_not_found(request: Request) -> None:
    """Terminal not-found stage: hand a 404 to the error channel."""
    raise NotFound(f"Cannot {request.method} {request.path}")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    stages: tuple[StageEntry, ...],
    error_stages: tuple[StageEntry, ...],
    not_found: Callable[..., Any] = default_not_found,
    kida_env: Environment | None = None,
    debug: bool = False,
    max_body_size: int | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, max_body_size=max_body_size)
    slot = ResponseSlot()
    trail: list[Any] = []
    response, request = await dispatch(
        request,
        trail,
        router=router,
        stages=stages,
        error_stages=error_stages,
        not_found=not_found,
        kida_env=kida_env,
        debug=debug,
    )

    try:
        response = await apply_after_hooks(trail, request, response)
    except Exception:
        logger.exception("After-hook failed for %s %s", request.method, request.path)
        response = Response(
            body="Internal Server Error",
            status=500,
            content_type="text/plain; charset=utf-8",
        )

    slot.finalize(response)
    await send_response(slot.response, send, head=request.method == "HEAD")


async def dispatch(
    request: Request,
    trail: list[Any],
    *,
    router: Router,
    stages: tuple[StageEntry, ...],
    error_stages: tuple[StageEntry, ...],
    not_found: Callable[..., Any],
    kida_env: Environment | None,
    debug: bool,
) -> tuple[Response, Request]:
    """Run stages, route, and handler; return the response and the final request.

    Failures anywhere go to the error channel, which always answers.
    Error-stages see the request as it entered the chain that failed.
    """
    current = request
    try:
        current, halt = await run_stages(stages, current, trail)
        if halt is not None:
            return negotiate(halt.value, kida_env=kida_env), current

        try:
            match = router.match(current.method, current.path)
        except NotFound:
            return await _run_not_found(not_found, current, kida_env), current

        current = current.with_path_params(match.path_params)
        current, halt = await run_stages(match.route.stages, current, trail)
        if halt is not None:
            return negotiate(halt.value, kida_env=kida_env), current

        result = await _invoke_handler(match, current)
        return negotiate(result, kida_env=kida_env), current

    except Exception as exc:
        response = await run_error_channel(exc, current, error_stages, kida_env, debug)
        return response, current


async def _run_not_found(
    not_found: Callable[..., Any],
    request: Request,
    kida_env: Environment | None,
) -> Response:
    outcome = resolve(await invoke(not_found, request))
    match outcome:
        case Fail(error=error):
            raise error
        case Continue():
            raise NotFound(f"Cannot {request.method} {request.path}")
        case Halt(value=value):
            response = negotiate(value, kida_env=kida_env)
            if not has_explicit_status(value) and response.status == 200:
                response = response.with_status(404)
            return response


async def _invoke_handler(match: RouteMatch, request: Request) -> Any:
    """Call the matched route handler with injected keyword arguments."""
    handler = match.route.handler
    kwargs = _build_handler_kwargs(handler, request, match.path_params)
    return await invoke(handler, **kwargs)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, str],
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from request + path params.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, converted when annotated ``int``,
       ``float`` or ``bool``)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            kwargs[name] = _coerce_param(param.annotation, path_params[name])

    return kwargs


_BOOL_VALUES = {
    "true": True,
    "1": True,
    "yes": True,
    "on": True,
    "false": False,
    "0": False,
    "no": False,
    "off": False,
}


def _coerce_param(annotation: Any, value: str) -> Any:
    """Convert a path segment for an ``int``/``float``/``bool`` annotation.

    Anything else, or a value that does not convert, stays the raw string.
    """
    if annotation is bool:
        return _BOOL_VALUES.get(value.lower(), value)
    if annotation is int or annotation is float:
        try:
            return annotation(value)
        except ValueError:
            return value
    return value
