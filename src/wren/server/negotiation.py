"""Content negotiation — maps return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from kida import Environment

from wren.errors import ConfigurationError
from wren.http.response import Redirect, Response
from wren.templating.integration import render_inline, render_template
from wren.templating.returns import InlineTemplate, Template


def negotiate(value: Any, *, kida_env: Environment | None = None) -> Response:
    """Convert a handler's (or stage's) return value to a Response.

    Dispatch order:

    1. ``Response``         -> pass through
    2. ``Redirect``         -> 302 with Location header
    3. ``Template``         -> render via kida -> Response
    4. ``InlineTemplate``   -> render string source via kida -> Response
    5. ``str``              -> 200, text/html
    6. ``bytes``            -> 200, application/octet-stream
    7. ``dict`` / ``list``  -> 200, application/json
    8. ``(value, int)``     -> negotiate value, override status
    9. ``(value, int, dict)`` -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case Template():
            if kida_env is None:
                msg = (
                    "Template return type requires kida integration. "
                    "Ensure template_dir in AppConfig points to an existing directory."
                )
                raise ConfigurationError(msg)
            return Response(body=render_template(kida_env, value))
        case InlineTemplate():
            return Response(body=render_inline(kida_env, value))
        case str():
            return Response(body=value, content_type="text/html; charset=utf-8")
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json",
            )
        case (inner, int() as status):
            return negotiate(inner, kida_env=kida_env).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner, kida_env=kida_env).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return str, dict, list, bytes, Template, InlineTemplate, "
                f"Response, or Redirect."
            )
            raise TypeError(msg)


def has_explicit_status(value: Any) -> bool:
    """True if *value* sets its own status (a Response, Redirect, or status tuple)."""
    match value:
        case Response() | Redirect():
            return True
        case (_, int()) | (_, int(), dict()):
            return True
        case _:
            return False
