"""Body-parsing stages: JSON and URL-encoded forms.

Each stage reads the body only when the Content-Type matches, then
continues with ``request.with_body(parsed)`` so later stages and the
handler find the result on ``request.body_data``. Other requests pass
through untouched.
"""

import json as json_module
from dataclasses import dataclass

from wren.errors import BadRequest, PayloadTooLarge
from wren.http.forms import media_type, parse_urlencoded
from wren.http.request import Request
from wren.pipeline.outcome import Continue


def _is_json(content_type: str | None) -> bool:
    kind = media_type(content_type)
    return kind == "application/json" or kind.endswith("+json")


@dataclass(frozen=True, slots=True)
class JSONBody:
    """Parse ``application/json`` bodies.

    An empty body parses as ``{}``. Malformed JSON is a ``BadRequest``;
    a body over *limit* bytes is ``PayloadTooLarge``.

    Usage::

        app.use(JSONBody())
    """

    limit: int | None = None

    async def __call__(self, request: Request) -> Continue | None:
        if not _is_json(request.content_type):
            return None

        raw = await request.body()
        if self.limit is not None and len(raw) > self.limit:
            raise PayloadTooLarge(self.limit)
        if not raw.strip():
            return Continue(request.with_body({}))

        try:
            data = json_module.loads(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise BadRequest(f"Malformed JSON body: {exc}") from exc
        return Continue(request.with_body(data))


@dataclass(frozen=True, slots=True)
class FormBody:
    """Parse ``application/x-www-form-urlencoded`` bodies into a dict.

    Repeated keys become lists, single keys plain strings.
    """

    limit: int | None = None

    async def __call__(self, request: Request) -> Continue | None:
        if media_type(request.content_type) != "application/x-www-form-urlencoded":
            return None

        raw = await request.body()
        if self.limit is not None and len(raw) > self.limit:
            raise PayloadTooLarge(self.limit)
        try:
            form = parse_urlencoded(raw)
        except UnicodeDecodeError as exc:
            raise BadRequest("Form body is not valid UTF-8") from exc
        return Continue(request.with_body(form.to_dict()))
