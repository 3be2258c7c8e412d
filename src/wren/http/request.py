"""HTTP request context.

Metadata is frozen at creation. Stages that need to change what later
stages see (body parsers, upload handling) return an updated copy via the
``with_*`` methods; ad-hoc per-request data goes in ``state``, a dict
shared by every copy of the same request.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from wren._internal.asgi import Receive
from wren.errors import PayloadTooLarge
from wren.http.headers import Headers
from wren.http.query import QueryParams

if TYPE_CHECKING:
    from wren.http.forms import FormData
    from wren.http.uploads import StoredFile, UploadLimits


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request as it travels through the pipeline.

    Body bytes are read lazily via ``.body()``, ``.json()``, ``.form()``
    and cached, so several stages can look at the body without draining
    the ASGI receive channel twice.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Parsed body attached by a body-parsing stage (JSON, form, multipart)
    body_data: Any = None

    # Files attached by an upload stage
    uploads: tuple[StoredFile, ...] = ()

    # Per-request scratch space, shared across copies
    state: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # Maximum body size in bytes (None = unlimited)
    max_body_size: int | None = field(default=None, repr=False)

    # Private: mutable cache for body and parsed form data
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Request path plus query string, as sent."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    @property
    def accepts_json(self) -> bool:
        """True if the client asked for JSON or sent a JSON body."""
        accept = self.headers.get("accept", "")
        return "application/json" in accept or "json" in (self.content_type or "")

    @property
    def body_dict(self) -> dict[str, Any]:
        """``body_data`` when it is a mapping, else an empty dict."""
        return dict(self.body_data) if isinstance(self.body_data, dict) else {}

    @property
    def file(self) -> StoredFile | None:
        """First uploaded file, or ``None``."""
        return self.uploads[0] if self.uploads else None

    @property
    def files(self) -> tuple[StoredFile, ...]:
        """All uploaded files, in the order received."""
        return self.uploads

    # -- Copies --

    def with_body(self, data: Any) -> Request:
        """Return a copy carrying parsed body data."""
        return replace(self, body_data=data)

    def with_files(self, uploads: tuple[StoredFile, ...]) -> Request:
        """Return a copy carrying stored upload descriptors."""
        return replace(self, uploads=uploads)

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the matched route's path parameters."""
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Cached, so the ASGI receive channel is consumed once.

        Raises ``PayloadTooLarge`` if the body exceeds ``max_body_size``.
        """
        if "_body" in self._cache:
            return self._cache["_body"]

        limit = self.max_body_size
        declared = self.content_length
        if limit is not None and declared is not None and declared > limit:
            raise PayloadTooLarge(limit)

        chunks: list[bytes] = []
        received = 0
        async for chunk in self.stream():
            received += len(chunk)
            if limit is not None and received > limit:
                raise PayloadTooLarge(limit)
            chunks.append(chunk)

        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON. Raises ``ValueError`` on malformed input."""
        import json as json_module

        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self, limits: UploadLimits | None = None) -> FormData:
        """Parse the body as form data (URL-encoded or multipart).

        Result is cached. *limits* applies to multipart bodies on the
        first parse only.

        Raises:
            ValueError: If Content-Type is not a form encoding.
            UploadLimitError: If a multipart limit is exceeded.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        from wren.http.forms import parse_form_data

        ct = self.content_type or "application/x-www-form-urlencoded"
        raw = await self.body()
        result = await parse_form_data(raw, ct, limits)

        self._cache["_form"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        *,
        max_body_size: int | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
            max_body_size=max_body_size,
        )
