"""ASGI response sending.

Every request ends here exactly once: one ``http.response.start``
followed by one ``http.response.body`` message.
"""

from typing import Any

from wren._internal.asgi import Send
from wren.http.response import Response

# 1xx, 204 and 304 responses never carry a body
_NO_BODY = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    headers = [(b"content-type", response.content_type.encode("latin-1"))]
    headers.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    )
    headers.append((b"content-length", str(content_length).encode("latin-1")))
    return headers


def response_messages(response: Response, *, head: bool = False) -> list[dict[str, Any]]:
    """The ASGI messages for *response*.

    HEAD responses keep the Content-Length of the full body but carry
    no body bytes.
    """
    status = response.status
    body = b"" if status < 200 or status in _NO_BODY else response.body_bytes
    return [
        {
            "type": "http.response.start",
            "status": status,
            "headers": _encode_headers(response, len(body)),
        },
        {"type": "http.response.body", "body": b"" if head else body},
    ]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a Response into ASGI ``send()`` calls."""
    for message in response_messages(response, head=head):
        await send(message)
