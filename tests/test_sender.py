"""Tests for wren.server.sender response emission rules."""

from wren.http.response import Response
from wren.server.sender import send_response


async def _capture(response: Response, *, head: bool = False) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send, head=head)
    return messages


class TestSendResponse:
    async def test_start_and_body(self) -> None:
        messages = await _capture(Response("hello").with_header("X-A", "1"))
        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == b"text/html; charset=utf-8"
        assert headers[b"x-a"] == b"1"
        assert headers[b"content-length"] == b"5"
        assert messages[1] == {"type": "http.response.body", "body": b"hello"}

    async def test_204_drops_body(self) -> None:
        messages = await _capture(Response("unexpected-body").with_status(204))
        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_304_drops_body(self) -> None:
        messages = await _capture(Response("cached").with_status(304))
        assert messages[1]["body"] == b""

    async def test_head_keeps_length(self) -> None:
        messages = await _capture(Response("hello"), head=True)
        assert dict(messages[0]["headers"])[b"content-length"] == b"5"
        assert messages[1]["body"] == b""
