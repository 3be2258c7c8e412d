"""Tests for wren.testing — the in-process client and multipart encoder."""

from wren.app import App
from wren.http.request import Request
from wren.testing import TestClient, encode_multipart


class TestEncodeMultipart:
    def test_layout(self) -> None:
        body, content_type = encode_multipart(
            {"title": "Hi"}, [("doc", "a.txt", b"abc", "text/plain")], boundary="XyZ"
        )
        assert content_type == "multipart/form-data; boundary=XyZ"
        assert body.startswith(b'--XyZ\r\nContent-Disposition: form-data; name="title"\r\n\r\nHi\r\n')
        assert b'name="doc"; filename="a.txt"\r\nContent-Type: text/plain\r\n\r\nabc\r\n' in body
        assert body.endswith(b"--XyZ--\r\n")

    def test_random_boundary(self) -> None:
        _, first = encode_multipart(None, [])
        _, second = encode_multipart(None, [])
        assert first != second


class TestClientRequests:
    async def test_query_merging(self) -> None:
        app = App()

        @app.get("/q")
        def q(request: Request):
            return request.query.to_dict()

        async with TestClient(app) as client:
            response = await client.get("/q?a=1", query={"b": "2"})
        assert response.json() == {"a": "1", "b": "2"}

    async def test_headers_sent(self) -> None:
        app = App()

        @app.get("/h")
        def h(request: Request):
            return {"token": request.headers.get("x-token")}

        async with TestClient(app) as client:
            response = await client.get("/h", headers={"X-Token": "abc"})
        assert response.json() == {"token": "abc"}

    async def test_raw_body_and_methods(self) -> None:
        app = App()

        @app.route("/echo", methods=["PUT", "PATCH"])
        async def echo(request: Request):
            return {"method": request.method, "body": await request.text()}

        async with TestClient(app) as client:
            put = await client.put("/echo", body=b"one")
            patch = await client.patch("/echo", body=b"two")
        assert put.json() == {"method": "PUT", "body": "one"}
        assert patch.json() == {"method": "PATCH", "body": "two"}

    async def test_content_type_split_from_headers(self) -> None:
        app = App()

        @app.get("/")
        def index():
            return {"a": 1}

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.content_type == "application/json"
        assert response.header("content-length") == "8"
        assert all(name != "content-type" for name, _ in response.headers)
