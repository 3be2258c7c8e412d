"""Tests for wren.http.headers — case-insensitive request headers."""

import pytest

from wren.http.headers import Headers


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        headers = Headers(((b"content-type", b"text/plain"),))
        assert headers["Content-Type"] == "text/plain"
        assert "CONTENT-TYPE" in headers

    def test_missing(self) -> None:
        headers = Headers()
        assert headers.get("x-missing") is None
        assert headers.get("x-missing", "d") == "d"
        with pytest.raises(KeyError):
            headers["x-missing"]

    def test_repeated_values(self) -> None:
        headers = Headers(((b"accept", b"text/html"), (b"accept", b"application/json")))
        assert headers["accept"] == "text/html"
        assert headers.get_list("Accept") == ["text/html", "application/json"]
        assert len(headers) == 1
        assert list(headers) == ["accept"]

    def test_from_mapping(self) -> None:
        headers = Headers.from_mapping({"X-Token": "abc"})
        assert headers["x-token"] == "abc"
        assert headers.raw == ((b"x-token", b"abc"),)

    def test_non_string_key(self) -> None:
        assert 1 not in Headers()
