"""Tests for the RequestLogger stage and dev logging setup."""

import logging

from wren.app import App
from wren.middleware import RequestLogger
from wren.server.dev import configure_logging
from wren.testing import TestClient


class TestRequestLogger:
    async def test_logs_one_line_per_request(self, caplog) -> None:
        app = App()
        app.use(RequestLogger())

        @app.get("/users/:id")
        def user(id: str):
            return "hello"

        with caplog.at_level(logging.INFO, logger="wren.access"):
            async with TestClient(app) as client:
                await client.get("/users/42?details=true")

        records = [r for r in caplog.records if r.name == "wren.access"]
        assert len(records) == 1
        message = records[0].getMessage()
        assert message.startswith("GET /users/42?details=true 200 ")
        assert message.endswith(" ms - 5")

    async def test_logs_error_responses(self, caplog) -> None:
        app = App()
        app.use(RequestLogger())

        with caplog.at_level(logging.INFO, logger="wren.access"):
            async with TestClient(app) as client:
                await client.get("/missing")

        (record,) = [r for r in caplog.records if r.name == "wren.access"]
        assert " 404 " in record.getMessage()

    async def test_custom_logger(self, caplog) -> None:
        app = App()
        app.use(RequestLogger(logging.getLogger("myapp.http")))

        @app.get("/")
        def index():
            return ""

        with caplog.at_level(logging.INFO, logger="myapp.http"):
            async with TestClient(app) as client:
                await client.get("/")

        (record,) = [r for r in caplog.records if r.name == "myapp.http"]
        assert record.getMessage().endswith(" - -")


class TestConfigureLogging:
    def test_single_handler(self) -> None:
        logger = logging.getLogger("wren")
        before = list(logger.handlers)
        try:
            configure_logging("debug")
            configure_logging("warning")
            added = [h for h in logger.handlers if h not in before]
            assert len(added) <= 1
            assert logger.level == logging.WARNING
        finally:
            for handler in list(logger.handlers):
                if handler not in before:
                    logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
