"""Tests for kida template rendering through the app."""

from pathlib import Path

import pytest

from wren.app import App
from wren.config import AppConfig
from wren.templating import Template
from wren.testing import TestClient


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    (tmp_path / "layouts").mkdir()
    (tmp_path / "layouts" / "base.html").write_text(
        "<title>{% block title %}{{ title }}{% endblock %}</title>"
        "<main>{% block content %}{% endblock %}</main>"
    )
    (tmp_path / "hello.html").write_text(
        '{% extends "layouts/base.html" %}'
        "{% block content %}Hello, {{ name }}!{% endblock %}"
    )
    (tmp_path / "price.html").write_text("{{ amount | currency }} {{ site_name() }}")
    return tmp_path


class TestTemplates:
    async def test_render_with_layout(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.get("/")
        def index():
            return Template("hello.html", title="Home", name="Ada")

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 200
        assert "<title>Home</title>" in response.text
        assert "<main>Hello, Ada!</main>" in response.text

    async def test_autoescape(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.get("/")
        def index():
            return Template("hello.html", title="x", name="<script>")

        async with TestClient(app) as client:
            response = await client.get("/")
        assert "<script>" not in response.text

    async def test_filters_and_globals(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.template_filter()
        def currency(value: float) -> str:
            return f"${value:,.2f}"

        @app.template_global()
        def site_name() -> str:
            return "Wren Shop"

        @app.get("/")
        def index():
            return Template("price.html", amount=1234.5)

        async with TestClient(app) as client:
            response = await client.get("/")
        assert "$1,234.50" in response.text
        assert "Wren Shop" in response.text

    async def test_template_with_status(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.get("/")
        def index():
            return Template("hello.html", title="Missing", name="nobody"), 404

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 404
        assert "Hello, nobody!" in response.text

    async def test_template_without_directory_is_500(self, tmp_path: Path) -> None:
        app = App(AppConfig(template_dir=tmp_path / "none"))

        @app.get("/")
        def index():
            return Template("hello.html")

        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.status == 500
