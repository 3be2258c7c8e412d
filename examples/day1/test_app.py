"""Tests for day 1 — hello world and HTTP methods."""

import pytest

from wren.testing import TestClient


class TestHello:
    async def test_index(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert "Hello World" in response.text
            assert response.content_type.startswith("text/html")

    async def test_about(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/about")
            assert response.text == "About us"

    async def test_unknown_path_is_404(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/missing")
            assert response.status == 404


@pytest.fixture
def methods_app(load_example):
    return load_example("methods_app.py")


class TestMethods:
    async def test_list_users(self, methods_app) -> None:
        async with TestClient(methods_app) as client:
            response = await client.get("/api/users")
            assert response.status == 200
            assert len(response.json()) == 3

    async def test_create_user_echoes_fields(self, methods_app) -> None:
        async with TestClient(methods_app) as client:
            response = await client.post(
                "/api/users", json={"name": "A", "email": "a@x.com"}
            )
            assert response.status == 201
            user = response.json()["user"]
            assert user["name"] == "A"
            assert user["email"] == "a@x.com"

    async def test_get_user_skips_other_methods(self, methods_app) -> None:
        async with TestClient(methods_app) as client:
            response = await client.get("/api/users/123")
            assert response.status == 200
            assert response.json() == {
                "id": "123",
                "name": "User 123",
                "email": "user123@example.com",
            }

    async def test_update_and_delete(self, methods_app) -> None:
        async with TestClient(methods_app) as client:
            updated = await client.put("/api/users/1")
            deleted = await client.delete("/api/users/1")
            assert updated.json()["message"] == "User 1 updated"
            assert deleted.json() == {"message": "User 1 deleted"}

    async def test_search(self, methods_app) -> None:
        async with TestClient(methods_app) as client:
            response = await client.get("/api/search?q=javascript&page=2")
            data = response.json()
            assert data["query"] == "javascript"
            assert data["page"] == "2"
            assert len(data["results"]) == 3

    async def test_search_defaults(self, methods_app) -> None:
        async with TestClient(methods_app) as client:
            data = (await client.get("/api/search")).json()
            assert data["query"] == "unspecified"
            assert data["page"] == 1

    async def test_wrong_method_is_405(self, methods_app) -> None:
        async with TestClient(methods_app) as client:
            response = await client.patch("/api/users/1")
            assert response.status == 405
            assert response.header("allow") == "DELETE, GET, PUT"
