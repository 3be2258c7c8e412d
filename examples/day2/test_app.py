"""Tests for day 2 — REST routes with URL-encoded and JSON bodies."""

from wren.testing import TestClient


class TestUsers:
    async def test_index(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert "day two" in response.text

    async def test_list(self, example_app) -> None:
        async with TestClient(example_app) as client:
            users = (await client.get("/users")).json()
            assert [u["id"] for u in users] == [1, 2, 3]

    async def test_get_by_id(self, example_app) -> None:
        async with TestClient(example_app) as client:
            user = (await client.get("/users/7")).json()
            assert user["id"] == "7"
            assert user["email"] == "user7@example.com"

    async def test_create_from_form(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/users", form={"name": "Dana", "email": "dana@example.com"}
            )
            assert response.status == 201
            assert response.json()["user"] == {
                "id": 4,
                "name": "Dana",
                "email": "dana@example.com",
            }

    async def test_create_from_json(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/users", json={"name": "Eve"})
            assert response.status == 201
            assert response.json()["user"]["name"] == "Eve"
            assert response.json()["user"]["email"] is None

    async def test_malformed_json_is_400(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/users",
                body=b"{not json",
                headers={"content-type": "application/json"},
            )
            assert response.status == 400

    async def test_update_and_delete(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.put("/users/2")).json()["message"] == "User 2 updated"
            assert (await client.delete("/users/2")).json()["message"] == "User 2 deleted"

    async def test_search(self, example_app) -> None:
        async with TestClient(example_app) as client:
            data = (await client.get("/search?q=python&page=3")).json()
            assert data["query"] == "python"
            assert data["page"] == "3"
            assert data["results"][0] == "Search result 1 for python"
