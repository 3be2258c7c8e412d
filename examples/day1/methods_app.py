"""Day 1 — HTTP methods, route parameters and query parameters.

Demonstrates:
- GET / POST / PUT / DELETE on the same resource
- ``:id`` route parameters injected by name
- ``request.query`` for query parameters
- ``JSONBody`` so POST can echo what the client sent
- ``(value, status)`` tuples for non-200 responses

Routes are matched in registration order: ``GET /api/users/1`` skips the
PUT and DELETE routes for the same path and lands on the GET one.

Run:
    python methods_app.py
"""

from wren import App, AppConfig, JSONBody, Request

app = App(AppConfig(port=3000))
app.use(JSONBody())

USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com"},
    {"id": 2, "name": "Bob", "email": "bob@example.com"},
    {"id": 3, "name": "Carol", "email": "carol@example.com"},
]


@app.get("/api/users")
def list_users():
    return USERS


@app.post("/api/users")
def create_user(request: Request):
    user = {"id": len(USERS) + 1, **request.body_dict}
    return {"message": "User created", "user": user}, 201


@app.put("/api/users/:id")
def update_user(id: str):
    return {
        "message": f"User {id} updated",
        "user": {"id": id, "name": "Updated user", "email": "updated@example.com"},
    }


@app.delete("/api/users/:id")
def delete_user(id: str):
    return {"message": f"User {id} deleted"}


@app.get("/api/users/:id")
def get_user(id: str):
    return {"id": id, "name": f"User {id}", "email": f"user{id}@example.com"}


@app.get("/api/search")
def search(request: Request):
    query = request.query.get("q") or "unspecified"
    page = request.query.get("page") or 1
    return {
        "query": query,
        "page": page,
        "results": [f"Search result {n} for {query}" for n in (1, 2, 3)],
    }


if __name__ == "__main__":
    app.run()
