"""Day 2 — routing basics and request bodies.

Demonstrates:
- a small REST resource under ``/users``
- ``FormBody`` and ``JSONBody`` stages filling ``request.body_data``
- query parameters with defaults

Run:
    python app.py
"""

from wren import App, AppConfig, FormBody, JSONBody, Request

app = App(AppConfig(port=3000))
app.use(FormBody())
app.use(JSONBody())

USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com"},
    {"id": 2, "name": "Bob", "email": "bob@example.com"},
    {"id": 3, "name": "Carol", "email": "carol@example.com"},
]


@app.get("/")
def index():
    return "Welcome to day two: routing basics!"


@app.get("/users")
def list_users():
    return USERS


@app.get("/users/:id")
def get_user(id: str):
    return {"id": id, "name": f"User {id}", "email": f"user{id}@example.com"}


@app.post("/users")
def create_user(request: Request):
    body = request.body_dict
    return {
        "message": "User created",
        "user": {"id": 4, "name": body.get("name"), "email": body.get("email")},
    }, 201


@app.put("/users/:id")
def update_user(id: str):
    return {
        "message": f"User {id} updated",
        "user": {"id": id, "name": "Updated user", "email": "updated@example.com"},
    }


@app.delete("/users/:id")
def delete_user(id: str):
    return {"message": f"User {id} deleted"}


@app.get("/search")
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
