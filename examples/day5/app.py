"""Day 5 — templates and static files.

Demonstrates:
- ``Template(...)`` returns rendered through kida
- a shared layout via ``{% extends "layouts/main.html" %}``
- ``StaticFiles`` serving ``public/`` at the site root
- a templated 404 with ``(Template(...), 404)``

Run:
    python app.py
"""

from pathlib import Path

from wren import App, AppConfig, StaticFiles, Template

HERE = Path(__file__).parent

app = App(AppConfig(port=3000, template_dir=HERE / "templates"))
app.use(StaticFiles(HERE / "public", prefix="/"))

USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com", "age": 25, "role": "User"},
    {"id": 2, "name": "Bob", "email": "bob@example.com", "age": 30, "role": "Admin"},
    {"id": 3, "name": "Carol", "email": "carol@example.com", "age": 28, "role": "User"},
]


@app.get("/")
def index():
    return Template("index.html", title="Home", message="Welcome to the wren template demo")


@app.get("/about")
def about():
    return Template(
        "about.html",
        title="About",
        description="A wren app rendering kida templates with a shared layout",
    )


@app.get("/users")
def users():
    return Template("users.html", title="Users", users=USERS)


@app.get("/user/:id")
def user_detail(id: int):
    user = next((u for u in USERS if u["id"] == id), None)
    if user is None:
        return Template("error.html", title="User not found", message="No such user"), 404
    return Template("user-detail.html", title=f"User details - {user['name']}", user=user)


if __name__ == "__main__":
    app.run()
