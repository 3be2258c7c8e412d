"""Day 1 — hello world.

The smallest wren app: two routes answering plain strings.

Demonstrates:
- ``App()`` with default config
- ``@app.get`` route registration
- ``str`` return values become ``text/html`` responses

Run:
    python app.py
"""

from wren import App, AppConfig

app = App(AppConfig(port=3000))


@app.get("/")
def index():
    return "Hello World! Welcome to wren!"


@app.get("/about")
def about():
    return "About us"


if __name__ == "__main__":
    app.run()
