"""Day 3 — stages: logging, body parsing, custom stages and error handling.

Demonstrates:
- ``RequestLogger`` access lines on the ``wren.access`` logger
- ``JSONBody`` / ``FormBody`` built-in stages
- a custom function stage that logs a timestamp and tags the request
- a stage mounted on ``/api`` only
- ``@app.not_found`` for a custom 404 page
- an ``(error, request)`` error-stage answering every failure as JSON

Run:
    python app.py
"""

import logging
from datetime import UTC, datetime

from wren import App, AppConfig, FormBody, HTTPError, JSONBody, Request, RequestLogger
from wren.http.response import Response

logger = logging.getLogger("day3")

app = App(AppConfig(port=3000))

app.use(RequestLogger())
app.use(JSONBody())
app.use(FormBody())


def timestamp_logger(request: Request) -> None:
    """Log every request with an ISO timestamp and remember when it arrived."""
    timestamp = datetime.now(UTC).isoformat()
    request.state["received_at"] = timestamp
    logger.info("[Custom Logger - %s] %s %s", timestamp, request.method, request.url)


app.use(timestamp_logger)


class ApiMarker:
    """Tag requests under /api and stamp the response on the way out."""

    def __call__(self, request: Request) -> None:
        request.state["api"] = True

    def after(self, request: Request, response: Response) -> Response:
        return response.with_header("X-Api", "true")


app.use(ApiMarker(), prefix="/api")


@app.get("/")
def index():
    return "Welcome to day three: learning about stages!"


@app.post("/profile")
def profile(request: Request):
    logger.info("Received body: %r", request.body_data)
    return {"message": "Data received!", "data": request.body_data}


@app.get("/error")
def error():
    raise HTTPError(500, "This is a simulated error!")


@app.get("/api/status")
def api_status(request: Request):
    return {
        "api": request.state.get("api", False),
        "received_at": request.state.get("received_at"),
    }


@app.get("/plain")
def plain(request: Request):
    return {"api": request.state.get("api", False)}


@app.not_found
def page_not_found(request: Request):
    return "Sorry, we couldn't find that page!", 404


@app.use
def handle_error(error: Exception, request: Request):
    logger.error("Request %s %s failed", request.method, request.path, exc_info=error)
    status = error.status if isinstance(error, HTTPError) else 500
    message = error.detail if isinstance(error, HTTPError) else str(error)
    return {
        "message": message,
        "error": "The server ran into an unexpected error!",
    }, status


if __name__ == "__main__":
    app.run()
