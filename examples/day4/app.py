"""Day 4 — query parameters, JSON bodies and file uploads.

Demonstrates:
- ``:id`` route parameters combined with ``?details=true``
- ``Uploads`` with ``DiskStorage`` and limits (5 MB per file, 5 files)
- ``uploads.single(...)`` / ``uploads.array(...)`` as route-level stages
- an error-stage translating upload limit violations into 400 JSON
- a JSON 404 for unknown endpoints

Run:
    python app.py
"""

import logging
import time
from pathlib import Path

from wren import (
    App,
    AppConfig,
    DiskStorage,
    FormBody,
    JSONBody,
    Request,
    RequestLogger,
    UploadLimitError,
    UploadLimits,
    Uploads,
)
from wren.http.uploads import LIMIT_FILE_COUNT, LIMIT_FILE_SIZE, LIMIT_UNEXPECTED_FILE
from wren.middleware import MB

UPLOADS_DIR = Path(__file__).parent / "uploads"

logger = logging.getLogger("day4")

app = App(AppConfig(port=3000))

app.use(JSONBody())
app.use(FormBody())
app.use(RequestLogger())

uploads = Uploads(
    DiskStorage(UPLOADS_DIR),
    limits=UploadLimits(file_size=5 * MB, files=5),
)


def _describe(file) -> dict:
    return {
        "filename": file.filename,
        "originalname": file.originalname,
        "size": file.size,
        "mimetype": file.mimetype,
        "path": file.path,
    }


@app.get("/user/:id")
def get_user(id: str, request: Request):
    logger.info("User %s requested with query %r", id, request.query.to_dict())
    if request.query.get("details") == "true":
        return {
            "id": id,
            "name": "John Doe",
            "email": "john@example.com",
            "details": "Full user details",
        }
    return {"id": id, "name": "John Doe"}


@app.post("/user")
def create_user(request: Request):
    user = {"id": int(time.time() * 1000), **request.body_dict}
    return {"message": "User created", "user": user}, 201


@app.post("/upload", stages=[uploads.single("avatar")])
def upload(request: Request):
    if request.file is None:
        return {"error": "No file uploaded"}, 400
    return {"message": "File uploaded", "file": _describe(request.file)}


@app.post("/upload-multiple", stages=[uploads.array("photos", 5)])
def upload_multiple(request: Request):
    if not request.files:
        return {"error": "No file uploaded"}, 400
    return {"message": "Files uploaded", "files": [_describe(f) for f in request.files]}


@app.get("/hello")
def hello():
    return "<h1>Hello World!</h1><p>Welcome to day four!</p>"


@app.get("/error")
def error():
    return {"error": "The server ran into an error!"}, 500


@app.not_found
def endpoint_not_found(request: Request):
    return {"error": "Endpoint not found"}, 404


_UPLOAD_MESSAGES = {
    LIMIT_UNEXPECTED_FILE: (
        "Too many files uploaded",
        "You uploaded more files than allowed",
    ),
    LIMIT_FILE_COUNT: (
        "Too many files uploaded",
        "You uploaded more files than allowed",
    ),
    LIMIT_FILE_SIZE: (
        "File too large",
        "An uploaded file is larger than the 5 MB limit",
    ),
}


@app.error(UploadLimitError)
def upload_error(error: UploadLimitError, request: Request):
    title, message = _UPLOAD_MESSAGES.get(error.code, ("Upload error", error.detail))
    return {"error": title, "message": message, "code": error.code}, 400


@app.error(500)
def server_error(error: Exception, request: Request):
    logger.error("Server error on %s %s", request.method, request.path, exc_info=error)
    return {
        "error": "Internal server error",
        "message": "The server ran into an unexpected error",
    }, 500


if __name__ == "__main__":
    app.run()
