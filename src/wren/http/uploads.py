"""Uploaded files, upload limits, and storage backends.

``UploadFile`` is what the multipart parser produces; a ``Storage``
turns it into a ``StoredFile`` descriptor that handlers see on
``request.file`` / ``request.files``. Storage is a narrow protocol: the
pipeline never touches the filesystem directly.
"""

import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import anyio

from wren.errors import BadRequest

# Error codes, named after the equivalent multer codes
LIMIT_FILE_SIZE = "LIMIT_FILE_SIZE"
LIMIT_FILE_COUNT = "LIMIT_FILE_COUNT"
LIMIT_FIELD_VALUE = "LIMIT_FIELD_VALUE"
LIMIT_FIELD_COUNT = "LIMIT_FIELD_COUNT"
LIMIT_UNEXPECTED_FILE = "LIMIT_UNEXPECTED_FILE"

_MESSAGES: dict[str, str] = {
    LIMIT_FILE_SIZE: "File too large",
    LIMIT_FILE_COUNT: "Too many files",
    LIMIT_FIELD_VALUE: "Field value too long",
    LIMIT_FIELD_COUNT: "Too many fields",
    LIMIT_UNEXPECTED_FILE: "Unexpected field",
}


class UploadLimitError(BadRequest):
    """400 — a multipart upload violated a configured limit.

    Attributes:
        code: One of the ``LIMIT_*`` constants.
        field: The form field that triggered the violation, if known.
    """

    def __init__(self, code: str, field: str | None = None) -> None:
        message = _MESSAGES.get(code, "Upload rejected")
        super().__init__(f"{message}: {field}" if field else message)
        # HTTPError is a frozen dataclass
        object.__setattr__(self, "code", code)
        object.__setattr__(self, "field", field)


@dataclass(frozen=True, slots=True)
class UploadLimits:
    """Limits enforced while parsing ``multipart/form-data``.

    ``None`` disables a limit. Defaults follow common upload middleware:
    no file size or count limit, 1 MB per text field.
    """

    file_size: int | None = None
    files: int | None = None
    fields: int | None = None
    field_size: int = 1024 * 1024


@dataclass(frozen=True, slots=True)
class UploadFile:
    """A file received in a multipart form submission.

    Content is held in memory; storage backends decide where it goes.
    """

    field_name: str
    filename: str
    content_type: str
    size: int
    _content: bytes

    async def read(self) -> bytes:
        """Return the file content as bytes."""
        return self._content

    async def save(self, path: Path) -> None:
        """Write the file content to *path*. Parent directories must exist."""
        await anyio.to_thread.run_sync(path.write_bytes, self._content)

    def __repr__(self) -> str:
        return f"UploadFile({self.field_name!r}, {self.filename!r}, {self.size} bytes)"


@dataclass(frozen=True, slots=True)
class StoredFile:
    """Descriptor for an upload after storage.

    ``path`` and ``destination`` are set by disk storage; ``buffer`` by
    memory storage.
    """

    fieldname: str
    originalname: str
    filename: str
    mimetype: str
    size: int
    destination: str | None = None
    path: str | None = None
    buffer: bytes | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready description (without the raw buffer)."""
        return {
            "fieldname": self.fieldname,
            "originalname": self.originalname,
            "filename": self.filename,
            "mimetype": self.mimetype,
            "size": self.size,
            "path": self.path,
        }


class Storage(Protocol):
    """Where uploaded files go.

    Any object with an async ``store`` method qualifies::

        class S3Storage:
            async def store(self, upload: UploadFile) -> StoredFile: ...
    """

    async def store(self, upload: UploadFile) -> StoredFile: ...


def unique_filename(upload: UploadFile) -> str:
    """``<field>-<ms timestamp>-<random><ext>``, keeping the original extension."""
    suffix = Path(upload.filename).suffix
    stamp = int(time.time() * 1000)
    nonce = random.randint(0, 10**9)  # noqa: S311
    return f"{upload.field_name}-{stamp}-{nonce}{suffix}"


class DiskStorage:
    """Write uploads into *destination* under generated names.

    The directory is created on first use. Pass *filename* to control
    naming; it receives the ``UploadFile`` and returns a bare file name.
    """

    __slots__ = ("_destination", "_filename")

    def __init__(
        self,
        destination: str | Path,
        *,
        filename: Any = None,
    ) -> None:
        self._destination = Path(destination)
        self._filename = filename or unique_filename

    @property
    def destination(self) -> Path:
        return self._destination

    async def store(self, upload: UploadFile) -> StoredFile:
        name = self._filename(upload)
        if Path(name).name != name:
            msg = f"Storage filename must not contain directories: {name!r}"
            raise ValueError(msg)

        await anyio.to_thread.run_sync(
            lambda: self._destination.mkdir(parents=True, exist_ok=True)
        )
        target = self._destination / name
        await upload.save(target)

        return StoredFile(
            fieldname=upload.field_name,
            originalname=upload.filename,
            filename=name,
            mimetype=upload.content_type,
            size=upload.size,
            destination=str(self._destination),
            path=str(target),
        )


class MemoryStorage:
    """Keep uploads in memory on the descriptor's ``buffer``."""

    __slots__ = ()

    async def store(self, upload: UploadFile) -> StoredFile:
        return StoredFile(
            fieldname=upload.field_name,
            originalname=upload.filename,
            filename=upload.filename,
            mimetype=upload.content_type,
            size=upload.size,
            buffer=await upload.read(),
        )
