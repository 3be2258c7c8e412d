"""Form body parsing — URL-encoded and multipart.

URL-encoded bodies use stdlib ``urllib.parse``. Multipart bodies go
through ``python-multipart``'s callback parser, with ``UploadLimits``
enforced while parts stream in so an oversized upload is rejected
without buffering the rest of it.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qs

from wren.http.multidict import MultiValueMapping
from wren.http.uploads import (
    LIMIT_FIELD_COUNT,
    LIMIT_FIELD_VALUE,
    LIMIT_FILE_COUNT,
    LIMIT_FILE_SIZE,
    UploadFile,
    UploadLimitError,
    UploadLimits,
)


class FormData(MultiValueMapping):
    """Parsed form data: text fields plus uploaded files.

    ``form["name"]`` returns the first value of a text field;
    ``get_list`` returns all of them. Files are grouped by field name::

        form = await request.form()
        username = form["username"]
        avatar = form.file("avatar")          # UploadFile or None
        photos = form.files.get("photos", [])  # list[UploadFile]
    """

    __slots__ = ("_files",)

    def __init__(
        self,
        data: dict[str, list[str]],
        files: dict[str, list[UploadFile]] | None = None,
    ) -> None:
        super().__init__(data)
        object.__setattr__(self, "_files", files or {})

    @property
    def files(self) -> Mapping[str, list[UploadFile]]:
        """Uploaded files by field name."""
        return self._files

    def file(self, name: str) -> UploadFile | None:
        """First file uploaded under *name*, or ``None``."""
        uploads = self._files.get(name)
        return uploads[0] if uploads else None

    def all_files(self) -> list[UploadFile]:
        """Every uploaded file, in the order received."""
        return [upload for uploads in self._files.values() for upload in uploads]


def media_type(content_type: str | None) -> str:
    """Lower-cased media type without parameters (``""`` when absent)."""
    if not content_type:
        return ""
    return content_type.split(";")[0].strip().lower()


async def parse_form_data(
    body: bytes,
    content_type: str,
    limits: UploadLimits | None = None,
) -> FormData:
    """Parse a form body into FormData.

    Supports ``application/x-www-form-urlencoded`` and
    ``multipart/form-data``. *limits* applies to multipart bodies only.

    Raises:
        ValueError: If the content type is not a form encoding, or the
            multipart body is malformed (missing boundary, truncated,
            undecodable part names).
        UploadLimitError: If a multipart limit is exceeded.
    """
    kind = media_type(content_type)

    if kind == "application/x-www-form-urlencoded":
        return parse_urlencoded(body)

    if kind == "multipart/form-data":
        return _parse_multipart(body, content_type, limits or UploadLimits())

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def parse_urlencoded(body: bytes) -> FormData:
    """Parse URL-encoded form data using stdlib."""
    return FormData(parse_qs(body.decode("utf-8"), keep_blank_values=True))


def _parse_multipart(body: bytes, content_type: str, limits: UploadLimits) -> FormData:
    from python_multipart.multipart import MultipartParser, parse_options_header

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if not boundary:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}
    files: dict[str, list[UploadFile]] = {}
    counts = {"files": 0, "fields": 0}

    # Current part state
    headers: dict[str, str] = {}
    pending_header = ""
    buffer = bytearray()
    field_name: str | None = None
    filename: str | None = None
    in_part = False

    def on_part_begin() -> None:
        nonlocal headers, buffer, field_name, filename, in_part
        in_part = True
        headers = {}
        buffer = bytearray()
        field_name = None
        filename = None

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        nonlocal pending_header
        pending_header = chunk[start:end].decode("latin-1").lower()

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        nonlocal field_name, filename
        value = chunk[start:end].decode("latin-1")
        headers[pending_header] = value
        if pending_header == "content-disposition":
            _, params = parse_options_header(value.encode("latin-1"))
            name = params.get(b"name")
            if name is not None:
                field_name = name.decode("utf-8")
            fname = params.get(b"filename")
            if fname is not None:
                filename = fname.decode("utf-8")

    def on_headers_finished() -> None:
        # Browsers send an empty filename for an untouched file input
        if filename:
            counts["files"] += 1
            if limits.files is not None and counts["files"] > limits.files:
                raise UploadLimitError(LIMIT_FILE_COUNT, field_name)
        elif filename is None and field_name is not None:
            counts["fields"] += 1
            if limits.fields is not None and counts["fields"] > limits.fields:
                raise UploadLimitError(LIMIT_FIELD_COUNT, field_name)

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        buffer.extend(chunk[start:end])
        if filename:
            if limits.file_size is not None and len(buffer) > limits.file_size:
                raise UploadLimitError(LIMIT_FILE_SIZE, field_name)
        elif len(buffer) > limits.field_size:
            raise UploadLimitError(LIMIT_FIELD_VALUE, field_name)

    def on_part_end() -> None:
        nonlocal in_part
        in_part = False
        if field_name is None:
            return
        if filename is None:
            data.setdefault(field_name, []).append(buffer.decode("utf-8", errors="replace"))
            return
        if not filename:
            return
        content = bytes(buffer)
        files.setdefault(field_name, []).append(
            UploadFile(
                field_name=field_name,
                filename=filename,
                content_type=headers.get("content-type", "application/octet-stream"),
                size=len(content),
                _content=content,
            )
        )

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_headers_finished": on_headers_finished,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()
    if in_part:
        msg = "Multipart body ended before the closing boundary"
        raise ValueError(msg)

    return FormData(data, files)
