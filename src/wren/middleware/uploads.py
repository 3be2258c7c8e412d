"""Multipart upload stages.

``Uploads`` is a factory bound to a storage backend and limits; its
methods build route-level stages that accept specific file fields::

    uploads = Uploads(DiskStorage("uploads"), limits=UploadLimits(file_size=5 * MB))

    @app.post("/upload", stages=[uploads.single("avatar")])
    def upload(request: Request):
        return {"file": request.file.to_dict()}

The stage parses the body, checks every file field against the accepted
set, stores the files, and continues with text fields on
``request.body_data`` and descriptors on ``request.files``. Nothing is
stored unless every limit check passes. A malformed body is a
``BadRequest``. Non-multipart requests pass through.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from wren.errors import BadRequest
from wren.http.forms import FormData, media_type
from wren.http.request import Request
from wren.http.uploads import (
    LIMIT_UNEXPECTED_FILE,
    MemoryStorage,
    Storage,
    UploadLimitError,
    UploadLimits,
)
from wren.pipeline.outcome import Continue

MB = 1024 * 1024


@dataclass(frozen=True, slots=True)
class UploadStage:
    """Route-level stage produced by ``Uploads``.

    ``accepted`` maps file field names to a maximum count (``None`` for
    no maximum); ``accepted=None`` accepts any field.
    """

    storage: Storage
    limits: UploadLimits
    accepted: Mapping[str, int | None] | None

    async def __call__(self, request: Request) -> Continue | None:
        if media_type(request.content_type) != "multipart/form-data":
            return None

        try:
            form = await request.form(self.limits)
        except ValueError as exc:
            raise BadRequest(f"Malformed multipart body: {exc}") from exc
        self._check_fields(form)

        stored = []
        for upload in form.all_files():
            stored.append(await self.storage.store(upload))

        return Continue(request.with_body(form.to_dict()).with_files(tuple(stored)))

    def _check_fields(self, form: FormData) -> None:
        if self.accepted is None:
            return
        for field, uploads in form.files.items():
            if field not in self.accepted:
                raise UploadLimitError(LIMIT_UNEXPECTED_FILE, field)
            max_count = self.accepted[field]
            if max_count is not None and len(uploads) > max_count:
                raise UploadLimitError(LIMIT_UNEXPECTED_FILE, field)


class Uploads:
    """Factory for upload stages sharing one storage backend and limits.

    Defaults to in-memory storage and no file limits.
    """

    __slots__ = ("limits", "storage")

    def __init__(
        self,
        storage: Storage | None = None,
        *,
        limits: UploadLimits | None = None,
    ) -> None:
        self.storage: Storage = storage or MemoryStorage()
        self.limits = limits or UploadLimits()

    def _stage(self, accepted: Mapping[str, int | None] | None) -> UploadStage:
        return UploadStage(self.storage, self.limits, accepted)

    def single(self, field: str) -> UploadStage:
        """Accept one file in *field*; available as ``request.file``."""
        return self._stage({field: 1})

    def array(self, field: str, max_count: int | None = None) -> UploadStage:
        """Accept up to *max_count* files in *field*; available as ``request.files``."""
        return self._stage({field: max_count})

    def fields(
        self, fields: Mapping[str, int | None] | Iterable[tuple[str, int | None]]
    ) -> UploadStage:
        """Accept several named fields, each with its own maximum count."""
        return self._stage(dict(fields))

    def any(self) -> UploadStage:
        """Accept files in any field."""
        return self._stage(None)

    def none(self) -> UploadStage:
        """Accept text fields only; any file is unexpected."""
        return self._stage({})
