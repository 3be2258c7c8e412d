"""Wren — a small ASGI framework built around an explicit stage pipeline.

Requests flow through ordered stages, then the first matching route.
Stages continue, halt with a response, or fail into the error channel.

Basic usage::

    from wren import App, JSONBody, RequestLogger

    app = App()
    app.use(RequestLogger())
    app.use(JSONBody())

    @app.get("/users/:id")
    def user(id: int):
        return {"id": id}

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BadRequest",
    "ConfigurationError",
    "Continue",
    "DiskStorage",
    "Fail",
    "FormBody",
    "HTTPError",
    "Halt",
    "InlineTemplate",
    "JSONBody",
    "MemoryStorage",
    "MethodNotAllowed",
    "NotFound",
    "PayloadTooLarge",
    "Redirect",
    "Request",
    "RequestLogger",
    "Response",
    "ResponseAlreadyFinalized",
    "StaticFiles",
    "StoredFile",
    "Template",
    "UploadLimitError",
    "UploadLimits",
    "Uploads",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name in ("Template", "InlineTemplate"):
        from wren.templating import returns as _tmpl

        return getattr(_tmpl, name)

    if name in ("Continue", "Halt", "Fail"):
        from wren.pipeline import outcome as _outcome

        return getattr(_outcome, name)

    if name in ("FormBody", "JSONBody", "RequestLogger", "StaticFiles", "Uploads"):
        import wren.middleware as _mw

        return getattr(_mw, name)

    if name in ("DiskStorage", "MemoryStorage", "StoredFile", "UploadLimitError", "UploadLimits"):
        from wren.http import uploads as _uploads

        return getattr(_uploads, name)

    if name in (
        "BadRequest",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "PayloadTooLarge",
        "ResponseAlreadyFinalized",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
