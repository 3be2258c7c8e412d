"""Built-in stages.

A stage is any callable taking the request and returning an outcome
(``None``, ``Continue``, ``Halt``, ``Fail``) or a response value. No
base class required. The pipeline checks the shape, not the lineage.
"""

from wren.middleware.body import FormBody, JSONBody
from wren.middleware.logger import RequestLogger
from wren.middleware.static import StaticFiles
from wren.middleware.uploads import MB, Uploads, UploadStage

__all__ = [
    "MB",
    "FormBody",
    "JSONBody",
    "RequestLogger",
    "StaticFiles",
    "UploadStage",
    "Uploads",
]
