"""Template return values.

Handlers (and stages, and error-stages) return these; negotiation
renders them through kida. The context is fixed at construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True, init=False)
class Template:
    """A file template from the app's ``template_dir``.

    Usage::

        return Template("user-detail.html", title=user["name"], user=user)
        return Template("error.html", message="User not found"), 404
    """

    name: str
    context: dict[str, Any]

    def __init__(self, name: str, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)

    @staticmethod
    def inline(source: str, /, **context: Any) -> InlineTemplate:
        """A template from a source string, for quick prototypes."""
        return InlineTemplate(source, **context)


@dataclass(frozen=True, slots=True, init=False)
class InlineTemplate:
    """A template compiled from *source*; needs no ``template_dir``."""

    source: str
    context: dict[str, Any]

    def __init__(self, source: str, /, **context: Any) -> None:
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "context", context)
