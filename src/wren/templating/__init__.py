"""Kida template integration."""

from wren.templating.returns import InlineTemplate, Template

__all__ = ["InlineTemplate", "Template"]
