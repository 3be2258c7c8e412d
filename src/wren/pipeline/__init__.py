"""Middleware chain — ordered stages with explicit outcomes."""

from wren.pipeline.chain import (
    Pipeline,
    StageEntry,
    apply_after_hooks,
    error_filter,
    is_error_stage,
    run_stages,
)
from wren.pipeline.outcome import Continue, Fail, Halt, Outcome, resolve

__all__ = [
    "Continue",
    "Fail",
    "Halt",
    "Outcome",
    "Pipeline",
    "StageEntry",
    "apply_after_hooks",
    "error_filter",
    "is_error_stage",
    "resolve",
    "run_stages",
]
