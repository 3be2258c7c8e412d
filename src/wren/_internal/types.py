"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Stage: receives the request, returns an outcome or a response value
StageFunc: TypeAlias = Callable[..., Any]

# Error-stage: receives (error, request) and returns a response value
ErrorStageFunc: TypeAlias = Callable[..., Any]
