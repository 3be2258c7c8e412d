"""Explicit stage outcomes.

A stage tells the pipeline what happens next by returning one of these.
Plain return values are normalized by ``resolve``:

- ``None``                 -> ``Continue()``
- ``Continue`` / ``Halt`` / ``Fail`` -> unchanged
- anything else            -> ``Halt(value)``
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wren.http.request import Request


@dataclass(frozen=True, slots=True)
class Continue:
    """Advance to the next stage.

    When *request* is given, later stages and the handler see it
    instead of the current request.
    """

    request: "Request | None" = None


@dataclass(frozen=True, slots=True)
class Halt:
    """Stop the chain and answer with *value* (any negotiable return value)."""

    value: Any


@dataclass(frozen=True, slots=True)
class Fail:
    """Skip the remaining stages and enter the error channel with *error*."""

    error: Exception


type Outcome = Continue | Halt | Fail


def resolve(result: Any) -> Outcome:
    """Normalize a stage's return value into an Outcome."""
    match result:
        case None:
            return Continue()
        case Continue() | Halt() | Fail():
            return result
        case _:
            return Halt(result)
