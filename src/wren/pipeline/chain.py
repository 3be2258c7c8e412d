"""Ordered stage chain with prefix scoping and after-hooks.

Stages run in registration order. Each stage receives the current
request and returns an outcome (see ``wren.pipeline.outcome``). A stage
may also expose ``after(request, response) -> Response``; hooks of the
stages that ran are applied in reverse order to the final response,
including error responses.

Error-stages share the same registration call and are told apart by
signature: a callable taking two positional parameters ``(error,
request)`` is an error-stage.
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wren._internal.invoke import invoke
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.http.response import Response
from wren.pipeline.outcome import Continue, Fail, Halt, resolve


def normalize_prefix(prefix: str | None) -> str | None:
    """Canonical form of a mount prefix: leading slash, no trailing slash.

    ``None``, ``""`` and ``"/"`` all mean "every path".
    """
    if prefix is None:
        return None
    if not prefix.startswith("/"):
        msg = f"Stage prefix must start with '/': {prefix!r}"
        raise ConfigurationError(msg)
    stripped = prefix.rstrip("/")
    return stripped or None


def is_error_stage(stage: Callable[..., Any]) -> bool:
    """True if *stage* takes ``(error, request)``.

    Counts positional parameters without defaults; ``self`` is already
    bound for methods and callable objects.
    """
    try:
        sig = inspect.signature(stage)
    except (TypeError, ValueError):
        return False
    required = [
        p
        for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is inspect.Parameter.empty
    ]
    return len(required) == 2


@dataclass(frozen=True, slots=True)
class StageEntry:
    """A registered stage.

    ``prefix`` limits a stage to paths at or below it. ``matches``
    filters which errors an error-stage sees.
    """

    stage: Callable[..., Any]
    prefix: str | None = None
    is_error_stage: bool = False
    matches: Callable[[Exception], bool] | None = None

    def applies_to(self, path: str) -> bool:
        """True if this entry runs for a request to *path*."""
        if self.prefix is None:
            return True
        return path == self.prefix or path.startswith(self.prefix + "/")

    def handles(self, error: Exception) -> bool:
        """True if this error-stage accepts *error*."""
        return self.matches is None or self.matches(error)


def error_filter(target: int | type[Exception] | None) -> Callable[[Exception], bool] | None:
    """Build an error filter from a status code or exception type."""
    from wren.errors import HTTPError

    match target:
        case None:
            return None
        case int() as status:
            if status == 500:
                return lambda exc: not isinstance(exc, HTTPError) or exc.status == 500
            return lambda exc: isinstance(exc, HTTPError) and exc.status == status
        case type() if issubclass(target, Exception):
            return lambda exc: isinstance(exc, target)
        case _:
            msg = f"Error filter must be a status code or exception type, got {target!r}"
            raise ConfigurationError(msg)


class Pipeline:
    """Ordered collection of stages and error-stages.

    Usage::

        pipeline = Pipeline()
        pipeline.use(log_requests)
        pipeline.use(require_token, prefix="/api")
        pipeline.use(on_error)          # (error, request) -> error-stage
        pipeline.freeze()
    """

    __slots__ = ("_entries", "_frozen")

    def __init__(self) -> None:
        self._entries: list[StageEntry] = []
        self._frozen = False

    def use(
        self,
        stage: Callable[..., Any],
        prefix: str | None = None,
        *,
        matches: Callable[[Exception], bool] | None = None,
    ) -> StageEntry:
        """Append *stage*; error-stages are detected by signature."""
        if self._frozen:
            msg = "Cannot add stages after the pipeline is frozen."
            raise RuntimeError(msg)
        if not callable(stage):
            msg = f"Stage must be callable, got {type(stage).__name__}"
            raise ConfigurationError(msg)
        error_stage = is_error_stage(stage)
        if matches is not None and not error_stage:
            msg = f"Error filter given for {stage!r}, which does not take (error, request)"
            raise ConfigurationError(msg)
        entry = StageEntry(
            stage=stage,
            prefix=normalize_prefix(prefix),
            is_error_stage=error_stage,
            matches=matches,
        )
        self._entries.append(entry)
        return entry

    def freeze(self) -> None:
        """No more stages can be added after this."""
        self._frozen = True

    @property
    def entries(self) -> tuple[StageEntry, ...]:
        return tuple(self._entries)

    @property
    def stages(self) -> tuple[StageEntry, ...]:
        """Normal stages, in registration order."""
        return tuple(e for e in self._entries if not e.is_error_stage)

    @property
    def error_stages(self) -> tuple[StageEntry, ...]:
        """Error-stages, in registration order."""
        return tuple(e for e in self._entries if e.is_error_stage)

    def __len__(self) -> int:
        return len(self._entries)

    async def run(
        self,
        request: Request,
        trail: list[Any] | None = None,
    ) -> tuple[Request, Halt | None]:
        """Run the normal stages against *request* (see ``run_stages``)."""
        return await run_stages(self.stages, request, [] if trail is None else trail)


async def run_stages(
    stages: tuple[StageEntry, ...] | tuple[Callable[..., Any], ...],
    request: Request,
    trail: list[Any],
) -> tuple[Request, Halt | None]:
    """Run *stages* in order against *request*.

    Returns the (possibly replaced) request and the ``Halt`` that stopped
    the chain, if any. A ``Fail`` outcome or a raised exception
    propagates as an exception. Every stage that completes is appended
    to *trail* so its after-hook runs later.
    """
    for item in stages:
        if isinstance(item, StageEntry):
            if not item.applies_to(request.path):
                continue
            stage = item.stage
        else:
            stage = item

        outcome = resolve(await invoke(stage, request))
        match outcome:
            case Fail(error=error):
                raise error
            case Continue(request=replacement):
                trail.append(stage)
                if replacement is not None:
                    request = replacement
            case Halt():
                trail.append(stage)
                return request, outcome

    return request, None


async def apply_after_hooks(
    trail: list[Any],
    request: Request,
    response: Response,
) -> Response:
    """Pass *response* through the after-hooks of *trail*, last stage first."""
    for stage in reversed(trail):
        hook = getattr(stage, "after", None)
        if hook is None:
            continue
        result = await invoke(hook, request, response)
        if result is not None:
            response = result
    return response
