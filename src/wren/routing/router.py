"""Ordered route table with first-match-wins lookup.

Routes are matched segment by segment, left to right, in the order they
were registered. Ambiguity is resolved by registration order alone, never
by specificity, so the route that answers a path is always predictable.
"""

from dataclasses import dataclass

from wren.errors import ConfigurationError, MethodNotAllowed, NotFound
from wren.routing.params import CONVERTERS, segment_matches
from wren.routing.route import PathSegment, Route, RouteMatch


def split_path(path: str) -> list[str]:
    """Split a request path into non-empty segments (trailing slash ignored)."""
    return [p for p in path.strip("/").split("/") if p]


def _parse_segment(part: str, path: str) -> PathSegment:
    if part.startswith("<") and part.endswith(">"):
        msg = (
            f"Route {path!r} uses <param> syntax. "
            "Use :param or {param} for path parameters."
        )
        raise ConfigurationError(msg)

    if part.startswith(":"):
        return PathSegment(value=part, is_param=True, param_name=part[1:])

    if part.startswith("*"):
        return PathSegment(
            value=part, is_param=True, param_name=part[1:] or "path", param_type="path"
        )

    if part.startswith("{") and part.endswith("}"):
        inner = part[1:-1]
        if ":" in inner:
            param_name, param_type = inner.split(":", 1)
        else:
            param_name, param_type = inner, "str"
        if param_type not in CONVERTERS:
            msg = f"Unknown converter {param_type!r} in route {path!r}"
            raise ConfigurationError(msg)
        return PathSegment(
            value=part, is_param=True, param_name=param_name, param_type=param_type
        )

    return PathSegment(value=part)


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment(":id", is_param=True, ...)]
        "/users/{id:int}" -> [..., PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/*rest"    -> [..., PathSegment("*rest", is_param=True, param_type="path")]

    Raises ``ConfigurationError`` for empty or duplicate parameter names,
    unknown converters, and catch-alls that are not the last segment.
    """
    segments = [_parse_segment(part, path) for part in split_path(path)]

    seen: set[str] = set()
    for index, seg in enumerate(segments):
        if not seg.is_param:
            continue
        if not seg.param_name:
            msg = f"Empty parameter name in route {path!r}"
            raise ConfigurationError(msg)
        if seg.param_name in seen:
            msg = f"Duplicate parameter {seg.param_name!r} in route {path!r}"
            raise ConfigurationError(msg)
        seen.add(seg.param_name)
        if seg.is_catch_all and index != len(segments) - 1:
            msg = f"Catch-all {seg.value!r} must be the last segment of {path!r}"
            raise ConfigurationError(msg)
    return segments


@dataclass(frozen=True, slots=True)
class _CompiledRoute:
    """A route paired with its parsed segments."""

    route: Route
    segments: tuple[PathSegment, ...]

    def match_path(self, parts: list[str]) -> dict[str, str] | None:
        """Match request path parts; return extracted params or None."""
        segments = self.segments
        catch_all = bool(segments) and segments[-1].is_catch_all
        fixed = len(segments) - 1 if catch_all else len(segments)

        if catch_all:
            # The catch-all must consume at least one segment
            if len(parts) <= fixed:
                return None
        elif len(parts) != fixed:
            return None

        params: dict[str, str] = {}
        for seg, part in zip(segments[:fixed], parts, strict=False):
            if not seg.is_param:
                if seg.value != part:
                    return None
            elif segment_matches(part, seg.param_type):
                params[seg.param_name or ""] = part
            else:
                return None

        if catch_all:
            params[segments[-1].param_name or "path"] = "/".join(parts[fixed:])
        return params


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.add(Route("/users", handler, frozenset({"GET"})))
        router.add(Route("/users/:id", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_entries")

    def __init__(self) -> None:
        self._entries: list[_CompiledRoute] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Append a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._entries.append(_CompiledRoute(route, tuple(parse_path(route.path))))

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return [entry.route for entry in self._entries]

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Return the first route matching *method* and *path*.

        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if routes match the path but none
        allows the method.
        """
        parts = split_path(path)
        allowed: set[str] = set()

        for entry in self._entries:
            params = entry.match_path(parts)
            if params is None:
                continue
            if method in entry.route.methods:
                return RouteMatch(route=entry.route, path_params=params)
            # HEAD is answered by GET routes
            if method == "HEAD" and "GET" in entry.route.methods:
                return RouteMatch(route=entry.route, path_params=params)
            allowed.update(entry.route.methods)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")
