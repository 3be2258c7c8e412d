"""``wren routes`` — print the route table in matching order."""

import argparse
import sys

from wren.cli._resolve import resolve_app
from wren.routing.route import Route

_HEADER = ("METHOD", "PATH", "HANDLER")


def _row(route: Route) -> tuple[str, str, str]:
    handler = getattr(route.handler, "__name__", repr(route.handler))
    if route.name:
        handler += f" ({route.name})"
    if route.stages:
        handler += f" [+{len(route.stages)} stage(s)]"
    return ", ".join(sorted(route.methods)), route.path, handler


def run_routes(args: argparse.Namespace) -> None:
    """List ``args.app``'s routes, first match first, plus its stage count."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = [_row(route) for route in app.routes]
    if not rows:
        print("No routes registered.")
        return

    widths = [max(len(row[i]) for row in [_HEADER, *rows]) for i in range(2)]
    for methods, path, handler in [_HEADER, *rows]:
        print(f"{methods:<{widths[0]}}  {path:<{widths[1]}}  {handler}")
    print(f"\n{len(rows)} route(s), {len(app.stages)} global stage(s)")
