"""Routing — ordered route table with first-match-wins lookup.

Routes are registered during setup and frozen when the app compiles.
"""

from wren.routing.route import PathSegment, Route, RouteMatch
from wren.routing.router import Router, parse_path

__all__ = ["PathSegment", "Route", "RouteMatch", "Router", "parse_path"]
