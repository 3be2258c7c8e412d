"""Path parameter converters.

Built-in patterns for typed route segments like ``{id:int}``. A typed
segment only matches values its pattern accepts; the captured value
stays a string until the handler's annotation converts it.
"""

import re

CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}

_COMPILED: dict[str, re.Pattern[str]] = {
    name: re.compile(f"^{pattern}$") for name, pattern in CONVERTERS.items()
}


def segment_matches(value: str, param_type: str) -> bool:
    """True if a single path segment satisfies the converter's pattern.

    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    return _COMPILED[param_type].match(value) is not None
