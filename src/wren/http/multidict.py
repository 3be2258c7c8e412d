"""Read-only multi-value mapping shared by query strings and form bodies.

Both arrive as ``name -> [values]``. Plain indexing yields the first
value, which is what handlers want nearly every time; ``get_list``
exposes repeats (checkboxes, ``?tag=a&tag=b``).
"""

from collections.abc import Iterator, Mapping
from typing import Any


class MultiValueMapping(Mapping[str, str]):
    """Immutable ``str -> list[str]`` store viewed as ``Mapping[str, str]``."""

    _data: dict[str, list[str]]

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        values = self._data.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, in order."""
        return list(self._data.get(key, ()))

    def to_dict(self) -> dict[str, Any]:
        """Plain dict: single values as ``str``, repeated keys as lists."""
        return {k: v[0] if len(v) == 1 else list(v) for k, v in self._data.items()}
