"""Query string parameters."""

from urllib.parse import parse_qs

from wren.http.multidict import MultiValueMapping

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class QueryParams(MultiValueMapping):
    """Parsed query string.

    Values are always strings, as sent by the client; ``get_int`` and
    ``get_bool`` do the common conversions with a fallback::

        page = request.query.get_int("page", 1)
        details = request.query.get_bool("details", False)
    """

    _raw: bytes

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        super().__init__(parse_qs(query_string.decode("latin-1"), keep_blank_values=True))
        object.__setattr__(self, "_raw", query_string)

    @property
    def raw(self) -> bytes:
        """The query string exactly as received."""
        return self._raw

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Value as int; *default* when missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        """Value as bool (``true``, ``1``, ``yes``, ``on`` are true)."""
        value = self.get(key)
        if value is None:
            return default
        return value.lower() in _TRUE_VALUES
