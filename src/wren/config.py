"""Application configuration.

``AppConfig`` is frozen once built. ``AppConfig.from_env`` layers
``WREN_*`` environment variables and keyword overrides over the defaults.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from wren.errors import ConfigurationError

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Static files
    static_dir: str | Path | None = None
    static_url: str = "/static"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Logging
    log_level: str = "info"

    @classmethod
    def from_env(
        cls,
        prefix: str = "WREN_",
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> AppConfig:
        """Build a config from ``<PREFIX><FIELD>`` environment variables.

        Values are coerced using the type of each field's default.
        Explicit keyword *overrides* win over the environment::

            WREN_PORT=3000 WREN_DEBUG=true python app.py

        Raises ``ConfigurationError`` for values that cannot be coerced.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        for f in fields(cls):
            key = f"{prefix}{f.name.upper()}"
            if key not in env:
                continue
            values[f.name] = _coerce(f.name, env[key], f.default)

        values.update(overrides)
        return cls(**values)


def _coerce(name: str, raw: str, default: Any) -> Any:
    """Convert an environment string to the type of *default*."""
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
        msg = f"Invalid boolean for {name}: {raw!r}"
        raise ConfigurationError(msg)
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            msg = f"Invalid integer for {name}: {raw!r}"
            raise ConfigurationError(msg) from None
    if default is None and not raw:
        return None
    return raw
