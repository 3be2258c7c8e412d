"""App resolution for CLI commands.

Accepts ``module:attribute`` import strings and ``path/to/file.py:attribute``
file references; the attribute defaults to ``app``.
"""

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from wren.app import App


def _load_file(path: Path) -> ModuleType:
    """Import a standalone ``.py`` file, with its directory importable."""
    if not path.is_file():
        msg = f"No such file: {path}"
        raise ModuleNotFoundError(msg)
    directory = str(path.parent.resolve())
    if directory not in sys.path:
        sys.path.insert(0, directory)
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot import {path}"
        raise ModuleNotFoundError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[path.stem] = module
    spec.loader.exec_module(module)
    return module


def resolve_app(target: str) -> App:
    """Resolve *target* to a wren App instance.

    A callable attribute that is not itself an App is treated as a
    factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module or file cannot be found.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the target is not an ``App`` or a factory returning one.
    """
    location, _, attr_name = target.partition(":")
    attr_name = attr_name or "app"

    if location.endswith(".py"):
        module = _load_file(Path(location))
    else:
        module = importlib.import_module(location)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, App):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory {target!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{target!r} resolved to {type(obj).__name__}, not a wren.App instance"
        raise TypeError(msg)
    return obj
