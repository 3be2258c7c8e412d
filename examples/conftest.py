"""Shared pytest configuration for the day-by-day examples.

Provides the ``example_app`` fixture that loads a fresh App instance
from the ``app.py`` file in the same directory as the test, and
``load_example`` for other app modules in that directory. Each call
re-executes the file in an isolated module namespace, so every test
starts with a clean, unfrozen app.
"""

import importlib.util
from collections.abc import Callable
from pathlib import Path

import pytest


def _load(app_path: Path):
    module_name = f"example_{app_path.parent.name}_{app_path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    """Load a fresh App from the sibling app.py next to the test file."""
    return _load(Path(request.path).parent / "app.py")


@pytest.fixture
def load_example(request: pytest.FixtureRequest) -> Callable[[str], object]:
    """Return a loader for sibling app modules, e.g. ``load_example("methods_app.py")``."""
    here = Path(request.path).parent
    return lambda filename: _load(here / filename)
