"""Shared pytest configuration for thicket examples.

Provides the ``example_app`` fixture that loads a fresh module from the
``app.py`` file in the same directory as the test. Each call re-executes
app.py in an isolated module namespace, so every test builds its route
tree from scratch (route names are registered once per tree).
"""

import importlib.util
from pathlib import Path

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    """Load app.py next to the test file and return its module."""
    app_path = Path(request.path).parent / "app.py"
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
