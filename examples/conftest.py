"""Shared pytest fixtures for sprig examples.

Each example directory holds an ``app.py`` defining a module-level
``app``. The fixtures re-execute that file per test, so module state
such as an in-memory user table starts fresh, then freeze the route
tree the way the first dispatch would.
"""

import importlib.util
from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from sprig.app import App
from sprig.testing import TestClient


def load_example_app(app_path: Path) -> App:
    """Execute *app_path* in an isolated module and return its ``app``."""
    spec = importlib.util.spec_from_file_location(f"example_{app_path.parent.name}", app_path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load example app from {app_path}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    app = module.app
    if not isinstance(app, App):
        msg = f"{app_path} must define a sprig App named 'app', got {type(app).__name__}"
        raise TypeError(msg)
    return app


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> App:
    """A fresh, frozen App from the sibling app.py next to the test file."""
    app = load_example_app(Path(request.path).parent / "app.py")
    app.freeze()
    return app


@pytest.fixture
async def example_client(example_app: App) -> AsyncIterator[TestClient]:
    """A ``TestClient`` already entered over ``example_app``."""
    async with TestClient(example_app) as client:
        yield client
