"""Shared pytest configuration for the muxwrap examples.

Provides the ``example_mux`` fixture that loads a fresh Mux from the
``app.py`` file in the same directory as the test. Each call re-executes
app.py in an isolated module namespace, so every test starts with clean
state (counters at zero, the widget store empty).
"""

import importlib.util
import sys
from pathlib import Path

import pytest


@pytest.fixture
def example_mux(request: pytest.FixtureRequest):
    """Load a fresh Mux from the sibling app.py next to the test file."""
    app_path = Path(request.path).parent / "app.py"
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module.mux
