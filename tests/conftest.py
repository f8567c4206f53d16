"""
Pytest configuration and fixtures for Fragmently tests.
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# Add the repository root to path for imports
# This allows `from fragmently.runtime import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from fragmently.config import RuntimeSettings  # noqa: E402
from fragmently.errors import EngineError  # noqa: E402


class RecordingEngine:
    """Fake rendering engine that records every call."""

    def __init__(self, fail_with: Exception | None = None):
        self.calls: list[dict[str, Any]] = []
        self.fail_with = fail_with

    async def render(self, component, *, props=None, slots=None) -> str:
        self.calls.append({"component": component, "props": props, "slots": slots})
        if self.fail_with is not None:
            raise self.fail_with
        return f"<div>{component}</div>"


class FakeModule:
    """Stands in for an imported template module with a default export."""

    def __init__(self, default):
        self.default = default


@pytest.fixture
def engine():
    """Recording engine."""
    return RecordingEngine()


@pytest.fixture
def failing_engine():
    """Engine that always raises EngineError."""
    return RecordingEngine(fail_with=EngineError("boom"))


@pytest.fixture
def settings():
    """Zero-config settings, independent of the environment."""
    return RuntimeSettings()


@pytest.fixture
def make_loader():
    """Factory for counting async loaders."""

    def _make(handle: Any = "component", counter: list | None = None):
        async def loader():
            if counter is not None:
                counter.append(1)
            return FakeModule(handle)

        return loader

    return _make
