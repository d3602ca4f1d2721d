"""pytest plugin: `pytest_plugins = ["cratenav.test_utils.fixtures"]`."""

from pathlib import Path

import pytest

from .bus import SpyBus
from .workspace import WorkspaceFactory


@pytest.fixture
def workspace_factory(tmp_path: Path) -> WorkspaceFactory:
    """A builder for Cargo trees under a fresh temporary directory."""
    return WorkspaceFactory(tmp_path)


@pytest.fixture
def spy_bus(monkeypatch: pytest.MonkeyPatch) -> SpyBus:
    """A `SpyBus` already capturing the global bus for this test."""
    return SpyBus().install(monkeypatch)
