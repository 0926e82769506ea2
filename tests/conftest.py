"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from openide.config import IDESettings
from openide.core.tabs import TabSession
from openide.core.workspace import WorkspaceStore
from openide.session import IDESession


@pytest.fixture
def root(tmp_path):
    """An existing, empty workspace directory."""
    path = tmp_path / "ws"
    path.mkdir()
    return path


@pytest.fixture
def workspace(root) -> WorkspaceStore:
    return WorkspaceStore(root)


@pytest.fixture
def tabs(workspace) -> TabSession:
    return TabSession(workspace)


@pytest.fixture
def settings(root) -> IDESettings:
    return IDESettings(workspace_root=root, seed_workspace=False)


@pytest.fixture
def session(settings) -> IDESession:
    """Session over an empty workspace."""
    return IDESession(settings)
