from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import (  # noqa: E402
    FakeCapability,
    FakeOpenAIClient,
    WorkspaceBuilder,
)

FIXED_MOMENT = datetime(2024, 3, 5, 14, 7)


@pytest.fixture
def clock():
    """A clock frozen at 14:07 so timestamps are predictable."""

    return lambda: FIXED_MOMENT


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability()


@pytest.fixture
def openai_client() -> FakeOpenAIClient:
    return FakeOpenAIClient()


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch):
    """Point the data home and config lookup at a temp directory."""

    from quiz_tutor.core import workspace as workspace_mod
    from quiz_tutor.tutor import config as config_mod

    home = tmp_path / "data-home"
    monkeypatch.setenv(workspace_mod.WORKSPACE_ENV, str(home))
    monkeypatch.delenv(config_mod.CONFIG_PATH_ENV, raising=False)
    return home
