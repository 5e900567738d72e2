from __future__ import annotations

import pytest

from quiz_tutor.core import workspace


def test_ensure_workspace_creates_directories(tmp_path):
    root = tmp_path / "data"

    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: str(root)}
    )

    assert layout.home == root
    assert set(layout.directories) == {"config", "logs"}
    for key, path in layout.directories.items():
        assert path.is_dir()
        assert layout.created[key] is True
    assert layout.created["home"] is True


def test_ensure_workspace_is_idempotent(tmp_path):
    env = {workspace.WORKSPACE_ENV: str(tmp_path / "existing")}

    first = workspace.ensure_workspace(env=env)
    second = workspace.ensure_workspace(env=env)

    assert first.home == second.home
    assert not any(second.created.values())


def test_explicit_path_wins_over_env(tmp_path):
    custom = tmp_path / "custom-root"

    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: str(tmp_path / "ignored")},
        path=custom,
    )

    assert layout.home == custom
    assert not (tmp_path / "ignored").exists()


def test_ensure_workspace_without_create(tmp_path):
    root = tmp_path / "deferred"

    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: str(root)}, create=False
    )

    assert layout.path_for("config") == root / "config"
    assert not root.exists()
    assert not any(layout.created.values())


def test_default_home_used_without_override(monkeypatch, tmp_path):
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", tmp_path / "default")

    layout = workspace.ensure_workspace(env={}, create=False)

    assert layout.home == tmp_path / "default"


def test_ensure_workspace_errors_when_path_is_file(tmp_path):
    root = tmp_path / "file"
    root.write_text("not a dir", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(env={workspace.WORKSPACE_ENV: str(root)})


def test_subdirectory_file_is_rejected_without_create(tmp_path):
    root = tmp_path / "home"
    root.mkdir()
    (root / "logs").write_text("oops", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(
            env={workspace.WORKSPACE_ENV: str(root)}, create=False
        )


def test_default_home_falls_back_to_tempdir(tmp_path, monkeypatch):
    blocked = tmp_path / "blocked"
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", blocked)
    monkeypatch.setattr(
        workspace.tempfile, "gettempdir", lambda: str(tmp_path / "tmp")
    )
    original = workspace._materialize

    def fake_materialize(base, *, create):
        if base == blocked:
            raise PermissionError("denied")
        return original(base, create=create)

    monkeypatch.setattr(workspace, "_materialize", fake_materialize)

    layout = workspace.ensure_workspace(env={})

    assert layout.home == tmp_path / "tmp" / "quiz-tutor-data"


def test_override_does_not_fall_back(tmp_path, monkeypatch):
    def deny(base, *, create):
        raise PermissionError("denied")

    monkeypatch.setattr(workspace, "_materialize", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=tmp_path / "override")


def test_path_for_unknown_key_errors(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path, create=False)

    with pytest.raises(KeyError):
        layout.path_for("unknown")
