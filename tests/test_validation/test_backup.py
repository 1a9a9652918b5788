"""Unit tests for backup snapshots and rollback (projgen.validation.backup).

Tests cover:
- create_backup on missing and existing directories
- Collision policies: fail, overwrite, version
- Stale backups next to a missing path
- rollback with and without a backup, idempotency, snapshot precedence
- discard after success
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from projgen.config import BackupCollision, BackupConfig
from projgen.errors import BackupError
from projgen.validation.backup import (
    BackupManager,
    BackupSnapshot,
    RollbackManager,
    backup_path_for,
)


def _make_tree(root: Path) -> None:
    (root / "docs").mkdir(parents=True)
    (root / "README.md").write_text("# Original\n", encoding="utf-8")
    (root / "docs" / "CONTRIBUTING.md").write_text("contribute\n", encoding="utf-8")


def _snapshot(root: Path) -> dict[str, str]:
    return {
        p.relative_to(root).as_posix(): p.read_text(encoding="utf-8")
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "my-project"
    _make_tree(root)
    return root


# ---------------------------------------------------------------------------
# BackupManager
# ---------------------------------------------------------------------------


class TestCreateBackup:
    @pytest.mark.unit
    def test_backup_path_convention(self, tmp_path):
        assert backup_path_for(tmp_path / "app-x") == tmp_path / "app-x.bak"
        assert backup_path_for(tmp_path / "app-x", ".old") == tmp_path / "app-x.old"

    @pytest.mark.unit
    def test_missing_path_is_noop(self, tmp_path):
        snapshot = BackupManager().create_backup(tmp_path / "missing")
        assert snapshot.backup_path is None
        assert not snapshot.has_backup
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    def test_existing_directory_is_copied(self, project):
        snapshot = BackupManager().create_backup(project)
        backup = project.with_name("my-project.bak")
        assert snapshot.backup_path == backup
        assert snapshot.has_backup
        assert _snapshot(backup) == _snapshot(project)

    @pytest.mark.unit
    def test_regular_file_is_rejected(self, tmp_path):
        target = tmp_path / "not-a-dir"
        target.write_text("x", encoding="utf-8")
        with pytest.raises(BackupError, match="not a directory"):
            BackupManager().create_backup(target)

    @pytest.mark.unit
    def test_collision_fail_is_default(self, project):
        project.with_name("my-project.bak").mkdir()
        with pytest.raises(BackupError, match="already exists"):
            BackupManager().create_backup(project)

    @pytest.mark.unit
    def test_collision_overwrite(self, project):
        stale = project.with_name("my-project.bak")
        stale.mkdir()
        (stale / "stale.txt").write_text("old", encoding="utf-8")

        manager = BackupManager(BackupConfig(collision=BackupCollision.OVERWRITE))
        snapshot = manager.create_backup(project)

        assert snapshot.backup_path == stale
        assert not (stale / "stale.txt").exists()
        assert _snapshot(stale) == _snapshot(project)

    @pytest.mark.unit
    def test_collision_version(self, project):
        project.with_name("my-project.bak").mkdir()
        project.with_name("my-project.bak.1").mkdir()

        manager = BackupManager(BackupConfig(collision=BackupCollision.VERSION))
        snapshot = manager.create_backup(project)

        assert snapshot.backup_path == project.with_name("my-project.bak.2")
        assert _snapshot(snapshot.backup_path) == _snapshot(project)

    @pytest.mark.unit
    def test_stale_backup_next_to_missing_path_is_not_attached(self, tmp_path):
        stale = tmp_path / "new-app.bak"
        stale.mkdir()
        snapshot = BackupManager().create_backup(tmp_path / "new-app")
        assert snapshot.backup_path is None
        assert stale.exists()

    @pytest.mark.unit
    def test_discard_removes_backup(self, project):
        manager = BackupManager()
        snapshot = manager.create_backup(project)
        manager.discard(snapshot)
        assert not project.with_name("my-project.bak").exists()
        assert project.exists()

    @pytest.mark.unit
    def test_discard_without_backup_is_noop(self, tmp_path):
        BackupManager().discard(BackupSnapshot(source=tmp_path / "x"))


# ---------------------------------------------------------------------------
# RollbackManager
# ---------------------------------------------------------------------------


class TestRollback:
    @pytest.mark.unit
    def test_restores_original_contents(self, project):
        original = _snapshot(project)
        snapshot = BackupManager().create_backup(project)

        (project / "README.md").write_text("corrupted", encoding="utf-8")
        (project / "partial.txt").write_text("half-written", encoding="utf-8")

        assert RollbackManager().rollback(project, snapshot)
        assert _snapshot(project) == original
        assert not project.with_name("my-project.bak").exists()

    @pytest.mark.unit
    def test_uses_conventional_backup_without_snapshot(self, project):
        original = _snapshot(project)
        BackupManager().create_backup(project)
        (project / "README.md").unlink()

        RollbackManager().rollback(project)

        assert _snapshot(project) == original
        assert not project.with_name("my-project.bak").exists()

    @pytest.mark.unit
    def test_restores_when_target_was_deleted(self, project):
        original = _snapshot(project)
        snapshot = BackupManager().create_backup(project)

        shutil.rmtree(project)
        RollbackManager().rollback(project, snapshot)
        assert _snapshot(project) == original

    @pytest.mark.unit
    def test_removes_partial_directory_without_backup(self, tmp_path):
        target = tmp_path / "test-rollback"
        snapshot = BackupManager().create_backup(target)
        _make_tree(target)

        assert RollbackManager().rollback(target, snapshot)
        assert not target.exists()

    @pytest.mark.unit
    def test_idempotent(self, tmp_path):
        target = tmp_path / "test-rollback"
        _make_tree(target)
        manager = RollbackManager()

        assert manager.rollback(target)
        assert manager.rollback(target)
        assert not target.exists()

    @pytest.mark.unit
    def test_clean_path_is_noop(self, tmp_path):
        assert RollbackManager().rollback(tmp_path / "never-created")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    def test_snapshot_without_backup_ignores_stale_bak(self, tmp_path):
        stale = tmp_path / "new-app.bak"
        stale.mkdir()
        (stale / "old.txt").write_text("old", encoding="utf-8")

        target = tmp_path / "new-app"
        snapshot = BackupManager().create_backup(target)
        _make_tree(target)

        RollbackManager().rollback(target, snapshot)

        assert not target.exists()
        assert (stale / "old.txt").exists()

    @pytest.mark.unit
    def test_failures_are_swallowed(self, tmp_path, monkeypatch):
        target = tmp_path / "locked"
        _make_tree(target)

        def _boom(*args, **kwargs):
            raise PermissionError("read-only file system")

        monkeypatch.setattr("projgen.validation.backup.shutil.rmtree", _boom)
        assert RollbackManager().rollback(target) is False
        assert target.exists()
