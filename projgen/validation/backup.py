"""Backup snapshots and rollback of a project directory.

A snapshot is a full recursive copy of the directory at a sibling path
(``<path>.bak`` by default). Rollback moves the snapshot back in place of
whatever is left at the original path, or simply removes the path when there
was nothing to snapshot.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from projgen.config import BackupCollision, BackupConfig
from projgen.errors import BackupError
from projgen.utils import print_info, print_success, print_verbose, print_warning


@dataclass(frozen=True)
class BackupSnapshot:
    """A backup taken before a mutating step.

    ``backup_path`` is ``None`` when the source did not exist, meaning a
    rollback only has to remove what was created.
    """

    source: Path
    backup_path: Path | None = None

    @property
    def has_backup(self) -> bool:
        return self.backup_path is not None and self.backup_path.exists()


def backup_path_for(path: Path, suffix: str = ".bak") -> Path:
    """Return the conventional sibling backup path for *path*."""
    return path.with_name(path.name + suffix)


def _remove_path(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


class BackupManager:
    """Creates and discards backup snapshots."""

    def __init__(self, config: BackupConfig | None = None) -> None:
        self.config = config or BackupConfig()

    def _target_for(self, path: Path) -> Path:
        target = backup_path_for(path, self.config.suffix)
        if not target.exists():
            return target

        if self.config.collision is BackupCollision.OVERWRITE:
            print_warning(f"Overwriting existing backup {target}")
            try:
                _remove_path(target)
            except OSError as exc:
                raise BackupError(f"Could not remove existing backup {target}: {exc}") from exc
            return target

        if self.config.collision is BackupCollision.VERSION:
            counter = 1
            while True:
                candidate = target.with_name(f"{target.name}.{counter}")
                if not candidate.exists():
                    return candidate
                counter += 1

        raise BackupError(
            f"Backup {target} already exists. Remove it or choose another "
            f"backup collision policy (overwrite, version)."
        )

    def create_backup(self, path: str | Path) -> BackupSnapshot:
        """Snapshot *path* before it is mutated.

        A missing *path* is a no-op success. A stale backup lying next to a
        missing path is reported but never attached to the snapshot.

        Raises:
            BackupError: If the copy fails or a backup already exists under
                the ``fail`` collision policy.
        """
        source = Path(path)

        if not source.exists():
            stale = backup_path_for(source, self.config.suffix)
            if stale.exists():
                print_warning(
                    f"Found a stale backup at {stale} from an earlier run; it will be left untouched"
                )
            print_verbose(f"Nothing to back up at {source}")
            return BackupSnapshot(source=source)

        if not source.is_dir():
            raise BackupError(f"Cannot back up {source}: not a directory")

        target = self._target_for(source)
        print_info(f"Creating backup of {source}...")
        try:
            shutil.copytree(source, target, symlinks=True)
        except (OSError, shutil.Error) as exc:
            if target.exists():
                shutil.rmtree(target, ignore_errors=True)
            raise BackupError(f"Failed to back up {source} to {target}: {exc}") from exc

        print_success(f"Backup created at {target}")
        return BackupSnapshot(source=source, backup_path=target)

    def discard(self, snapshot: BackupSnapshot) -> None:
        """Delete the snapshot's backup after a successful run."""
        if not snapshot.has_backup:
            return
        try:
            _remove_path(snapshot.backup_path)
            print_verbose(f"Removed backup {snapshot.backup_path}")
        except OSError as exc:
            print_warning(f"Could not remove backup {snapshot.backup_path}: {exc}")


class RollbackManager:
    """Restores a snapshot, or removes partial state, after a failure.

    Rollback is best-effort: problems are reported as warnings and never
    raised, so the caller can still report the original error.
    """

    def __init__(self, config: BackupConfig | None = None) -> None:
        self.config = config or BackupConfig()

    def rollback(self, path: str | Path, snapshot: BackupSnapshot | None = None) -> bool:
        """Roll *path* back.

        When *snapshot* is omitted the conventional sibling backup is used.

        Returns:
            ``True`` if the rollback completed cleanly.
        """
        target = Path(path)
        if snapshot is None:
            backup = backup_path_for(target, self.config.suffix)
        else:
            backup = snapshot.backup_path

        print_warning(f"Rolling back changes to {target}...")

        try:
            if backup is not None and backup.exists():
                if target.exists() or target.is_symlink():
                    _remove_path(target)
                shutil.move(str(backup), str(target))
                print_info(f"Restored {target} from backup")
            elif target.exists() or target.is_symlink():
                _remove_path(target)
                print_info(f"Removed partially created {target}")
            else:
                print_verbose(f"Nothing to roll back at {target}")
        except (OSError, shutil.Error) as exc:
            print_warning(f"Rollback of {target} did not complete: {exc}")
            return False

        return True
