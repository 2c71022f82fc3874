"""Production implementation of target backups."""

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from skillsync.gateway.backup.abc import TargetBackup

logger = logging.getLogger(__name__)

# One directory per sync run, e.g. backups/2026-01-31_14-05-09/claude
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


@dataclass(frozen=True)
class BackupSnapshot:
    """A timestamped backup run and the targets it captured."""

    timestamp: str
    path: Path
    targets: tuple[str, ...]


class RealTargetBackup(TargetBackup):
    """Copies target directories under `<backup_root>/<timestamp>/<target>`.

    All targets backed up through one instance share a timestamp, so a
    single sync run produces a single snapshot directory.
    """

    def __init__(self, backup_root: Path) -> None:
        self._backup_root = backup_root
        self._timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)

    def create(self, target_name: str, target_path: Path) -> Path | None:
        if target_path.is_symlink() or not target_path.is_dir():
            return None
        if not any(target_path.iterdir()):
            return None

        backup_path = self._backup_root / self._timestamp / target_name
        if backup_path.exists():
            shutil.rmtree(backup_path)
        backup_path.parent.mkdir(parents=True, exist_ok=True)
        # Per-skill links are preserved as links, not followed into source
        shutil.copytree(target_path, backup_path, symlinks=True)
        logger.debug("Backed up %s to %s", target_path, backup_path)
        return backup_path


def list_backups(backup_root: Path) -> list[BackupSnapshot]:
    """List backup runs, newest first."""
    if not backup_root.is_dir():
        return []

    snapshots: list[BackupSnapshot] = []
    for entry in backup_root.iterdir():
        if not entry.is_dir():
            continue
        targets = tuple(sorted(t.name for t in entry.iterdir() if t.is_dir()))
        snapshots.append(BackupSnapshot(timestamp=entry.name, path=entry, targets=targets))
    return sorted(snapshots, key=lambda s: s.timestamp, reverse=True)
