"""Fake implementation of TargetBackup for testing."""

from pathlib import Path

from skillsync.gateway.backup.abc import TargetBackup


class FakeTargetBackup(TargetBackup):
    """In-memory backup gateway that records calls and never touches disk.

    Args:
        backup_paths: Path to return per target name; targets not listed
            return None (nothing backed up)
        fail_for: Target names for which create() raises OSError
    """

    def __init__(
        self,
        *,
        backup_paths: dict[str, Path] | None = None,
        fail_for: set[str] | None = None,
    ) -> None:
        self._backup_paths = backup_paths or {}
        self._fail_for = fail_for or set()
        self._created: list[tuple[str, Path]] = []

    def create(self, target_name: str, target_path: Path) -> Path | None:
        if target_name in self._fail_for:
            raise OSError(f"backup failed for {target_name}")
        self._created.append((target_name, target_path))
        return self._backup_paths.get(target_name)

    @property
    def created(self) -> list[tuple[str, Path]]:
        """Read-only access to (target_name, target_path) for each backup."""
        return list(self._created)
