"""Abstract base class for pre-sync target backups."""

from abc import ABC, abstractmethod
from pathlib import Path


class TargetBackup(ABC):
    """Abstract interface for snapshotting a target before it is mutated.

    The sync engine calls this once per target, before the reconciler runs,
    and only for real directories. The gateway pattern keeps tests from
    writing into the user's data directory.

    Two implementations:
    - RealTargetBackup: Production - copies into the XDG data directory
    - FakeTargetBackup: Testing - records calls, never touches disk
    """

    @abstractmethod
    def create(self, target_name: str, target_path: Path) -> Path | None:
        """Snapshot a target directory.

        Args:
            target_name: Configured name of the target
            target_path: Directory to snapshot

        Returns:
            Path to the snapshot, or None if there was nothing to back up
            (missing path, symlink, or empty directory)

        Raises:
            OSError: If the snapshot cannot be written
        """
        ...
