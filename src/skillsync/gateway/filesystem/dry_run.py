"""No-op filesystem for dry-run mode.

This module provides a filesystem gateway that prevents any mutation
while reporting what would have been done.
"""

from pathlib import Path

from skillsync.gateway.filesystem.abc import Filesystem
from skillsync.output import user_output


class DryRunFilesystem(Filesystem):
    """No-op wrapper that prevents filesystem mutation in dry-run mode.

    Every method on the gateway is a mutation, so all of them only print
    what would happen. The wrapped implementation is kept so callers can
    inspect what a real run would have used.
    """

    def __init__(self, wrapped: Filesystem) -> None:
        """Create a dry-run wrapper around a Filesystem implementation.

        Args:
            wrapped: The Filesystem implementation to wrap
        """
        self._wrapped = wrapped

    @property
    def is_dry_run(self) -> bool:
        return True

    def make_dirs(self, path: Path) -> None:
        if not path.exists():
            user_output(f"[DRY RUN] Would create directory: {path}")

    def create_symlink(self, *, link_path: Path, dest: Path) -> None:
        user_output(f"[DRY RUN] Would create symlink: {link_path} -> {dest}")

    def remove_link(self, path: Path) -> None:
        user_output(f"[DRY RUN] Would remove link: {path}")

    def remove_tree(self, path: Path) -> None:
        user_output(f"[DRY RUN] Would remove directory: {path}")

    def copy_tree(self, *, src: Path, dst: Path) -> None:
        user_output(f"[DRY RUN] Would copy: {src} -> {dst}")

    def copy_file(self, *, src: Path, dst: Path) -> None:
        user_output(f"[DRY RUN] Would copy file: {src} -> {dst}")

    def write_text(self, path: Path, content: str) -> None:
        user_output(f"[DRY RUN] Would write: {path}")
