"""Filesystem mutation gateway.

Every write the sync engine performs goes through this interface so that
dry-run mode can swap in a no-op implementation. Reads are done directly
on the real filesystem by callers, which keeps classification identical
between dry-run and real runs.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Filesystem(ABC):
    @property
    @abstractmethod
    def is_dry_run(self) -> bool:
        """Return True if mutations are only reported, not performed."""

    @abstractmethod
    def make_dirs(self, path: Path) -> None:
        """Create a directory and any missing parents."""

    @abstractmethod
    def create_symlink(self, *, link_path: Path, dest: Path) -> None:
        """Create link_path pointing at dest, creating parents as needed."""

    @abstractmethod
    def remove_link(self, path: Path) -> None:
        """Remove a symlink or regular file (never follows links)."""

    @abstractmethod
    def remove_tree(self, path: Path) -> None:
        """Recursively remove a real directory."""

    @abstractmethod
    def copy_tree(self, *, src: Path, dst: Path) -> None:
        """Copy a directory tree; dst must not exist."""

    @abstractmethod
    def copy_file(self, *, src: Path, dst: Path) -> None:
        """Copy a single file, preserving metadata."""

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Write a UTF-8 text file atomically."""
