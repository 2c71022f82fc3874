"""Read-only helpers for inspecting symlinks."""

import os
from pathlib import Path


def normalize_path(path: Path) -> Path:
    """Return an absolute path with symlinks and `..` resolved where possible."""
    return Path(os.path.realpath(path.expanduser()))


def resolve_link_target(link_path: Path) -> Path:
    """Resolve where a symlink points, even if the destination is missing.

    Relative link contents are interpreted against the link's parent
    directory, matching how the OS follows them.
    """
    raw = Path(os.readlink(link_path))
    if not raw.is_absolute():
        raw = link_path.parent / raw
    return normalize_path(raw)


def paths_equal(a: Path, b: Path) -> bool:
    """Compare two paths after normalizing both to absolute form."""
    return normalize_path(a) == normalize_path(b)


def is_within(path: Path, root: Path) -> bool:
    """Return True if path is root or lies underneath it.

    Both arguments must already be normalized.
    """
    return path == root or root in path.parents


def is_hidden(name: str) -> bool:
    """Check if a file or directory name starts with a dot."""
    return name.startswith(".")
