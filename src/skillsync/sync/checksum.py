"""Content fingerprints for copy-mode change detection."""

import hashlib
import os
from pathlib import Path


def compute_dir_hash(directory: Path) -> str:
    """Compute a deterministic SHA-256 fingerprint of a directory.

    Hashes sorted relative paths together with file contents, so renames and
    edits both change the fingerprint. `.git` directories are ignored and
    unreadable files are skipped.

    Args:
        directory: Directory to fingerprint

    Returns:
        Hash string in format "sha256:<hex_digest>"
    """
    entries: list[tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames[:] = [d for d in dirnames if d != ".git"]
        current = Path(dirpath)
        for filename in filenames:
            file_path = current / filename
            entries.append((file_path.relative_to(directory).as_posix(), file_path))

    digest = hashlib.sha256()
    for rel_path, file_path in sorted(entries):
        try:
            content = file_path.read_bytes()
        except OSError:
            continue
        digest.update(rel_path.encode("utf-8"))
        digest.update(b"\0")
        digest.update(content)
        digest.update(b"\0")
    return f"sha256:{digest.hexdigest()}"
