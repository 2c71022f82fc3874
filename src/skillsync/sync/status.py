"""Read-only classification of targets against the source directory.

Nothing in this module mutates the filesystem; every function is safe to
call repeatedly, including during dry runs and diagnostics.
"""

from dataclasses import dataclass
from pathlib import Path

from skillsync.sync.links import is_hidden, is_within, normalize_path, resolve_link_target
from skillsync.sync.manifest import read_manifest
from skillsync.sync.models import TargetStatus


@dataclass(frozen=True)
class ModeStatus:
    """Status of a merge- or copy-mode target with entry counts.

    Attributes:
        status: Overall classification
        synced: Entries skillsync owns (links into source, or manifest entries)
        local: Entries the user owns
    """

    status: TargetStatus
    synced: int
    local: int


def _visible_entries(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if not is_hidden(p.name))


def source_link_names(directory: Path, source: Path) -> list[str]:
    """Names of entries of directory that are symlinks resolving into source."""
    abs_source = normalize_path(source)
    return [
        entry.name
        for entry in _visible_entries(directory)
        if entry.is_symlink() and is_within(resolve_link_target(entry), abs_source)
    ]


def count_source_links(directory: Path, source: Path) -> int:
    return len(source_link_names(directory, source))


def check_status(target_path: Path, source: Path) -> TargetStatus:
    """Classify a symlink-mode target.

    Args:
        target_path: Configured target directory
        source: Canonical source directory

    Returns:
        NOT_EXIST, LINKED, BROKEN, CONFLICT, MERGED (per-skill links, i.e.
        wrong-mode drift), HAS_FILES, or UNKNOWN for non-directories
    """
    if target_path.is_symlink():
        dest = resolve_link_target(target_path)
        if dest == normalize_path(source):
            if not target_path.exists():
                return TargetStatus.BROKEN
            return TargetStatus.LINKED
        if not dest.exists():
            return TargetStatus.BROKEN
        return TargetStatus.CONFLICT

    if not target_path.exists():
        return TargetStatus.NOT_EXIST

    if not target_path.is_dir():
        return TargetStatus.UNKNOWN

    if count_source_links(target_path, source) > 0:
        return TargetStatus.MERGED
    return TargetStatus.HAS_FILES


def check_status_merge(target_path: Path, source: Path) -> ModeStatus:
    """Classify a merge-mode target and count linked vs local entries."""
    if target_path.is_symlink():
        if resolve_link_target(target_path) == normalize_path(source):
            return ModeStatus(status=TargetStatus.LINKED, synced=0, local=0)
        return ModeStatus(status=TargetStatus.CONFLICT, synced=0, local=0)

    if not target_path.exists():
        return ModeStatus(status=TargetStatus.NOT_EXIST, synced=0, local=0)
    if not target_path.is_dir():
        return ModeStatus(status=TargetStatus.UNKNOWN, synced=0, local=0)

    total = len(_visible_entries(target_path))
    linked = count_source_links(target_path, source)
    if linked > 0:
        return ModeStatus(status=TargetStatus.MERGED, synced=linked, local=total - linked)
    return ModeStatus(status=TargetStatus.HAS_FILES, synced=0, local=total)


def check_status_copy(target_path: Path) -> ModeStatus:
    """Classify a copy-mode target from its manifest.

    Only directories count as local entries; stray files are ignored.
    """
    if target_path.is_symlink():
        return ModeStatus(status=TargetStatus.LINKED, synced=0, local=0)
    if not target_path.exists():
        return ModeStatus(status=TargetStatus.NOT_EXIST, synced=0, local=0)
    if not target_path.is_dir():
        return ModeStatus(status=TargetStatus.UNKNOWN, synced=0, local=0)

    manifest = read_manifest(target_path)
    local = 0
    for entry in _visible_entries(target_path):
        if entry.is_dir() and not entry.is_symlink() and entry.name not in manifest.managed:
            local += 1

    if manifest.managed:
        return ModeStatus(status=TargetStatus.COPIED, synced=len(manifest.managed), local=local)
    return ModeStatus(status=TargetStatus.HAS_FILES, synced=0, local=local)
