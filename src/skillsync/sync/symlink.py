"""Symlink mode: the whole target directory is one link to the source."""

import logging
from pathlib import Path

from skillsync.gateway.filesystem.abc import Filesystem
from skillsync.sync.checksum import compute_dir_hash
from skillsync.sync.exceptions import MigrationConflictError, SyncError, TargetConflictError
from skillsync.sync.links import is_within, normalize_path, resolve_link_target
from skillsync.sync.manifest import MANIFEST_FILE, read_manifest
from skillsync.sync.models import SymlinkResult, TargetStatus
from skillsync.sync.status import check_status

logger = logging.getLogger(__name__)


def _is_managed_copy(entry: Path, managed: dict[str, str]) -> bool:
    fingerprint = managed.get(entry.name)
    if fingerprint is None or entry.is_symlink() or not entry.is_dir():
        return False
    return compute_dir_hash(entry) == fingerprint


def _local_entries(target_path: Path, source: Path) -> list[Path]:
    """Entries of a real target directory that belong to the user.

    Per-skill links back into the source, the copy-mode manifest and managed
    copies still matching their recorded fingerprint are sync artifacts,
    not user content. An edited copy counts as local.
    """
    abs_source = normalize_path(source)
    managed = read_manifest(target_path).managed
    entries: list[Path] = []
    for entry in sorted(target_path.iterdir()):
        if entry.name == MANIFEST_FILE:
            continue
        if entry.is_symlink() and is_within(resolve_link_target(entry), abs_source):
            continue
        if _is_managed_copy(entry, managed):
            continue
        entries.append(entry)
    return entries


def migrate_to_source(target_path: Path, source: Path, fs: Filesystem) -> list[str]:
    """Copy a target's local entries into the source directory.

    Nothing is copied if any entry name already exists in the source; the
    user has to resolve duplicates by hand.

    Returns:
        Names of the migrated entries

    Raises:
        MigrationConflictError: If an entry already exists in the source
    """
    entries = _local_entries(target_path, source)
    clashes = [e.name for e in entries if (source / e.name).exists() or (source / e.name).is_symlink()]
    if clashes:
        raise MigrationConflictError(target_path, clashes)

    fs.make_dirs(source)
    for entry in entries:
        dst = source / entry.name
        if entry.is_dir() and not entry.is_symlink():
            fs.copy_tree(src=entry, dst=dst)
        else:
            fs.copy_file(src=entry, dst=dst)
        logger.debug("Migrated %s -> %s", entry, dst)
    return [e.name for e in entries]


def sync_target_symlink(
    target_path: Path,
    source: Path,
    fs: Filesystem,
    *,
    force: bool,
) -> SymlinkResult:
    """Drive a symlink-mode target to LINKED.

    Args:
        target_path: Configured target directory
        source: Canonical source directory
        fs: Filesystem gateway (real or dry-run)
        force: Replace a link that points somewhere else

    Returns:
        SymlinkResult describing the action taken

    Raises:
        TargetConflictError: Target links elsewhere and force is not set
        MigrationConflictError: Local entries collide with source skills
        SyncError: Target path is neither a directory nor a symlink
    """
    status = check_status(target_path, source)
    logger.debug("Symlink target %s classified as %s", target_path, status)

    if status == TargetStatus.LINKED:
        return SymlinkResult(status=status, action="none", message="already linked")

    if status == TargetStatus.NOT_EXIST:
        fs.create_symlink(link_path=target_path, dest=source)
        return SymlinkResult(status=status, action="created", message="symlink created")

    if status == TargetStatus.BROKEN:
        fs.remove_link(target_path)
        fs.create_symlink(link_path=target_path, dest=source)
        return SymlinkResult(status=status, action="fixed", message="broken link fixed")

    if status == TargetStatus.CONFLICT:
        dest = resolve_link_target(target_path)
        if not force:
            raise TargetConflictError(target_path, dest)
        fs.remove_link(target_path)
        fs.create_symlink(link_path=target_path, dest=source)
        return SymlinkResult(status=status, action="relinked", message=f"conflict resolved (forced, was -> {dest})")

    if status in (TargetStatus.HAS_FILES, TargetStatus.MERGED):
        from_copy = bool(read_manifest(target_path).managed)
        migrated = migrate_to_source(target_path, source, fs)
        fs.remove_tree(target_path)
        fs.create_symlink(link_path=target_path, dest=source)
        if status == TargetStatus.MERGED:
            message = f"converted from merge layout and linked ({len(migrated)} local migrated)"
        elif from_copy:
            message = f"converted from copy layout and linked ({len(migrated)} local migrated)"
        else:
            message = f"files migrated and linked ({len(migrated)} migrated)"
        return SymlinkResult(status=status, action="migrated", message=message)

    raise SyncError(f"Target path is not a directory or symlink: {target_path}")
