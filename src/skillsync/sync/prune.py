"""Orphan pruning for merge- and copy-mode targets.

Only artifacts skillsync provably created are ever removed: symlinks that
resolve into the source tree, and copies recorded in the target manifest.
Real directories and files the user put into a target are never touched.
"""

import logging
from pathlib import Path

from skillsync.gateway.filesystem.abc import Filesystem
from skillsync.sync.filters import should_sync_flat_name
from skillsync.sync.links import is_hidden, is_within, normalize_path, resolve_link_target
from skillsync.sync.manifest import read_manifest, write_manifest
from skillsync.sync.models import DiscoveredSkill, PruneResult

logger = logging.getLogger(__name__)


def prune_orphan_links(
    target_path: Path,
    skills: list[DiscoveredSkill],
    source: Path,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    fs: Filesystem,
) -> PruneResult:
    """Remove per-skill links into source that no longer belong in a target.

    Args:
        target_path: Merge-mode target directory
        skills: Skills filtered for this target (the set that should be linked)
        source: Canonical source directory
        include: Target include patterns
        exclude: Target exclude patterns
        fs: Filesystem gateway (real or dry-run)

    Returns:
        PruneResult listing removed entry names
    """
    result = PruneResult()
    if target_path.is_symlink() or not target_path.is_dir():
        return result

    abs_source = normalize_path(source)
    wanted = {skill.flat_name for skill in skills}

    for entry in sorted(target_path.iterdir()):
        name = entry.name
        if is_hidden(name) or name in wanted or not entry.is_symlink():
            continue

        try:
            dest = resolve_link_target(entry)
        except OSError as e:
            result.warnings.append(f"{name}: unable to resolve link target, kept ({e})")
            continue

        if not is_within(dest, abs_source):
            continue

        if should_sync_flat_name(name, include, exclude):
            reason = "orphan link" if dest.exists() else "broken link"
        else:
            reason = "excluded link"

        try:
            fs.remove_link(entry)
        except OSError as e:
            result.warnings.append(f"{name}: failed to remove: {e}")
            continue
        logger.debug("Pruned %s %s -> %s", reason, entry, dest)
        result.removed.append(name)

    return result


def prune_orphan_copies(
    target_path: Path,
    skills: list[DiscoveredSkill],
    fs: Filesystem,
) -> PruneResult:
    """Remove managed copies whose skill is no longer in the filtered set.

    Directories missing from the manifest are local and always kept. The
    manifest is rewritten only if something was removed.
    """
    result = PruneResult()
    if target_path.is_symlink() or not target_path.is_dir():
        return result

    manifest = read_manifest(target_path)
    wanted = {skill.flat_name for skill in skills}

    for name in sorted(manifest.managed):
        if name in wanted:
            continue
        entry = target_path / name
        try:
            if entry.is_symlink() or entry.is_file():
                fs.remove_link(entry)
            elif entry.is_dir():
                fs.remove_tree(entry)
        except OSError as e:
            result.warnings.append(f"{name}: failed to remove: {e}")
            continue
        logger.debug("Pruned orphan copy %s", entry)
        manifest = manifest.without_entry(name)
        result.removed.append(name)

    if result.removed:
        write_manifest(fs, target_path, manifest)
    return result
