"""Merge mode: one symlink per skill inside a real target directory.

Entries the user created in the target directory are left in place, so a
merge-mode target can hold a mix of synced links and local skills.
"""

import logging
from pathlib import Path

from skillsync.gateway.filesystem.abc import Filesystem
from skillsync.sync.exceptions import TargetConflictError
from skillsync.sync.links import is_within, normalize_path, paths_equal, resolve_link_target
from skillsync.sync.manifest import remove_manifest
from skillsync.sync.models import DiscoveredSkill, MergeResult

logger = logging.getLogger(__name__)


def _prepare_target_dir(target_path: Path, source: Path, fs: Filesystem, *, force: bool) -> bool:
    """Make sure target_path is a real directory we can put links into.

    A target that is still a whole-directory link into the source (left over
    from symlink mode) or a broken link is removed. A link to some other
    location is only replaced when forced.

    Returns:
        True if the directory starts out empty (created or converted)
    """
    fresh = not target_path.exists() or target_path.is_symlink()
    if target_path.is_symlink():
        dest = resolve_link_target(target_path)
        if is_within(dest, normalize_path(source)) or not dest.exists():
            logger.debug("Converting %s from symlink layout", target_path)
            fs.remove_link(target_path)
        elif force:
            logger.debug("Replacing foreign link %s -> %s (forced)", target_path, dest)
            fs.remove_link(target_path)
        else:
            raise TargetConflictError(target_path, dest)

    fs.make_dirs(target_path)
    if not fresh and remove_manifest(fs, target_path):
        logger.debug("Removed stale copy manifest from %s", target_path)
    return fresh


def _reconcile_skill(
    skill: DiscoveredSkill,
    target_path: Path,
    fs: Filesystem,
    result: MergeResult,
    *,
    force: bool,
) -> None:
    link_path = target_path / skill.flat_name
    name = skill.flat_name

    if link_path.is_symlink():
        if paths_equal(resolve_link_target(link_path), skill.source_path):
            result.skipped.append(name)
            return
        if not link_path.exists():
            fs.remove_link(link_path)
            fs.create_symlink(link_path=link_path, dest=skill.source_path)
            result.updated.append(name)
            return
        if force:
            fs.remove_link(link_path)
            fs.create_symlink(link_path=link_path, dest=skill.source_path)
            result.updated.append(name)
            return
        dest = resolve_link_target(link_path)
        result.skipped.append(name)
        result.warnings.append(f"{name}: links to {dest}, use --force to replace")
        return

    if link_path.exists():
        if force:
            if link_path.is_dir():
                fs.remove_tree(link_path)
            else:
                fs.remove_link(link_path)
            fs.create_symlink(link_path=link_path, dest=skill.source_path)
            result.updated.append(name)
            return
        result.skipped.append(name)
        result.local.append(name)
        return

    fs.create_symlink(link_path=link_path, dest=skill.source_path)
    result.linked.append(name)


def sync_target_merge(
    target_path: Path,
    skills: list[DiscoveredSkill],
    source: Path,
    fs: Filesystem,
    *,
    force: bool,
) -> MergeResult:
    """Link every skill into a merge-mode target.

    Args:
        target_path: Configured target directory
        skills: Skills already filtered for this target
        source: Canonical source directory
        fs: Filesystem gateway (real or dry-run)
        force: Replace local directories and links pointing elsewhere

    Returns:
        MergeResult with per-skill outcomes. Errors on a single skill are
        recorded as warnings and the skill is counted as skipped.

    Raises:
        TargetConflictError: Target path links elsewhere and force is not set
    """
    fresh = _prepare_target_dir(target_path, source, fs, force=force)

    result = MergeResult()
    for skill in skills:
        try:
            if fresh:
                fs.create_symlink(link_path=target_path / skill.flat_name, dest=skill.source_path)
                result.linked.append(skill.flat_name)
                continue
            _reconcile_skill(skill, target_path, fs, result, force=force)
        except OSError as e:
            logger.debug("Failed to link %s into %s: %s", skill.flat_name, target_path, e)
            result.skipped.append(skill.flat_name)
            result.warnings.append(f"{skill.flat_name}: {e}")
    logger.debug(
        "Merge %s: %d linked, %d updated, %d skipped",
        target_path,
        len(result.linked),
        len(result.updated),
        len(result.skipped),
    )
    return result
