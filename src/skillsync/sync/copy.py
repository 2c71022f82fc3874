"""Copy mode: each skill is a physical copy tracked by the target manifest."""

import logging
from pathlib import Path

from skillsync.gateway.filesystem.abc import Filesystem
from skillsync.sync.checksum import compute_dir_hash
from skillsync.sync.exceptions import TargetConflictError
from skillsync.sync.links import is_within, normalize_path, resolve_link_target
from skillsync.sync.manifest import Manifest, empty_manifest, read_manifest, write_manifest
from skillsync.sync.models import CopyResult, DiscoveredSkill

logger = logging.getLogger(__name__)


def _prepare_copy_dir(target_path: Path, source: Path, fs: Filesystem, *, force: bool) -> bool:
    """Convert a symlink-mode target into a real directory.

    Returns:
        True if the directory starts out empty (created or converted)
    """
    if target_path.is_symlink():
        dest = resolve_link_target(target_path)
        owned = is_within(dest, normalize_path(source)) or not dest.exists()
        if not owned and not force:
            raise TargetConflictError(target_path, dest)
        logger.debug("Converting %s from symlink layout to copies", target_path)
        fs.remove_link(target_path)
        fs.make_dirs(target_path)
        return True

    fresh = not target_path.exists()
    fs.make_dirs(target_path)
    return fresh


def _copy_skill(
    skill: DiscoveredSkill,
    dst: Path,
    fingerprint: str,
    manifest: Manifest,
    abs_source: Path,
    fs: Filesystem,
    result: CopyResult,
    *,
    force: bool,
) -> Manifest:
    name = skill.flat_name

    if dst.is_symlink():
        dest = resolve_link_target(dst)
        if dst.exists() and not is_within(dest, abs_source) and not force:
            result.skipped.append(name)
            result.warnings.append(f"{name}: links to {dest}, use --force to replace")
            return manifest
        fs.remove_link(dst)
        fs.copy_tree(src=skill.source_path, dst=dst)
        result.updated.append(name)
        return manifest.with_entry(name, fingerprint)

    if dst.exists():
        stored = manifest.managed.get(name)
        if stored is None and not force:
            if dst.is_dir() and compute_dir_hash(dst) == fingerprint:
                # Identical to the source: copied by a run that never wrote its manifest
                logger.debug("Adopting unrecorded copy %s", dst)
                result.skipped.append(name)
                return manifest.with_entry(name, fingerprint)
            result.skipped.append(name)
            result.local.append(name)
            return manifest
        if stored == fingerprint and not force:
            result.skipped.append(name)
            return manifest
        if dst.is_dir():
            fs.remove_tree(dst)
        else:
            fs.remove_link(dst)
        fs.copy_tree(src=skill.source_path, dst=dst)
        result.updated.append(name)
        return manifest.with_entry(name, fingerprint)

    fs.copy_tree(src=skill.source_path, dst=dst)
    result.copied.append(name)
    return manifest.with_entry(name, fingerprint)


def _discard_partial_copy(dst: Path, fs: Filesystem, result: CopyResult) -> None:
    try:
        fs.remove_tree(dst)
    except OSError as e:
        result.warnings.append(f"{dst.name}: could not remove partial copy: {e}")


def sync_target_copy(
    target_path: Path,
    skills: list[DiscoveredSkill],
    source: Path,
    fs: Filesystem,
    *,
    force: bool,
) -> CopyResult:
    """Copy every skill into a copy-mode target.

    Managed copies whose source fingerprint is unchanged are skipped.
    Directories the manifest does not know about belong to the user and
    are only overwritten under force, unless their content is identical to
    the source, in which case they are recorded as managed again. A copy
    that fails halfway is removed so the next run copies it afresh.

    Args:
        target_path: Configured target directory
        skills: Skills already filtered for this target
        source: Canonical source directory
        fs: Filesystem gateway (real or dry-run)
        force: Overwrite local directories and unchanged copies

    Returns:
        CopyResult with per-skill outcomes

    Raises:
        TargetConflictError: Target path links elsewhere and force is not set
    """
    fresh = _prepare_copy_dir(target_path, source, fs, force=force)
    manifest = empty_manifest() if fresh else read_manifest(target_path)
    abs_source = normalize_path(source)

    result = CopyResult()
    for skill in skills:
        dst = target_path / skill.flat_name
        existed = dst.exists() or dst.is_symlink()
        try:
            fingerprint = compute_dir_hash(skill.source_path)
            if fresh:
                fs.copy_tree(src=skill.source_path, dst=dst)
                result.copied.append(skill.flat_name)
                manifest = manifest.with_entry(skill.flat_name, fingerprint)
                continue
            manifest = _copy_skill(skill, dst, fingerprint, manifest, abs_source, fs, result, force=force)
        except OSError as e:
            logger.debug("Failed to copy %s into %s: %s", skill.flat_name, target_path, e)
            result.skipped.append(skill.flat_name)
            result.warnings.append(f"{skill.flat_name}: {e}")
            if not existed and dst.exists():
                _discard_partial_copy(dst, fs, result)
            if not dst.exists():
                manifest = manifest.without_entry(skill.flat_name)

    write_manifest(fs, target_path, manifest)
    logger.debug(
        "Copy %s: %d copied, %d updated, %d skipped",
        target_path,
        len(result.copied),
        len(result.updated),
        len(result.skipped),
    )
    return result
