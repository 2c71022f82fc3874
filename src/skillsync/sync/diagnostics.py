"""Read-only collision and drift checks shared by `status`, `diff` and `doctor`.

None of these functions mutate the filesystem. They only report what a
sync would have to fix or what needs a human decision.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from skillsync.config.models import TargetConfig
from skillsync.core.frontmatter import read_skill_metadata
from skillsync.sync.checksum import compute_dir_hash
from skillsync.sync.discovery import discover_source_skills, list_source_entries
from skillsync.sync.exceptions import SourceNotFoundError
from skillsync.sync.filters import filter_skills, skills_for_target
from skillsync.sync.links import is_hidden, is_within, normalize_path, resolve_link_target
from skillsync.sync.manifest import get_manifest_path, read_manifest
from skillsync.sync.models import DiscoveredSkill, TargetStatus
from skillsync.sync.status import (
    check_status,
    check_status_copy,
    check_status_merge,
    count_source_links,
    source_link_names,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlatNameCollision:
    """Several source skills flatten to the same target entry name."""

    flat_name: str
    source_paths: tuple[Path, ...]


@dataclass(frozen=True)
class NameCollision:
    """Several skills declare the same `name` in their SKILL.md.

    Attributes:
        name: The shared frontmatter name
        paths: Source-relative paths of every skill using it
    """

    name: str
    paths: tuple[str, ...]


@dataclass(frozen=True)
class TargetCollision:
    """Name collisions that remain after a target's filters are applied."""

    target_name: str
    collisions: tuple[NameCollision, ...]


@dataclass(frozen=True)
class DriftReport:
    """A merge or copy target holding fewer skills than its filters select."""

    target_name: str
    mode: str
    expected: int
    actual: int

    @property
    def missing(self) -> int:
        return self.expected - self.actual


@dataclass(frozen=True)
class DuplicateSkill:
    """A skill present in the source and as a separate real copy elsewhere.

    Attributes:
        flat_name: Entry name shared by all locations
        locations: "source" followed by the names of the targets holding a copy
    """

    flat_name: str
    locations: tuple[str, ...]


def find_flat_name_collisions(skills: list[DiscoveredSkill]) -> list[FlatNameCollision]:
    """Group skills by flat name and report groups with distinct source paths."""
    groups: dict[str, list[Path]] = {}
    for skill in skills:
        paths = groups.setdefault(skill.flat_name, [])
        if skill.source_path not in paths:
            paths.append(skill.source_path)

    return [
        FlatNameCollision(flat_name=name, source_paths=tuple(paths))
        for name, paths in sorted(groups.items())
        if len(paths) > 1
    ]


def check_name_collisions(skills: list[DiscoveredSkill]) -> list[NameCollision]:
    """Find skills whose SKILL.md frontmatter declares the same name.

    Skills without a parseable name are ignored.
    """
    by_name: dict[str, list[str]] = {}
    for skill in skills:
        name = read_skill_metadata(skill.source_path).name
        if not name:
            continue
        by_name.setdefault(name, []).append(skill.rel_path)

    return [
        NameCollision(name=name, paths=tuple(paths))
        for name, paths in sorted(by_name.items())
        if len(paths) > 1
    ]


def check_name_collisions_for_targets(
    skills: list[DiscoveredSkill],
    targets: list[TargetConfig],
) -> tuple[list[NameCollision], list[TargetCollision]]:
    """Check name collisions globally and per filtered target.

    Symlink targets expose the whole source, and targets without
    include/exclude see the same set as the global check, so both are
    skipped in the per-target pass.

    Returns:
        Tuple of (global collisions, per-target collisions)
    """
    global_collisions = check_name_collisions(skills)

    per_target: list[TargetCollision] = []
    for target in targets:
        if target.mode == "symlink":
            continue
        if not target.include and not target.exclude:
            continue
        collisions = check_name_collisions(filter_skills(skills, target.include, target.exclude))
        if collisions:
            per_target.append(TargetCollision(target_name=target.name, collisions=tuple(collisions)))

    return global_collisions, per_target


def check_sync_drift(
    targets: list[TargetConfig],
    skills: list[DiscoveredSkill],
    source: Path,
) -> list[DriftReport]:
    """Report merge and copy targets that hold fewer skills than expected.

    Only links or manifest entries named after an expected skill count as
    synced, so stale links and orphaned copies cannot hide a missing skill.
    Targets that were never synced (not MERGED/COPIED) are reported by the
    status check instead and are skipped here.
    """
    reports: list[DriftReport] = []
    for target in targets:
        if target.mode == "symlink":
            continue
        expected = {
            skill.flat_name
            for skill in skills_for_target(
                skills, target_name=target.name, include=target.include, exclude=target.exclude
            )
        }
        if not expected:
            continue

        if target.mode == "copy":
            if check_status_copy(target.path).status != TargetStatus.COPIED:
                continue
            synced = set(read_manifest(target.path).managed)
        else:
            if check_status_merge(target.path, source).status != TargetStatus.MERGED:
                continue
            synced = set(source_link_names(target.path, source))

        actual = len(expected & synced)
        if actual < len(expected):
            reports.append(
                DriftReport(
                    target_name=target.name,
                    mode=target.mode,
                    expected=len(expected),
                    actual=actual,
                )
            )
    return reports


def detect_mode_drift(target: TargetConfig, source: Path) -> TargetStatus | None:
    """Return the on-disk layout of a target when it contradicts its mode.

    Returns:
        LINKED, MERGED or COPIED describing the layout actually found, or
        None if the target is consistent with its configured mode (or has
        not been synced yet)
    """
    path = target.path
    has_manifest = path.is_dir() and not path.is_symlink() and get_manifest_path(path).is_file()

    if target.mode == "symlink":
        status = check_status(path, source)
        if status == TargetStatus.MERGED:
            return TargetStatus.MERGED
        if status == TargetStatus.HAS_FILES and has_manifest:
            return TargetStatus.COPIED
        return None

    if target.mode == "merge":
        merge_status = check_status_merge(path, source)
        if merge_status.status == TargetStatus.LINKED:
            return TargetStatus.LINKED
        if has_manifest:
            return TargetStatus.COPIED
        return None

    copy_status = check_status_copy(path)
    if copy_status.status == TargetStatus.LINKED:
        return TargetStatus.LINKED
    if path.is_dir() and not path.is_symlink() and count_source_links(path, source) > 0:
        return TargetStatus.MERGED
    return None


def find_broken_symlinks(directory: Path) -> list[str]:
    """List names of entries in directory that are symlinks to missing paths."""
    if directory.is_symlink() or not directory.is_dir():
        return []
    return sorted(entry.name for entry in directory.iterdir() if entry.is_symlink() and not entry.exists())


def _source_skill_names(source: Path) -> list[str]:
    try:
        return [skill.flat_name for skill in discover_source_skills(source)]
    except SourceNotFoundError:
        logger.debug("Discovery failed for %s, using top-level listing", source)
        if not source.is_dir():
            return []
        return list_source_entries(source)


def find_duplicate_skills(targets: list[TargetConfig], source: Path) -> list[DuplicateSkill]:
    """Find skills that exist both in source and as real directories in a target.

    Merge-mode targets are skipped because local skills there are
    intentional. In copy mode, entries recorded in the manifest are the
    expected mirrors and do not count.
    """
    locations: dict[str, list[str]] = {name: ["source"] for name in _source_skill_names(source)}

    for target in targets:
        if target.mode == "merge":
            continue
        path = target.path
        if path.is_symlink() or not path.is_dir():
            continue
        managed = read_manifest(path).managed if target.mode == "copy" else {}
        for entry in sorted(path.iterdir()):
            if is_hidden(entry.name) or entry.is_symlink() or not entry.is_dir():
                continue
            if entry.name in managed:
                continue
            if entry.name in locations:
                locations[entry.name].append(target.name)

    return [
        DuplicateSkill(flat_name=name, locations=tuple(where))
        for name, where in sorted(locations.items())
        if len(where) > 1
    ]


DiffKind = Literal["missing", "local_copy", "stale_link", "outdated", "orphan", "local_only"]


@dataclass(frozen=True)
class DiffItem:
    """One entry a sync would add, replace or prune, or that only the target has.

    Attributes:
        flat_name: Entry name in the target
        kind: missing (would be added), local_copy (needs --force),
            stale_link (link not pointing at the skill), outdated (source
            changed since copied), orphan (would be pruned), local_only
            (user directory, left alone)
    """

    flat_name: str
    kind: DiffKind


def _target_entries(path: Path) -> dict[str, Path]:
    if path.is_symlink() or not path.is_dir():
        return {}
    return {entry.name: entry for entry in path.iterdir() if not is_hidden(entry.name)}


def _is_real_dir(entry: Path) -> bool:
    return entry.is_dir() and not entry.is_symlink()


def _diff_merge(entries: dict[str, Path], expected: dict[str, DiscoveredSkill], source: Path) -> list[DiffItem]:
    abs_source = normalize_path(source)
    items: list[DiffItem] = []
    for name, skill in sorted(expected.items()):
        entry = entries.get(name)
        if entry is None:
            items.append(DiffItem(flat_name=name, kind="missing"))
        elif not entry.is_symlink():
            items.append(DiffItem(flat_name=name, kind="local_copy"))
        elif resolve_link_target(entry) != normalize_path(skill.source_path):
            items.append(DiffItem(flat_name=name, kind="stale_link"))

    for name, entry in sorted(entries.items()):
        if name in expected:
            continue
        if entry.is_symlink():
            if is_within(resolve_link_target(entry), abs_source):
                items.append(DiffItem(flat_name=name, kind="orphan"))
        elif entry.is_dir():
            items.append(DiffItem(flat_name=name, kind="local_only"))
    return items


def _diff_copy(
    entries: dict[str, Path], expected: dict[str, DiscoveredSkill], managed: dict[str, str]
) -> list[DiffItem]:
    items: list[DiffItem] = []
    for name, skill in sorted(expected.items()):
        entry = entries.get(name)
        if entry is None:
            items.append(DiffItem(flat_name=name, kind="missing"))
            continue
        fingerprint = compute_dir_hash(skill.source_path)
        if entry.is_symlink():
            items.append(DiffItem(flat_name=name, kind="stale_link"))
        elif name not in managed:
            # An identical unrecorded copy is adopted by the next sync
            if not (_is_real_dir(entry) and compute_dir_hash(entry) == fingerprint):
                items.append(DiffItem(flat_name=name, kind="local_copy"))
        elif managed[name] != fingerprint:
            items.append(DiffItem(flat_name=name, kind="outdated"))

    for name in sorted(managed):
        if name not in expected:
            items.append(DiffItem(flat_name=name, kind="orphan"))

    for name, entry in sorted(entries.items()):
        if name in expected or name in managed:
            continue
        if _is_real_dir(entry):
            items.append(DiffItem(flat_name=name, kind="local_only"))
    return items


def diff_target(target: TargetConfig, skills: list[DiscoveredSkill], source: Path) -> list[DiffItem]:
    """Per-skill differences between a merge or copy target and its filtered skills.

    Read-only; reports what `sync` would add, replace or prune, plus the
    user's own directories it would leave alone. Symlink-mode targets have
    no per-skill layout and always return an empty list.

    Args:
        target: Target to inspect
        skills: All discovered skills (filtered here for the target)
        source: Canonical source directory
    """
    if target.mode == "symlink":
        return []

    selected = skills_for_target(skills, target_name=target.name, include=target.include, exclude=target.exclude)
    expected = {skill.flat_name: skill for skill in selected}
    entries = _target_entries(target.path)

    if target.mode == "copy":
        managed = read_manifest(target.path).managed if _is_real_dir(target.path) else {}
        return _diff_copy(entries, expected, managed)
    return _diff_merge(entries, expected, source)
