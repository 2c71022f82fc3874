"""Reconciliation engine driving every target through one strategy interface.

Each sync mode is a ReconcileStrategy with the same three steps:

- classify: read-only status of the target
- reconcile: bring the target in line with the filtered skill set
- prune: remove artifacts whose skill is gone or filtered out

`status` and `sync` both go through `strategy_for()`, so classification
is never re-derived separately per command.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from skillsync.config.loader import select_targets
from skillsync.config.models import SkillsyncConfig, TargetConfig
from skillsync.gateway.backup.abc import TargetBackup
from skillsync.gateway.filesystem.abc import Filesystem
from skillsync.sync.copy import sync_target_copy
from skillsync.sync.diagnostics import FlatNameCollision, find_flat_name_collisions
from skillsync.sync.discovery import discover_source_skills
from skillsync.sync.exceptions import SyncError
from skillsync.sync.filters import filter_skills, skills_for_target
from skillsync.sync.merge import sync_target_merge
from skillsync.sync.models import (
    CopyResult,
    DiscoveredSkill,
    MergeResult,
    PruneResult,
    SymlinkResult,
    SyncMode,
    TargetStatus,
)
from skillsync.sync.prune import prune_orphan_copies, prune_orphan_links
from skillsync.sync.status import ModeStatus, check_status, check_status_copy, check_status_merge
from skillsync.sync.symlink import sync_target_symlink

logger = logging.getLogger(__name__)

ReconcileResult = SymlinkResult | MergeResult | CopyResult


class ReconcileStrategy(ABC):
    """One sync mode: how a target is classified, reconciled and pruned."""

    mode: SyncMode

    @abstractmethod
    def classify(self, target_path: Path, source: Path) -> ModeStatus:
        """Read-only status of a target for this mode."""
        ...

    @abstractmethod
    def select_skills(self, skills: list[DiscoveredSkill], target: TargetConfig) -> list[DiscoveredSkill]:
        """Skills this target should end up with."""
        ...

    @abstractmethod
    def reconcile(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
        *,
        force: bool,
    ) -> ReconcileResult:
        """Bring the target in line with the selected skills."""
        ...

    @abstractmethod
    def prune(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
    ) -> PruneResult | None:
        """Remove orphaned artifacts; None when the mode has nothing to prune."""
        ...


class SymlinkStrategy(ReconcileStrategy):
    """The whole target is one link to the source; filters do not apply."""

    mode: SyncMode = "symlink"

    def classify(self, target_path: Path, source: Path) -> ModeStatus:
        return ModeStatus(status=check_status(target_path, source), synced=0, local=0)

    def select_skills(self, skills: list[DiscoveredSkill], target: TargetConfig) -> list[DiscoveredSkill]:
        return skills

    def reconcile(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
        *,
        force: bool,
    ) -> ReconcileResult:
        return sync_target_symlink(target.path, source, fs, force=force)

    def prune(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
    ) -> PruneResult | None:
        return None


class MergeStrategy(ReconcileStrategy):
    mode: SyncMode = "merge"

    def classify(self, target_path: Path, source: Path) -> ModeStatus:
        return check_status_merge(target_path, source)

    def select_skills(self, skills: list[DiscoveredSkill], target: TargetConfig) -> list[DiscoveredSkill]:
        return skills_for_target(skills, target_name=target.name, include=target.include, exclude=target.exclude)

    def reconcile(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
        *,
        force: bool,
    ) -> ReconcileResult:
        return sync_target_merge(target.path, skills, source, fs, force=force)

    def prune(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
    ) -> PruneResult | None:
        return prune_orphan_links(target.path, skills, source, target.include, target.exclude, fs)


class CopyStrategy(ReconcileStrategy):
    mode: SyncMode = "copy"

    def classify(self, target_path: Path, source: Path) -> ModeStatus:
        return check_status_copy(target_path)

    def select_skills(self, skills: list[DiscoveredSkill], target: TargetConfig) -> list[DiscoveredSkill]:
        return skills_for_target(skills, target_name=target.name, include=target.include, exclude=target.exclude)

    def reconcile(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
        *,
        force: bool,
    ) -> ReconcileResult:
        return sync_target_copy(target.path, skills, source, fs, force=force)

    def prune(
        self,
        target: TargetConfig,
        skills: list[DiscoveredSkill],
        source: Path,
        fs: Filesystem,
    ) -> PruneResult | None:
        return prune_orphan_copies(target.path, skills, fs)


_STRATEGIES: dict[SyncMode, ReconcileStrategy] = {
    "symlink": SymlinkStrategy(),
    "merge": MergeStrategy(),
    "copy": CopyStrategy(),
}


def strategy_for(mode: SyncMode) -> ReconcileStrategy:
    """Return the strategy implementing a sync mode."""
    return _STRATEGIES[mode]


@dataclass(frozen=True)
class TargetSyncResult:
    """Outcome of syncing one target.

    Attributes:
        name: Target name
        mode: Sync mode used
        status: Classification before reconciling
        result: Mode-specific reconcile result, None if the target failed
        prune: Orphan pruning result, None for symlink mode or on failure
        backup_path: Snapshot taken before mutation, if any
        error: Error message if the target could not be synced
    """

    name: str
    mode: SyncMode
    status: TargetStatus
    result: ReconcileResult | None
    prune: PruneResult | None
    backup_path: Path | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SyncSummary:
    """Outcome of a sync run across targets."""

    skills: tuple[DiscoveredSkill, ...]
    collisions: tuple[FlatNameCollision, ...]
    targets: tuple[TargetSyncResult, ...]

    @property
    def failed(self) -> tuple[TargetSyncResult, ...]:
        return tuple(t for t in self.targets if not t.ok)


def _needs_backup(target_path: Path) -> bool:
    if target_path.is_symlink() or not target_path.is_dir():
        return False
    return any(target_path.iterdir())


def sync_target(
    target: TargetConfig,
    skills: list[DiscoveredSkill],
    source: Path,
    *,
    fs: Filesystem,
    force: bool,
    backup: TargetBackup | None,
) -> TargetSyncResult:
    """Classify, back up, reconcile and prune a single target.

    Sync and filesystem errors are captured in the result so one broken
    target does not stop the others. A target that cannot be classified
    is reported as UNKNOWN.

    Args:
        target: Resolved target configuration
        skills: All discovered skills (filtered here per target)
        source: Canonical source directory
        fs: Filesystem gateway; a dry-run gateway skips the backup
        force: Passed through to the reconciler
        backup: Backup gateway, or None to skip snapshots
    """
    strategy = strategy_for(target.mode)
    status = TargetStatus.UNKNOWN
    backup_path: Path | None = None
    try:
        status = strategy.classify(target.path, source).status
        logger.debug("Target %s [%s] is %s", target.name, target.mode, status)

        if backup is not None and not fs.is_dry_run and _needs_backup(target.path):
            backup_path = backup.create(target.name, target.path)

        selected = strategy.select_skills(skills, target)
        result = strategy.reconcile(target, selected, source, fs, force=force)
        prune = strategy.prune(target, selected, source, fs)
    except (SyncError, OSError) as e:
        logger.debug("Target %s failed: %s", target.name, e)
        return TargetSyncResult(
            name=target.name,
            mode=target.mode,
            status=status,
            result=None,
            prune=None,
            backup_path=backup_path,
            error=str(e),
        )

    return TargetSyncResult(
        name=target.name,
        mode=target.mode,
        status=status,
        result=result,
        prune=prune,
        backup_path=backup_path,
        error=None,
    )


def validate_targets(targets: list[TargetConfig]) -> None:
    """Compile every target's filters before anything is mutated.

    Raises:
        FilterPatternError: If any include/exclude pattern is invalid
    """
    for target in targets:
        filter_skills([], target.include, target.exclude)


def dedupe_flat_names(skills: list[DiscoveredSkill]) -> list[DiscoveredSkill]:
    """Keep the first skill for each flat name, in discovery order."""
    seen: set[str] = set()
    unique: list[DiscoveredSkill] = []
    for skill in skills:
        if skill.flat_name in seen:
            continue
        seen.add(skill.flat_name)
        unique.append(skill)
    return unique


def sync_all(
    config: SkillsyncConfig,
    *,
    fs: Filesystem,
    force: bool,
    backup: TargetBackup | None,
    names: list[str],
) -> SyncSummary:
    """Sync the named targets (all targets when names is empty).

    Configuration problems are raised before any target is touched.
    Colliding flat names are reported and only the first skill with each
    name is synced.

    Raises:
        UnknownTargetError: If a requested target is not configured
        FilterPatternError: If a target has an invalid pattern
        SourceNotFoundError: If the source directory is missing
    """
    targets = select_targets(config, names)
    validate_targets(targets)

    discovered = discover_source_skills(config.source)
    collisions = find_flat_name_collisions(discovered)
    for collision in collisions:
        logger.warning(
            "Flat name collision for %s: %s",
            collision.flat_name,
            ", ".join(str(p) for p in collision.source_paths),
        )
    skills = dedupe_flat_names(discovered)

    results = [
        sync_target(target, skills, config.source, fs=fs, force=force, backup=backup) for target in targets
    ]
    return SyncSummary(skills=tuple(skills), collisions=tuple(collisions), targets=tuple(results))
