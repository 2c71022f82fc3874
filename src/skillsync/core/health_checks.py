"""Health check implementations for skillsync doctor command.

This module provides diagnostic checks for the source directory, each
configured target, and the cross-target collision and drift reports.
All checks are read-only.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from skillsync.config.models import SkillsyncConfig, TargetConfig
from skillsync.config.targets import known_target_names, matches_target_name
from skillsync.core.context import SkillsyncContext
from skillsync.gateway.backup.real import list_backups
from skillsync.sync.diagnostics import (
    check_name_collisions_for_targets,
    check_sync_drift,
    detect_mode_drift,
    find_broken_symlinks,
    find_duplicate_skills,
    find_flat_name_collisions,
)
from skillsync.sync.discovery import discover_source_skills, is_tracked_repo_dir, list_source_entries
from skillsync.sync.engine import strategy_for
from skillsync.sync.exceptions import ConfigError, SourceNotFoundError
from skillsync.sync.links import paths_equal, resolve_link_target
from skillsync.sync.models import SKILL_FILE, DiscoveredSkill, TargetStatus


@dataclass
class CheckResult:
    """Result of a single health check.

    Attributes:
        name: Name of the check
        passed: Whether the check passed
        message: Human-readable message describing the result
        details: Optional additional details (one item per line)
        warning: Passed, but something deserves the user's attention
    """

    name: str
    passed: bool
    message: str
    details: str | None = None
    warning: bool = False


def check_config(ctx: SkillsyncContext) -> tuple[CheckResult, SkillsyncConfig | None]:
    """Load the active config, reporting any error as a failed check."""
    try:
        config = ctx.load_config()
    except ConfigError as e:
        return CheckResult(name="config", passed=False, message="Config could not be loaded", details=str(e)), None

    scope = "project" if config.is_project else "global"
    return (
        CheckResult(
            name="config",
            passed=True,
            message=f"Config ({scope}): {config.config_path} ({len(config.targets)} target(s))",
        ),
        config,
    )


def check_source(source: Path, skills: list[DiscoveredSkill] | None) -> CheckResult:
    """Check the source directory exists and count its skills."""
    if not source.exists():
        return CheckResult(name="source", passed=False, message=f"Source not found: {source}")
    if not source.is_dir():
        return CheckResult(name="source", passed=False, message=f"Source is not a directory: {source}")

    count = len(skills) if skills is not None else len(list_source_entries(source))
    return CheckResult(name="source", passed=True, message=f"Source: {source} ({count} skills)")


def check_link_support() -> CheckResult:
    """Check that directory symlinks can be created on this system."""
    with tempfile.TemporaryDirectory(prefix="skillsync-") as tmp:
        dest = Path(tmp) / "dest"
        dest.mkdir()
        link = Path(tmp) / "link"
        try:
            link.symlink_to(dest, target_is_directory=True)
        except OSError as e:
            return CheckResult(name="links", passed=False, message=f"Symlinks not supported: {e}")
    return CheckResult(name="links", passed=True, message="Symlink support: OK")


def check_skills_validity(source: Path, skills: list[DiscoveredSkill]) -> CheckResult:
    """Find top-level source directories that are neither skills nor groups."""
    grouped = {skill.rel_path.split("/", 1)[0] for skill in skills if "/" in skill.rel_path}

    invalid: list[str] = []
    for name in list_source_entries(source):
        if is_tracked_repo_dir(name) or name in grouped:
            continue
        if not (source / name / SKILL_FILE).is_file():
            invalid.append(name)

    if invalid:
        return CheckResult(
            name="skills",
            passed=True,
            warning=True,
            message=f"Directories without {SKILL_FILE}: {', '.join(invalid)}",
        )
    return CheckResult(name="skills", passed=True, message=f"All skills have {SKILL_FILE}")


def check_skill_targets_field(skills: list[DiscoveredSkill], config: SkillsyncConfig) -> CheckResult:
    """Check that `targets` in SKILL.md frontmatter name real targets."""
    known = [*known_target_names(), *config.targets]
    unknown: list[str] = []
    for skill in skills:
        for declared in skill.targets or ():
            if not any(matches_target_name(declared, name) for name in known):
                unknown.append(f"{skill.rel_path}: unknown target '{declared}'")

    if unknown:
        return CheckResult(
            name="skill targets",
            passed=True,
            warning=True,
            message=f"{len(unknown)} unknown target name(s) in SKILL.md",
            details="\n".join(unknown),
        )
    return CheckResult(name="skill targets", passed=True, message="Skill target lists are valid")


def _target_issues(target: TargetConfig, source: Path) -> list[str]:
    path = target.path
    if not path.exists() and not path.is_symlink():
        if not path.parent.exists():
            return ["parent directory not found"]
        return []

    issues: list[str] = []
    if path.is_symlink():
        dest = resolve_link_target(path)
        if not paths_equal(dest, source):
            issues.append(f"symlink points to wrong location: {dest}")
    elif path.is_dir() and not os.access(path, os.W_OK):
        issues.append("not writable")
    return issues


def _describe_status(target: TargetConfig, source: Path) -> str:
    mode_status = strategy_for(target.mode).classify(target.path, source)
    if mode_status.status == TargetStatus.MERGED and target.mode == "merge":
        return f"merged ({mode_status.synced} shared, {mode_status.local} local)"
    if mode_status.status == TargetStatus.COPIED:
        return f"copied ({mode_status.synced} managed, {mode_status.local} local)"
    return str(mode_status.status)


def check_target(target: TargetConfig, source: Path) -> CheckResult:
    """Check a single target's path, layout and mode consistency."""
    label = f"{target.name} [{target.mode}]"

    issues = _target_issues(target, source)
    if issues:
        return CheckResult(name=f"target {target.name}", passed=False, message=f"{label}: {', '.join(issues)}")

    if target.mode == "symlink" and (target.include or target.exclude):
        return CheckResult(
            name=f"target {target.name}",
            passed=True,
            warning=True,
            message=f"{label}: include/exclude ignored in symlink mode",
        )

    drift = detect_mode_drift(target, source)
    if drift is not None:
        return CheckResult(
            name=f"target {target.name}",
            passed=True,
            warning=True,
            message=f"{label}: {drift} (needs sync to apply {target.mode} mode)",
        )

    return CheckResult(
        name=f"target {target.name}",
        passed=True,
        message=f"{label}: {_describe_status(target, source)}",
    )


def check_drift(config: SkillsyncConfig, skills: list[DiscoveredSkill]) -> CheckResult:
    reports = check_sync_drift(list(config.targets.values()), skills, config.source)
    if not reports:
        return CheckResult(name="sync drift", passed=True, message="All targets in sync")

    details = [
        f"{r.target_name}: {r.missing} skill(s) not synced ({r.actual}/{r.expected} "
        f"{'copied' if r.mode == 'copy' else 'linked'})"
        for r in reports
    ]
    return CheckResult(
        name="sync drift",
        passed=True,
        warning=True,
        message=f"{len(reports)} target(s) out of sync, run 'skillsync sync'",
        details="\n".join(details),
    )


def check_broken_links(config: SkillsyncConfig) -> CheckResult:
    details: list[str] = []
    for target in config.targets.values():
        broken = find_broken_symlinks(target.path)
        if broken:
            details.append(f"{target.name}: {', '.join(broken)}")

    if details:
        return CheckResult(
            name="broken links",
            passed=False,
            message=f"Broken symlinks in {len(details)} target(s)",
            details="\n".join(details),
        )
    return CheckResult(name="broken links", passed=True, message="No broken symlinks")


def check_duplicates(config: SkillsyncConfig) -> CheckResult:
    duplicates = find_duplicate_skills(list(config.targets.values()), config.source)
    if not duplicates:
        return CheckResult(name="duplicates", passed=True, message="No duplicate skills")

    details = [f"{d.flat_name} ({', '.join(d.locations)})" for d in duplicates]
    details.append("Fix: delete the target copies, then run 'skillsync sync'")
    return CheckResult(
        name="duplicates",
        passed=True,
        warning=True,
        message=f"{len(duplicates)} skill(s) exist in source and as separate target copies",
        details="\n".join(details),
    )


def check_collisions(config: SkillsyncConfig, skills: list[DiscoveredSkill]) -> CheckResult:
    """Report flat-name collisions and duplicate SKILL.md names."""
    details: list[str] = []
    for collision in find_flat_name_collisions(skills):
        paths = ", ".join(str(p) for p in collision.source_paths)
        details.append(f"flat name '{collision.flat_name}': {paths}")

    global_collisions, per_target = check_name_collisions_for_targets(skills, list(config.targets.values()))
    for name_collision in global_collisions:
        details.append(f"name '{name_collision.name}': {', '.join(name_collision.paths)}")
    for target_collision in per_target:
        for name_collision in target_collision.collisions:
            details.append(
                f"{target_collision.target_name}: name '{name_collision.name}': {', '.join(name_collision.paths)}"
            )

    if details:
        return CheckResult(
            name="collisions",
            passed=True,
            warning=True,
            message="Skill name collisions found",
            details="\n".join(details),
        )
    return CheckResult(name="collisions", passed=True, message="No name collisions")


def check_backups(backup_root: Path) -> CheckResult:
    snapshots = list_backups(backup_root)
    if not snapshots:
        return CheckResult(name="backups", passed=True, message="Backups: none")
    latest = snapshots[0]
    return CheckResult(
        name="backups",
        passed=True,
        message=f"Backups: {len(snapshots)} snapshot(s), latest {latest.timestamp}",
        details=str(backup_root),
    )


def run_all_checks(ctx: SkillsyncContext) -> list[CheckResult]:
    """Run all health checks and return results.

    Args:
        ctx: Context holding the config location and backup root

    Returns:
        List of CheckResult objects, config check first
    """
    config_result, config = check_config(ctx)
    if config is None:
        return [config_result]

    try:
        skills: list[DiscoveredSkill] | None = discover_source_skills(config.source)
    except SourceNotFoundError:
        skills = None

    results = [
        config_result,
        check_source(config.source, skills),
        check_link_support(),
    ]
    if skills is not None:
        results.append(check_skills_validity(config.source, skills))
        results.append(check_skill_targets_field(skills, config))

    results.extend(check_target(target, config.source) for target in config.targets.values())

    if skills is not None:
        results.append(check_drift(config, skills))
    results.append(check_broken_links(config))
    results.append(check_duplicates(config))
    if skills is not None:
        results.append(check_collisions(config, skills))
    results.append(check_backups(ctx.backup_root))
    return results
