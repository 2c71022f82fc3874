"""Tests for symlink-mode reconciliation."""

from pathlib import Path

import pytest

from skillsync.gateway.filesystem.dry_run import DryRunFilesystem
from skillsync.gateway.filesystem.real import RealFilesystem
from skillsync.sync.copy import sync_target_copy
from skillsync.sync.discovery import discover_source_skills
from skillsync.sync.exceptions import MigrationConflictError, SyncError, TargetConflictError
from skillsync.sync.links import resolve_link_target
from skillsync.sync.manifest import MANIFEST_FILE
from skillsync.sync.models import TargetStatus
from skillsync.sync.symlink import migrate_to_source, sync_target_symlink
from tests.test_utils.skills import make_skill


def _points_at(link: Path, dest: Path) -> bool:
    return link.is_symlink() and resolve_link_target(link) == dest.resolve()


def test_creates_missing_link(source: Path, targets_root: Path) -> None:
    target = targets_root / "nested" / "claude"

    result = sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert result.action == "created"
    assert result.status == TargetStatus.NOT_EXIST
    assert _points_at(target, source)


def test_already_linked_is_noop(source: Path, targets_root: Path) -> None:
    target = targets_root / "claude"
    target.symlink_to(source, target_is_directory=True)

    result = sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert result.action == "none"
    assert result.message == "already linked"


def test_fixes_broken_link(source: Path, targets_root: Path, tmp_path: Path) -> None:
    target = targets_root / "claude"
    target.symlink_to(tmp_path / "gone", target_is_directory=True)

    result = sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert result.action == "fixed"
    assert _points_at(target, source)


def test_conflict_without_force_raises(source: Path, targets_root: Path, tmp_path: Path) -> None:
    other = tmp_path / "other"
    other.mkdir()
    target = targets_root / "claude"
    target.symlink_to(other, target_is_directory=True)

    with pytest.raises(TargetConflictError) as exc_info:
        sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert exc_info.value.link_dest == other.resolve()
    assert "--force" in str(exc_info.value)
    assert _points_at(target, other)


def test_conflict_with_force_relinks(source: Path, targets_root: Path, tmp_path: Path) -> None:
    other = tmp_path / "other"
    other.mkdir()
    target = targets_root / "claude"
    target.symlink_to(other, target_is_directory=True)

    result = sync_target_symlink(target, source, RealFilesystem(), force=True)

    assert result.action == "relinked"
    assert _points_at(target, source)
    assert other.is_dir()


def test_migrates_local_files_into_source(source: Path, targets_root: Path) -> None:
    target = targets_root / "claude"
    make_skill(target, "mine", body="My own skill.\n")
    (target / "notes.txt").write_text("keep me", encoding="utf-8")

    result = sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert result.action == "migrated"
    assert _points_at(target, source)
    assert "My own skill." in (source / "mine" / "SKILL.md").read_text(encoding="utf-8")
    assert (source / "notes.txt").read_text(encoding="utf-8") == "keep me"


def test_migration_conflict_leaves_target_untouched(source: Path, targets_root: Path) -> None:
    make_skill(source, "writing", body="source version\n")
    target = targets_root / "claude"
    make_skill(target, "writing", body="target version\n")

    with pytest.raises(MigrationConflictError) as exc_info:
        sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert exc_info.value.names == ["writing"]
    assert not target.is_symlink()
    assert "target version" in (target / "writing" / "SKILL.md").read_text(encoding="utf-8")
    assert "source version" in (source / "writing" / "SKILL.md").read_text(encoding="utf-8")


def test_converts_merge_layout(source: Path, targets_root: Path) -> None:
    """Per-skill links are dropped and only local entries are migrated."""
    skill = make_skill(source, "writing")
    target = targets_root / "claude"
    target.mkdir()
    (target / "writing").symlink_to(skill, target_is_directory=True)
    make_skill(target, "mine")
    (target / MANIFEST_FILE).write_text("", encoding="utf-8")

    result = sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert result.status == TargetStatus.MERGED
    assert result.action == "migrated"
    assert "1 local migrated" in result.message
    assert _points_at(target, source)
    assert (source / "mine" / "SKILL.md").is_file()
    assert not (source / MANIFEST_FILE).exists()


def test_migrate_to_source_returns_names(source: Path, targets_root: Path) -> None:
    target = targets_root / "claude"
    make_skill(target, "a")
    make_skill(target, "b")

    assert migrate_to_source(target, source, RealFilesystem()) == ["a", "b"]
    assert (target / "a").is_dir()


def test_regular_file_target_raises(source: Path, targets_root: Path) -> None:
    target = targets_root / "claude"
    target.write_text("", encoding="utf-8")

    with pytest.raises(SyncError):
        sync_target_symlink(target, source, RealFilesystem(), force=False)


def test_dry_run_changes_nothing(source: Path, targets_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = targets_root / "claude"
    make_skill(target, "mine")

    result = sync_target_symlink(target, source, DryRunFilesystem(RealFilesystem()), force=False)

    assert result.action == "migrated"
    assert not target.is_symlink()
    assert (target / "mine" / "SKILL.md").is_file()
    assert not (source / "mine").exists()
    assert "[DRY RUN] Would create symlink" in capsys.readouterr().err


def test_idempotent(source: Path, targets_root: Path) -> None:
    target = targets_root / "claude"
    fs = RealFilesystem()

    sync_target_symlink(target, source, fs, force=False)
    second = sync_target_symlink(target, source, fs, force=False)

    assert second.action == "none"


def test_converts_copy_layout(source: Path, targets_root: Path) -> None:
    """Managed copies are dropped; only the user's own entries are migrated."""
    make_skill(source, "writing", body="source version\n")
    target = targets_root / "codex"
    sync_target_copy(target, discover_source_skills(source), source, RealFilesystem(), force=False)
    make_skill(target, "mine")

    result = sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert result.status == TargetStatus.HAS_FILES
    assert result.action == "migrated"
    assert result.message == "converted from copy layout and linked (1 local migrated)"
    assert _points_at(target, source)
    assert "source version" in (source / "writing" / "SKILL.md").read_text(encoding="utf-8")
    assert (source / "mine" / "SKILL.md").is_file()
    assert not (source / MANIFEST_FILE).exists()


def test_edited_copy_blocks_conversion(source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    target = targets_root / "codex"
    sync_target_copy(target, discover_source_skills(source), source, RealFilesystem(), force=False)
    (target / "writing" / "notes.md").write_text("edited in place", encoding="utf-8")

    with pytest.raises(MigrationConflictError) as exc_info:
        sync_target_symlink(target, source, RealFilesystem(), force=False)

    assert exc_info.value.names == ["writing"]
    assert (target / "writing" / "notes.md").is_file()
