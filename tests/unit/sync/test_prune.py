"""Tests for orphan pruning."""

from pathlib import Path

from skillsync.gateway.filesystem.real import RealFilesystem
from skillsync.sync.copy import sync_target_copy
from skillsync.sync.discovery import discover_source_skills
from skillsync.sync.filters import filter_skills
from skillsync.sync.manifest import read_manifest
from skillsync.sync.merge import sync_target_merge
from skillsync.sync.prune import prune_orphan_copies, prune_orphan_links
from tests.fakes.filesystem import FailingFilesystem
from tests.test_utils.skills import make_skill


def test_prunes_excluded_links(source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    make_skill(source, "_team/ui")
    target = targets_root / "claude"
    fs = RealFilesystem()
    sync_target_merge(target, discover_source_skills(source), source, fs, force=False)

    wanted = filter_skills(discover_source_skills(source), (), ("_team__*",))
    result = prune_orphan_links(target, wanted, source, (), ("_team__*",), fs)

    assert result.removed == ["_team__ui"]
    assert (target / "writing").is_symlink()


def test_keeps_foreign_links_files_and_dirs(source: Path, targets_root: Path, tmp_path: Path) -> None:
    foreign = make_skill(tmp_path / "elsewhere", "other")
    target = targets_root / "claude"
    target.mkdir()
    (target / "other").symlink_to(foreign, target_is_directory=True)
    (target / "dangling").symlink_to(tmp_path / "gone", target_is_directory=True)
    make_skill(target, "mine")
    (target / "notes.txt").write_text("", encoding="utf-8")

    result = prune_orphan_links(target, [], source, (), (), RealFilesystem())

    assert result.removed == []
    assert (target / "other").is_symlink()
    assert (target / "dangling").is_symlink()
    assert (target / "mine" / "SKILL.md").is_file()
    assert (target / "notes.txt").is_file()


def test_prune_links_on_missing_or_linked_target(source: Path, targets_root: Path) -> None:
    assert prune_orphan_links(targets_root / "missing", [], source, (), (), RealFilesystem()).removed == []

    linked = targets_root / "linked"
    linked.symlink_to(source, target_is_directory=True)
    assert prune_orphan_links(linked, [], source, (), (), RealFilesystem()).removed == []


def test_prune_link_failure_is_a_warning(source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    target = targets_root / "claude"
    sync_target_merge(target, discover_source_skills(source), source, RealFilesystem(), force=False)

    result = prune_orphan_links(target, [], source, (), (), FailingFilesystem({"writing"}))

    assert result.removed == []
    assert "failed to remove" in result.warnings[0]
    assert (target / "writing").is_symlink()


def test_prunes_managed_copies(source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    make_skill(source, "coding")
    target = targets_root / "codex"
    fs = RealFilesystem()
    sync_target_copy(target, discover_source_skills(source), source, fs, force=False)
    make_skill(target, "mine")

    remaining = [s for s in discover_source_skills(source) if s.flat_name == "writing"]
    result = prune_orphan_copies(target, remaining, fs)

    assert result.removed == ["coding"]
    assert not (target / "coding").exists()
    assert (target / "mine" / "SKILL.md").is_file()
    assert set(read_manifest(target).managed) == {"writing"}


def test_prune_copies_without_orphans_keeps_manifest(source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    target = targets_root / "codex"
    fs = RealFilesystem()
    skills = discover_source_skills(source)
    sync_target_copy(target, skills, source, fs, force=False)
    before = read_manifest(target).updated_at

    result = prune_orphan_copies(target, skills, fs)

    assert result.removed == []
    assert read_manifest(target).updated_at == before


def test_prune_copies_drops_entry_for_vanished_copy(source: Path, targets_root: Path) -> None:
    """A manifest entry whose directory was deleted by hand is still cleaned up."""
    make_skill(source, "writing")
    target = targets_root / "codex"
    fs = RealFilesystem()
    sync_target_copy(target, discover_source_skills(source), source, fs, force=False)
    fs.remove_tree(target / "writing")

    result = prune_orphan_copies(target, [], fs)

    assert result.removed == ["writing"]
    assert read_manifest(target).managed == {}
