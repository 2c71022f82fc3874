"""Tests for source skill discovery."""

import json
from pathlib import Path

import pytest

from skillsync.sync.discovery import (
    discover_source_skills,
    is_tracked_repo_dir,
    list_source_entries,
    path_to_flat_name,
    read_install_meta,
)
from skillsync.sync.exceptions import SourceNotFoundError
from tests.test_utils.skills import make_skill


def test_path_to_flat_name() -> None:
    assert path_to_flat_name("writing") == "writing"
    assert path_to_flat_name("personal/writing/email") == "personal__writing__email"
    assert path_to_flat_name("/_team/ui/") == "_team__ui"
    assert path_to_flat_name("a\\b") == "a__b"


def test_is_tracked_repo_dir() -> None:
    assert is_tracked_repo_dir("_team")
    assert not is_tracked_repo_dir("_")
    assert not is_tracked_repo_dir("team")


def test_discover_flat_and_nested_skills(source: Path) -> None:
    """Skills are found at any depth; grouping dirs need no SKILL.md."""
    make_skill(source, "writing")
    make_skill(source, "personal/email")
    make_skill(source, "_team/frontend/ui")

    skills = discover_source_skills(source)

    assert [s.rel_path for s in skills] == ["_team/frontend/ui", "personal/email", "writing"]
    assert [s.flat_name for s in skills] == ["_team__frontend__ui", "personal__email", "writing"]
    assert [s.is_in_repo for s in skills] == [True, False, False]
    assert skills[0].source_path == (source / "_team" / "frontend" / "ui").resolve()


def test_discover_nested_skill_inside_skill(source: Path) -> None:
    """A skill directory may itself contain further skills."""
    make_skill(source, "tools")
    make_skill(source, "tools/git")

    skills = discover_source_skills(source)

    assert [s.flat_name for s in skills] == ["tools", "tools__git"]


def test_discover_skips_hidden_and_symlinked_dirs(source: Path, tmp_path: Path) -> None:
    make_skill(source, "writing")
    make_skill(source, ".git/hooks")
    elsewhere = make_skill(tmp_path / "elsewhere", "linked")
    (source / "linked").symlink_to(elsewhere, target_is_directory=True)

    skills = discover_source_skills(source)

    assert [s.flat_name for s in skills] == ["writing"]


def test_discover_ignores_dirs_without_skill_file(source: Path) -> None:
    (source / "notes").mkdir()
    (source / "notes" / "README.md").write_text("not a skill", encoding="utf-8")

    assert discover_source_skills(source) == []


def test_discover_reads_frontmatter_targets(source: Path) -> None:
    make_skill(source, "writing", targets=["claude"])
    make_skill(source, "coding")

    skills = {s.flat_name: s for s in discover_source_skills(source)}

    assert skills["writing"].targets == ("claude",)
    assert skills["coding"].targets is None


def test_discover_missing_source(tmp_path: Path) -> None:
    with pytest.raises(SourceNotFoundError) as exc_info:
        discover_source_skills(tmp_path / "missing")

    assert "does not exist" in str(exc_info.value)


def test_discover_source_is_file(tmp_path: Path) -> None:
    path = tmp_path / "source"
    path.write_text("", encoding="utf-8")

    with pytest.raises(SourceNotFoundError):
        discover_source_skills(path)


def test_discover_through_symlinked_source(source: Path, tmp_path: Path) -> None:
    """A source reached via a symlink yields canonical skill paths."""
    make_skill(source, "writing")
    alias = tmp_path / "alias"
    alias.symlink_to(source, target_is_directory=True)

    skills = discover_source_skills(alias)

    assert skills[0].source_path == (source / "writing").resolve()


def test_list_source_entries(source: Path) -> None:
    make_skill(source, "writing")
    (source / "drafts").mkdir()
    (source / ".cache").mkdir()
    (source / "notes.txt").write_text("", encoding="utf-8")

    assert list_source_entries(source) == ["drafts", "writing"]


def test_list_source_entries_missing(tmp_path: Path) -> None:
    assert list_source_entries(tmp_path / "missing") == []


def test_read_install_meta(source: Path) -> None:
    skill = make_skill(source, "writing")
    (skill / ".skillsync-meta.json").write_text(
        json.dumps({"source": "github.com/acme/skills", "version": 3, "installed_at": "2026-01-02"}),
        encoding="utf-8",
    )

    meta = read_install_meta(skill)

    assert meta is not None
    assert meta.source == "github.com/acme/skills"
    assert meta.version == "3"
    assert meta.installed_at == "2026-01-02"


def test_read_install_meta_missing_or_malformed(source: Path) -> None:
    skill = make_skill(source, "writing")
    assert read_install_meta(skill) is None

    (skill / ".skillsync-meta.json").write_text("{not json", encoding="utf-8")
    assert read_install_meta(skill) is None

    (skill / ".skillsync-meta.json").write_text(json.dumps({"version": "1"}), encoding="utf-8")
    assert read_install_meta(skill) is None
