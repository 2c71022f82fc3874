"""Tests for RealTargetBackup and backup listing."""

from pathlib import Path

from skillsync.gateway.backup.real import RealTargetBackup, list_backups
from tests.test_utils.skills import make_skill


def test_backup_copies_target(tmp_path: Path) -> None:
    target = tmp_path / "claude"
    make_skill(target, "mine")
    (target / "link").symlink_to(tmp_path, target_is_directory=True)
    backup = RealTargetBackup(tmp_path / "backups")

    path = backup.create("claude", target)

    assert path is not None
    assert path.name == "claude"
    assert path.parent.parent == tmp_path / "backups"
    assert (path / "mine" / "SKILL.md").is_file()
    assert (path / "link").is_symlink()


def test_backup_skips_empty_missing_and_links(tmp_path: Path) -> None:
    backup = RealTargetBackup(tmp_path / "backups")
    empty = tmp_path / "empty"
    empty.mkdir()
    linked = tmp_path / "linked"
    linked.symlink_to(empty, target_is_directory=True)

    assert backup.create("empty", empty) is None
    assert backup.create("missing", tmp_path / "missing") is None
    assert backup.create("linked", linked) is None
    assert not (tmp_path / "backups").exists()


def test_one_snapshot_per_run(tmp_path: Path) -> None:
    backup = RealTargetBackup(tmp_path / "backups")
    for name in ("claude", "codex"):
        make_skill(tmp_path / name, "mine")
        backup.create(name, tmp_path / name)

    snapshots = list_backups(tmp_path / "backups")

    assert len(snapshots) == 1
    assert snapshots[0].targets == ("claude", "codex")


def test_list_backups_newest_first(tmp_path: Path) -> None:
    root = tmp_path / "backups"
    (root / "2026-01-01_10-00-00" / "claude").mkdir(parents=True)
    (root / "2026-03-01_10-00-00" / "codex").mkdir(parents=True)
    (root / "stray.txt").parent.mkdir(exist_ok=True)
    (root / "stray.txt").write_text("", encoding="utf-8")

    snapshots = list_backups(root)

    assert [s.timestamp for s in snapshots] == ["2026-03-01_10-00-00", "2026-01-01_10-00-00"]
    assert list_backups(tmp_path / "missing") == []
