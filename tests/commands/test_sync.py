"""Tests for skillsync sync command."""

from pathlib import Path

from click.testing import CliRunner

from skillsync.cli.cli import cli
from skillsync.cli.commands.sync import sync_cmd
from tests.fakes.backup import FakeTargetBackup
from tests.test_utils.context_builders import build_configured_context, build_test_context
from tests.test_utils.skills import make_skill, make_target, write_global_config


def test_sync_all_targets(tmp_path: Path, source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    make_skill(source, "coding")
    ctx = build_configured_context(
        tmp_path,
        source=source,
        targets=[
            make_target("claude", targets_root / "claude", "merge"),
            make_target("codex", targets_root / "codex", "copy"),
        ],
    )

    runner = CliRunner()
    result = runner.invoke(sync_cmd, [], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Syncing 2 skill(s)" in result.output
    assert "claude [merge]: 2 linked, 0 updated, 0 skipped" in result.output
    assert "codex [copy]: 2 copied, 0 updated, 0 skipped" in result.output
    assert (targets_root / "claude" / "writing").is_symlink()
    assert (targets_root / "codex" / "coding" / "SKILL.md").is_file()


def test_sync_reports_local_and_pruned(tmp_path: Path, source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    make_skill(source, "coding")
    target = make_target("claude", targets_root / "claude", "merge")
    ctx = build_configured_context(tmp_path, source=source, targets=[target])
    runner = CliRunner()
    runner.invoke(sync_cmd, [], obj=ctx)

    (source / "coding" / "SKILL.md").unlink()
    (target.path / "writing").unlink()
    make_skill(target.path, "writing")
    result = runner.invoke(sync_cmd, [], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "0 linked, 0 updated, 1 skipped (1 local)" in result.output
    assert "pruned: coding" in result.output


def test_sync_named_target(tmp_path: Path, source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    ctx = build_configured_context(
        tmp_path,
        source=source,
        targets=[
            make_target("claude", targets_root / "claude", "merge"),
            make_target("codex", targets_root / "codex", "copy"),
        ],
    )

    result = CliRunner().invoke(sync_cmd, ["codex"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "claude" not in result.output
    assert not (targets_root / "claude").exists()


def test_sync_unknown_target(tmp_path: Path, source: Path, targets_root: Path) -> None:
    ctx = build_configured_context(
        tmp_path, source=source, targets=[make_target("claude", targets_root / "claude", "merge")]
    )

    result = CliRunner().invoke(sync_cmd, ["nope"], obj=ctx)

    assert result.exit_code == 1
    assert "Unknown target: nope" in result.output


def test_sync_dry_run(tmp_path: Path, source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    backup = FakeTargetBackup()
    claude = make_target("claude", targets_root / "claude", "merge")
    make_skill(claude.path, "mine")
    ctx = build_configured_context(tmp_path, source=source, targets=[claude], backup=backup)

    result = CliRunner().invoke(sync_cmd, ["--dry-run"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "[DRY RUN] No changes will be made" in result.output
    assert "[DRY RUN] Would create symlink" in result.output
    assert "1 linked" in result.output
    assert not (claude.path / "writing").exists()
    assert backup.created == []


def test_sync_conflict_exits_nonzero_but_syncs_others(
    tmp_path: Path, source: Path, targets_root: Path
) -> None:
    make_skill(source, "writing")
    other = tmp_path / "other"
    other.mkdir()
    (targets_root / "cursor").symlink_to(other, target_is_directory=True)
    ctx = build_configured_context(
        tmp_path,
        source=source,
        targets=[
            make_target("cursor", targets_root / "cursor", "symlink"),
            make_target("claude", targets_root / "claude", "merge"),
        ],
    )

    result = CliRunner().invoke(sync_cmd, [], obj=ctx)

    assert result.exit_code == 1
    assert "cursor [symlink]: Target is a symlink to a different location" in result.output
    assert "1 target(s) failed" in result.output
    assert (targets_root / "claude" / "writing").is_symlink()


def test_sync_force_relinks_conflict(tmp_path: Path, source: Path, targets_root: Path) -> None:
    other = tmp_path / "other"
    other.mkdir()
    (targets_root / "cursor").symlink_to(other, target_is_directory=True)
    ctx = build_configured_context(
        tmp_path, source=source, targets=[make_target("cursor", targets_root / "cursor", "symlink")]
    )

    result = CliRunner().invoke(sync_cmd, ["--force"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "conflict resolved (forced" in result.output


def test_sync_shows_backup_path(tmp_path: Path, source: Path, targets_root: Path) -> None:
    make_skill(source, "writing")
    claude = make_target("claude", targets_root / "claude", "merge")
    make_skill(claude.path, "mine")
    snapshot = tmp_path / "backups" / "2026-01-01_00-00-00" / "claude"
    backup = FakeTargetBackup(backup_paths={"claude": snapshot})
    ctx = build_configured_context(tmp_path, source=source, targets=[claude], backup=backup)

    result = CliRunner().invoke(sync_cmd, [], obj=ctx)

    assert result.exit_code == 0, result.output
    assert f"backup: {snapshot}" in result.output


def test_sync_warns_on_flat_name_collision(tmp_path: Path, source: Path, targets_root: Path) -> None:
    make_skill(source, "a/b")
    make_skill(source, "a__b")
    ctx = build_configured_context(
        tmp_path, source=source, targets=[make_target("claude", targets_root / "claude", "merge")]
    )

    result = CliRunner().invoke(sync_cmd, [], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "'a__b' is provided by several skills" in result.output


def test_sync_without_config(tmp_path: Path) -> None:
    result = CliRunner().invoke(sync_cmd, [], obj=build_test_context(tmp_path))

    assert result.exit_code == 1
    assert "Config not found" in result.output


def test_sync_without_targets(tmp_path: Path, source: Path) -> None:
    write_global_config(tmp_path / "config.yaml", source=source, targets={})

    result = CliRunner().invoke(sync_cmd, [], obj=build_test_context(tmp_path))

    assert result.exit_code == 1
    assert "No targets configured" in result.output


def test_sync_missing_source(tmp_path: Path, targets_root: Path) -> None:
    ctx = build_configured_context(
        tmp_path, source=tmp_path / "missing", targets=[make_target("claude", targets_root / "claude", "merge")]
    )

    result = CliRunner().invoke(sync_cmd, [], obj=ctx)

    assert result.exit_code == 1
    assert "Source directory does not exist" in result.output


def test_sync_through_root_group(tmp_path: Path, source: Path, targets_root: Path) -> None:
    """The root group keeps an injected context."""
    make_skill(source, "writing")
    ctx = build_configured_context(
        tmp_path, source=source, targets=[make_target("claude", targets_root / "claude", "merge")]
    )

    result = CliRunner().invoke(cli, ["sync"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert (targets_root / "claude" / "writing").is_symlink()
