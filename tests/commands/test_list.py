"""Tests for skillsync list command."""

import json
from pathlib import Path

from click.testing import CliRunner

from skillsync.cli.commands.list_cmd import list_cmd
from tests.test_utils.context_builders import build_test_context
from tests.test_utils.skills import make_skill, write_global_config


def test_list_skills(tmp_path: Path, source: Path) -> None:
    make_skill(source, "writing")
    make_skill(source, "_team/ui")
    write_global_config(tmp_path / "config.yaml", source=source, targets={})

    result = CliRunner().invoke(list_cmd, [], obj=build_test_context(tmp_path))

    assert result.exit_code == 0, result.output
    assert "Skills (2)" in result.output
    assert "_team__ui  _team/ui  [tracked]" in result.output
    assert "  writing" in result.output


def test_list_verbose(tmp_path: Path, source: Path) -> None:
    skill = make_skill(source, "writing", name="writer", targets=["claude"])
    (skill / ".skillsync-meta.json").write_text(
        json.dumps({"source": "github.com/acme/skills", "version": "1.2.0"}), encoding="utf-8"
    )
    write_global_config(tmp_path / "config.yaml", source=source, targets={})

    result = CliRunner().invoke(list_cmd, ["-v"], obj=build_test_context(tmp_path))

    assert result.exit_code == 0, result.output
    assert "name: writer" in result.output
    assert "targets: claude" in result.output
    assert "source: github.com/acme/skills" in result.output
    assert "version: 1.2.0" in result.output


def test_list_empty_source(tmp_path: Path, source: Path) -> None:
    write_global_config(tmp_path / "config.yaml", source=source, targets={})

    result = CliRunner().invoke(list_cmd, [], obj=build_test_context(tmp_path))

    assert result.exit_code == 0, result.output
    assert f"No skills in {source}" in result.output
