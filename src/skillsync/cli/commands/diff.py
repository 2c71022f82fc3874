"""Diff command: per-skill preview of what a sync would change."""

from pathlib import Path

import click

from skillsync.cli.ensure import Ensure
from skillsync.config.loader import select_targets
from skillsync.config.models import TargetConfig
from skillsync.core.context import SkillsyncContext
from skillsync.sync.diagnostics import DiffItem, detect_mode_drift, diff_target
from skillsync.sync.discovery import discover_source_skills
from skillsync.sync.engine import dedupe_flat_names, strategy_for, validate_targets
from skillsync.sync.exceptions import SyncError
from skillsync.sync.models import DiscoveredSkill, TargetStatus

_KIND_DISPLAY = {
    "missing": ("+", "green", "missing"),
    "local_copy": ("~", "yellow", "local copy (sync --force to replace)"),
    "stale_link": ("~", "yellow", "link points elsewhere"),
    "outdated": ("~", "yellow", "source changed"),
    "orphan": ("-", "red", "orphan (will be pruned)"),
    "local_only": ("-", "red", "local only"),
}


def _print_item(item: DiffItem) -> None:
    symbol, color, text = _KIND_DISPLAY[item.kind]
    click.echo(f"  {click.style(symbol, fg=color)} {item.flat_name}: {text}")


def _show_target(target: TargetConfig, skills: list[DiscoveredSkill], source: Path) -> None:
    click.echo(click.style(f"{target.name} [{target.mode}]", bold=True))
    if target.include:
        click.echo(click.style(f"  include: {', '.join(target.include)}", dim=True))
    if target.exclude:
        click.echo(click.style(f"  exclude: {', '.join(target.exclude)}", dim=True))

    status = strategy_for(target.mode).classify(target.path, source).status
    if target.mode == "symlink":
        if status == TargetStatus.LINKED:
            click.echo(f"  {click.style('✓', fg='green')} Fully synced (symlink mode)")
        else:
            click.echo(click.style(f"  ! Not linked ({status}), run 'skillsync sync'", fg="yellow"))
        return

    drift = detect_mode_drift(target, source)
    if drift is not None:
        click.echo(click.style(f"  ! Target is currently {drift}, 'skillsync sync' converts it", fg="yellow"))

    items = diff_target(target, skills, source)
    if not items:
        click.echo(f"  {click.style('✓', fg='green')} Fully synced")
        return

    for item in items:
        _print_item(item)
    if any(item.kind != "local_only" for item in items):
        hint = "  Run 'skillsync sync' to apply, 'skillsync sync --force' to replace local copies"
        click.echo(click.style(hint, dim=True))
    if any(item.kind == "local_only" for item in items):
        click.echo(click.style(f"  Local-only skills are kept; move them into {source} to share them", dim=True))


@click.command("diff")
@click.argument("name", required=False)
@click.pass_obj
def diff_cmd(ctx: SkillsyncContext, name: str | None) -> None:
    """Show what a sync would change, per target and skill.

    Read-only. Lists missing skills, local copies that need --force,
    orphans that would be pruned and directories only the target has.

    Examples:

    \b
      # Every configured target
      skillsync diff

    \b
      # A single target
      skillsync diff claude
    """
    config = Ensure.config(ctx)

    try:
        targets = select_targets(config, [name] if name else [])
        validate_targets(targets)
        skills = dedupe_flat_names(discover_source_skills(config.source))
    except SyncError as e:
        Ensure.fail(str(e))

    if not targets:
        click.echo(f"No targets configured in {config.config_path}")
        return

    for index, target in enumerate(targets):
        if index:
            click.echo("")
        _show_target(target, skills, config.source)
