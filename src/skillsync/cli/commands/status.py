"""Status command: show how every target relates to the source."""

import click

from skillsync.cli.ensure import Ensure
from skillsync.core.context import SkillsyncContext
from skillsync.sync.diagnostics import check_sync_drift, detect_mode_drift
from skillsync.sync.discovery import discover_source_skills, list_source_entries
from skillsync.sync.engine import strategy_for
from skillsync.sync.exceptions import SourceNotFoundError
from skillsync.sync.models import DiscoveredSkill, TargetStatus

_STATUS_COLORS = {
    TargetStatus.LINKED: "green",
    TargetStatus.MERGED: "green",
    TargetStatus.COPIED: "green",
    TargetStatus.NOT_EXIST: "yellow",
    TargetStatus.HAS_FILES: "yellow",
    TargetStatus.BROKEN: "red",
    TargetStatus.CONFLICT: "red",
    TargetStatus.UNKNOWN: "red",
}


@click.command("status")
@click.pass_obj
def status_cmd(ctx: SkillsyncContext) -> None:
    """Show source and target status."""
    config = Ensure.config(ctx)

    click.echo(click.style("Source", bold=True))
    skills: list[DiscoveredSkill] = []
    try:
        skills = discover_source_skills(config.source)
        click.echo(f"  {config.source} ({len(skills)} skills)")
    except SourceNotFoundError as e:
        entries = list_source_entries(config.source)
        click.echo(f"  {config.source} ({len(entries)} entries)")
        click.echo(click.style(f"  ! {e}", fg="yellow"))
    click.echo("")

    click.echo(click.style("Targets", bold=True))
    if not config.targets:
        click.echo("  (none configured)")
    for target in config.targets.values():
        mode_status = strategy_for(target.mode).classify(target.path, config.source)
        status_text = click.style(str(mode_status.status), fg=_STATUS_COLORS[mode_status.status])
        line = f"  {target.name} [{target.mode}]: {status_text}"
        if mode_status.status in (TargetStatus.MERGED, TargetStatus.COPIED):
            line += f" ({mode_status.synced} synced, {mode_status.local} local)"
        drift = detect_mode_drift(target, config.source)
        if drift is not None:
            line += click.style(f" (currently {drift}, run 'skillsync sync')", fg="yellow")
        click.echo(line)
        click.echo(click.style(f"      {target.path}", dim=True))

    reports = check_sync_drift(list(config.targets.values()), skills, config.source)
    if reports:
        click.echo("")
        worst = max(report.missing for report in reports)
        click.echo(click.style(f"{worst} skill(s) not synced, run 'skillsync sync'", fg="yellow"))
