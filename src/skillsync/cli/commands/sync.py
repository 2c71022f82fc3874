"""Sync command: reconcile targets with the source directory."""

import click

from skillsync.cli.ensure import Ensure
from skillsync.core.context import SkillsyncContext
from skillsync.output import user_output
from skillsync.sync.engine import SyncSummary, TargetSyncResult, sync_all
from skillsync.sync.exceptions import SyncError
from skillsync.sync.models import CopyResult, MergeResult, SymlinkResult


def _summarize(result: TargetSyncResult) -> str:
    outcome = result.result
    if isinstance(outcome, SymlinkResult):
        return outcome.message
    if isinstance(outcome, MergeResult):
        text = f"{len(outcome.linked)} linked, {len(outcome.updated)} updated, {len(outcome.skipped)} skipped"
        if outcome.local:
            text += f" ({len(outcome.local)} local)"
        return text
    if isinstance(outcome, CopyResult):
        text = f"{len(outcome.copied)} copied, {len(outcome.updated)} updated, {len(outcome.skipped)} skipped"
        if outcome.local:
            text += f" ({len(outcome.local)} local)"
        return text
    return str(result.status)


def _warnings(result: TargetSyncResult) -> list[str]:
    warnings: list[str] = []
    if isinstance(result.result, (MergeResult, CopyResult)):
        warnings.extend(result.result.warnings)
    if result.prune is not None:
        warnings.extend(result.prune.warnings)
    return warnings


def _print_target(result: TargetSyncResult) -> None:
    label = f"{result.name} [{result.mode}]"
    if not result.ok:
        click.echo(f"  {click.style('✗', fg='red')} {label}: {result.error}")
        return

    click.echo(f"  {click.style('✓', fg='green')} {label}: {_summarize(result)}")
    if result.backup_path is not None:
        click.echo(click.style(f"      backup: {result.backup_path}", dim=True))
    if result.prune is not None and result.prune.removed:
        click.echo(f"      pruned: {', '.join(result.prune.removed)}")
    for warning in _warnings(result):
        click.echo(click.style(f"      ! {warning}", fg="yellow"))


def _print_summary(summary: SyncSummary) -> None:
    for collision in summary.collisions:
        paths = ", ".join(str(p) for p in collision.source_paths)
        user_output(
            click.style("Warning: ", fg="yellow")
            + f"'{collision.flat_name}' is provided by several skills ({paths}); only the first is synced"
        )

    for result in summary.targets:
        _print_target(result)

    if summary.failed:
        click.echo("")
        click.echo(click.style(f"{len(summary.failed)} target(s) failed", fg="red", bold=True))


@click.command("sync")
@click.argument("names", nargs=-1)
@click.option("--dry-run", is_flag=True, help="Show what would change without touching anything")
@click.option("--force", "-f", is_flag=True, help="Replace local directories and foreign links")
@click.pass_obj
def sync_cmd(ctx: SkillsyncContext, names: tuple[str, ...], dry_run: bool, force: bool) -> None:
    """Sync skills to all targets, or only the NAMES given.

    Examples:

    \b
      # Sync every configured target
      skillsync sync

    \b
      # Preview a single target
      skillsync sync claude --dry-run
    """
    if dry_run:
        ctx = ctx.with_dry_run()
        user_output(click.style("[DRY RUN] No changes will be made", fg="yellow"))

    config = Ensure.config(ctx)
    if not config.targets:
        Ensure.fail(f"No targets configured in {config.config_path}")

    try:
        summary = sync_all(config, fs=ctx.fs, force=force, backup=ctx.backup, names=list(names))
    except SyncError as e:
        Ensure.fail(str(e))

    click.echo(f"Syncing {len(summary.skills)} skill(s) from {config.source}")
    _print_summary(summary)

    if summary.failed:
        raise SystemExit(1)
