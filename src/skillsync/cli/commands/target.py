"""Target commands: inspect configured and well-known targets."""

import click

from skillsync.cli.ensure import Ensure
from skillsync.config.targets import load_target_specs
from skillsync.core.context import SkillsyncContext


@click.group("target")
def target_group() -> None:
    """Inspect sync targets."""


@target_group.command("list")
@click.pass_obj
def list_targets(ctx: SkillsyncContext) -> None:
    """List configured targets."""
    config = Ensure.config(ctx)

    if not config.targets:
        click.echo(f"No targets configured in {config.config_path}")
        return

    for target in config.targets.values():
        click.echo(f"{click.style(target.name, bold=True)} [{target.mode}]")
        click.echo(f"  path: {target.path}")
        if target.include:
            click.echo(f"  include: {', '.join(target.include)}")
        if target.exclude:
            click.echo(f"  exclude: {', '.join(target.exclude)}")


@target_group.command("known")
@click.pass_obj
def known_targets(ctx: SkillsyncContext) -> None:
    """List the tools skillsync knows default paths for."""
    for spec in load_target_specs():
        path = spec.project_path if ctx.project else spec.global_path
        name = spec.project_name if ctx.project else spec.global_name
        if name is None or path is None:
            continue
        line = f"{name:<16} {path}"
        if spec.aliases:
            line += click.style(f"  (aliases: {', '.join(spec.aliases)})", dim=True)
        click.echo(line)
