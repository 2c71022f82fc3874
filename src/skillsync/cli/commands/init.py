"""Init command: create a global or project config."""

import click

from skillsync.cli.ensure import Ensure
from skillsync.config.loader import (
    create_default_config,
    create_default_project_config,
    save_config,
    save_project_config,
)
from skillsync.config.paths import default_source_dir, expand_path, project_config_path, project_source_dir
from skillsync.core.context import SkillsyncContext
from skillsync.output import user_output


def _init_project(ctx: SkillsyncContext, force: bool) -> None:
    cfg_path = project_config_path(ctx.cwd)
    if cfg_path.exists() and not force:
        Ensure.fail(f"Project config already exists: {cfg_path} (use --force to overwrite)")

    config = create_default_project_config(ctx.cwd)
    save_project_config(cfg_path, config)
    project_source_dir(ctx.cwd).mkdir(parents=True, exist_ok=True)

    user_output(click.style("✓", fg="green") + f" Created {cfg_path}")
    if config.targets:
        user_output(f"  Targets: {', '.join(str(t.name) for t in config.targets)}")
    else:
        user_output("  No tool directories found; add targets to the config by hand")


@click.command("init")
@click.option(
    "--source",
    "source",
    type=str,
    default=None,
    help="Skill source directory (default: ~/.config/skillsync/skills)",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config")
@click.pass_obj
def init_cmd(ctx: SkillsyncContext, source: str | None, force: bool) -> None:
    """Create a config with every installed tool as a target.

    With the global --project flag, creates .skillsync/config.yaml in the
    current directory instead.
    """
    if ctx.project:
        _init_project(ctx, force)
        return

    if ctx.config_path.exists() and not force:
        Ensure.fail(f"Config already exists: {ctx.config_path} (use --force to overwrite)")

    source_dir = expand_path(source) if source is not None else default_source_dir()
    config = create_default_config(source_dir)
    save_config(ctx.config_path, config)
    source_dir.mkdir(parents=True, exist_ok=True)

    user_output(click.style("✓", fg="green") + f" Created {ctx.config_path}")
    user_output(f"  Source: {source_dir}")
    if config.targets:
        user_output(f"  Targets: {', '.join(config.targets)}")
    else:
        user_output("  No installed tools detected; add targets to the config by hand")
