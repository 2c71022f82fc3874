import logging
from pathlib import Path

import click

from skillsync.cli.commands.diff import diff_cmd
from skillsync.cli.commands.doctor import doctor_cmd
from skillsync.cli.commands.init import init_cmd
from skillsync.cli.commands.list_cmd import list_cmd
from skillsync.cli.commands.status import status_cmd
from skillsync.cli.commands.sync import sync_cmd
from skillsync.cli.commands.target import target_group
from skillsync.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="skillsync")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_override",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Use this config file instead of ~/.config/skillsync/config.yaml",
)
@click.option("--project", "-p", is_flag=True, help="Use .skillsync/config.yaml in the current directory")
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_override: Path | None, project: bool) -> None:
    """Sync one directory of agent skills into every AI tool that reads them."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(config_override=config_override, project=project)


cli.add_command(diff_cmd)
cli.add_command(doctor_cmd)
cli.add_command(init_cmd)
cli.add_command(list_cmd)
cli.add_command(status_cmd)
cli.add_command(sync_cmd)
cli.add_command(target_group)


def main() -> None:
    """CLI entry point used by the `skillsync` console script."""
    cli()
