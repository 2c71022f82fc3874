"""List command: show the skills found in the source directory."""

import click

from skillsync.cli.ensure import Ensure
from skillsync.core.context import SkillsyncContext
from skillsync.core.frontmatter import read_skill_metadata
from skillsync.sync.discovery import discover_source_skills, read_install_meta
from skillsync.sync.exceptions import SourceNotFoundError


@click.command("list")
@click.option("--verbose", "-v", is_flag=True, help="Show frontmatter and install details")
@click.pass_obj
def list_cmd(ctx: SkillsyncContext, verbose: bool) -> None:
    """List skills in the source directory."""
    config = Ensure.config(ctx)

    try:
        skills = discover_source_skills(config.source)
    except SourceNotFoundError as e:
        Ensure.fail(str(e))

    if not skills:
        click.echo(f"No skills in {config.source}")
        return

    click.echo(click.style(f"Skills ({len(skills)})", bold=True))
    for skill in skills:
        line = f"  {skill.flat_name}"
        if skill.rel_path != skill.flat_name:
            line += click.style(f"  {skill.rel_path}", dim=True)
        if skill.is_in_repo:
            line += click.style("  [tracked]", fg="cyan")
        click.echo(line)

        if not verbose:
            continue
        metadata = read_skill_metadata(skill.source_path)
        if metadata.name is not None:
            click.echo(f"      name: {metadata.name}")
        if skill.targets is not None:
            click.echo(f"      targets: {', '.join(skill.targets)}")
        meta = read_install_meta(skill.source_path)
        if meta is not None:
            click.echo(f"      source: {meta.source}")
            if meta.version is not None:
                click.echo(f"      version: {meta.version}")
            if meta.installed_at is not None:
                click.echo(f"      installed: {meta.installed_at}")
