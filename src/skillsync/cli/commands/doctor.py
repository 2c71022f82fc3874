"""Doctor command for skillsync setup diagnostics.

Runs health checks on the config, source directory and every target to
identify issues before they surface during a sync.
"""

import click

from skillsync.core.context import SkillsyncContext
from skillsync.core.health_checks import CheckResult, run_all_checks


def _format_check_result(result: CheckResult) -> None:
    """Format and display a single check result."""
    if not result.passed:
        icon = click.style("✗", fg="red")
    elif result.warning:
        icon = click.style("!", fg="yellow")
    else:
        icon = click.style("✓", fg="green")

    click.echo(f"{icon} {result.message}")

    if result.details:
        for line in result.details.split("\n"):
            click.echo(click.style(f"   {line}", dim=True))


@click.command("doctor")
@click.pass_obj
def doctor_cmd(ctx: SkillsyncContext) -> None:
    """Run diagnostic checks on skillsync setup.

    Checks for:

    \b
      - Config: file present and valid
      - Source: directory, SKILL.md files, frontmatter targets
      - Targets: path, permissions, mode drift, broken links
      - Skills: duplicates and name collisions
    """
    click.echo(click.style("Checking skillsync setup...", bold=True))
    click.echo("")

    results = run_all_checks(ctx)
    for result in results:
        _format_check_result(result)
    click.echo("")

    failed = sum(1 for r in results if not r.passed)
    warnings = sum(1 for r in results if r.passed and r.warning)

    if failed == 0 and warnings == 0:
        click.echo(click.style("All checks passed!", fg="green", bold=True))
    elif failed == 0:
        click.echo(click.style(f"{warnings} warning(s)", fg="yellow", bold=True))
    else:
        click.echo(click.style(f"{failed} error(s), {warnings} warning(s)", fg="red", bold=True))
        raise SystemExit(1)
