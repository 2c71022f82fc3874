"""User-facing output helpers."""

import click


def user_output(message: str = "") -> None:
    """Print a message for the user on stderr.

    Results that scripts may parse go to stdout via click.echo; progress,
    warnings and dry-run narration go here.
    """
    click.echo(message, err=True)
