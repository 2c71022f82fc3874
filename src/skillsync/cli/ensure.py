"""CLI error handling: print a styled error and exit with status 1."""

from typing import NoReturn

import click

from skillsync.config.models import SkillsyncConfig
from skillsync.core.context import SkillsyncContext
from skillsync.output import user_output
from skillsync.sync.exceptions import ConfigError


class Ensure:
    """Helpers that turn expected failures into a clean CLI exit."""

    @staticmethod
    def fail(message: str) -> NoReturn:
        """Print an error and exit.

        Raises:
            SystemExit: Always (with exit code 1)
        """
        user_output(click.style("Error: ", fg="red") + message)
        raise SystemExit(1)

    @staticmethod
    def config(ctx: SkillsyncContext) -> SkillsyncConfig:
        """Load the active config or exit with the loader's error message.

        Raises:
            SystemExit: If the config is missing or invalid (with exit code 1)
        """
        try:
            return ctx.load_config()
        except ConfigError as e:
            Ensure.fail(str(e))
