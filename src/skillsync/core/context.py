"""Application context with dependency injection."""

from dataclasses import dataclass, replace
from pathlib import Path

import click

from skillsync.config.loader import load_config, load_project_config
from skillsync.config.models import SkillsyncConfig
from skillsync.config.paths import backup_dir, config_path
from skillsync.gateway.backup.abc import TargetBackup
from skillsync.gateway.backup.real import RealTargetBackup
from skillsync.gateway.filesystem.abc import Filesystem
from skillsync.gateway.filesystem.dry_run import DryRunFilesystem
from skillsync.gateway.filesystem.real import RealFilesystem
from skillsync.output import user_output


@dataclass(frozen=True)
class SkillsyncContext:
    """Immutable context holding all dependencies for skillsync commands.

    Created at the CLI entry point and passed to commands as the click
    context object. Tests construct their own with `for_test()`.
    """

    fs: Filesystem
    backup: TargetBackup
    cwd: Path
    config_path: Path
    backup_root: Path
    project: bool
    dry_run: bool

    def load_config(self) -> SkillsyncConfig:
        """Load the project config when --project is set, else the global one.

        Raises:
            ConfigError: If the config file is missing or invalid
        """
        if self.project:
            return load_project_config(self.cwd)
        return load_config(self.config_path)

    def with_dry_run(self) -> "SkillsyncContext":
        """Return a copy whose filesystem only reports mutations."""
        if self.dry_run:
            return self
        return replace(self, fs=DryRunFilesystem(self.fs), dry_run=True)

    @staticmethod
    def for_test(
        *,
        cwd: Path,
        config_path: Path,
        backup: TargetBackup,
        fs: Filesystem | None = None,
        backup_root: Path | None = None,
        project: bool = False,
        dry_run: bool = False,
    ) -> "SkillsyncContext":
        """Create a context for tests.

        The filesystem defaults to the real one (tests run inside tmp_path);
        the backup gateway must be supplied so tests never write into the
        user's data directory.
        """
        return SkillsyncContext(
            fs=fs if fs is not None else RealFilesystem(),
            backup=backup,
            cwd=cwd,
            config_path=config_path,
            backup_root=backup_root if backup_root is not None else cwd / "backups",
            project=project,
            dry_run=dry_run,
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists."""
    try:
        return (Path.cwd(), None)
    except OSError:
        return (None, "Current working directory no longer exists")


def create_context(*, config_override: Path | None, project: bool) -> SkillsyncContext:
    """Create production context with real implementations.

    Args:
        config_override: Config file given with --config, if any
        project: Use the project config in the current directory

    Returns:
        SkillsyncContext backed by the real filesystem
    """
    cwd, error_msg = safe_cwd()
    if cwd is None:
        user_output(click.style("Error: ", fg="red") + str(error_msg))
        raise SystemExit(1)

    root = backup_dir()
    return SkillsyncContext(
        fs=RealFilesystem(),
        backup=RealTargetBackup(root),
        cwd=cwd,
        config_path=config_override if config_override is not None else config_path(),
        backup_root=root,
        project=project,
        dry_run=False,
    )
