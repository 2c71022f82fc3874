"""Filesystem locations for skillsync configuration and data.

Every directory honours its XDG environment variable and falls back to
the conventional location under the user's home directory.
"""

import os
from pathlib import Path

APP_NAME = "skillsync"

# Overrides the global config location (used heavily in tests)
CONFIG_ENV_VAR = "SKILLSYNC_CONFIG"

PROJECT_DIR_NAME = ".skillsync"


def expand_path(value: str | Path) -> Path:
    """Expand `~` and environment variables, returning an absolute path."""
    expanded = os.path.expandvars(os.path.expanduser(str(value)))
    return Path(expanded).absolute()


def _xdg_dir(env_var: str, *fallback: str) -> Path:
    xdg = os.environ.get(env_var)
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home().joinpath(*fallback, APP_NAME)


def base_dir() -> Path:
    """Config root: $XDG_CONFIG_HOME/skillsync or ~/.config/skillsync."""
    return _xdg_dir("XDG_CONFIG_HOME", ".config")


def data_dir() -> Path:
    """Data root: $XDG_DATA_HOME/skillsync or ~/.local/share/skillsync."""
    return _xdg_dir("XDG_DATA_HOME", ".local", "share")


def config_path() -> Path:
    """Global config file, respecting SKILLSYNC_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return base_dir() / "config.yaml"


def default_source_dir() -> Path:
    return base_dir() / "skills"


def backup_dir() -> Path:
    return data_dir() / "backups"


def project_config_path(project_root: Path) -> Path:
    return project_root / PROJECT_DIR_NAME / "config.yaml"


def project_source_dir(project_root: Path) -> Path:
    return project_root / PROJECT_DIR_NAME / "skills"
