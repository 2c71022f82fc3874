"""Load, resolve and save skillsync configuration files."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from skillsync.config.models import (
    GlobalConfigFile,
    ProjectConfigFile,
    SkillsyncConfig,
    TargetConfig,
    TargetEntry,
)
from skillsync.config.paths import (
    config_path,
    expand_path,
    project_config_path,
    project_source_dir,
)
from skillsync.config.targets import (
    default_targets,
    lookup_global_target,
    lookup_project_target,
    project_targets,
)
from skillsync.sync.exceptions import ConfigError, UnknownTargetError
from skillsync.sync.models import DEFAULT_MODE, SyncMode

logger = logging.getLogger(__name__)


def _format_validation_error(path: Path, error: ValidationError) -> str:
    lines = [f"Invalid config {path}:"]
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        lines.append(f"  {location}: {item['msg']}")
    return "\n".join(lines)


def _read_yaml_mapping(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config {path}: top level must be a mapping")
    return data


def _resolve_entry(
    name: str,
    entry: TargetEntry,
    *,
    default_mode: SyncMode,
    fallback_path: Path | None,
) -> TargetConfig:
    if entry.path is not None:
        path = expand_path(entry.path)
    elif fallback_path is not None:
        path = fallback_path
    else:
        raise ConfigError(f"Target '{name}' has no path and is not a known target")

    return TargetConfig(
        name=name,
        path=path,
        mode=entry.mode or default_mode,
        include=tuple(entry.include),
        exclude=tuple(entry.exclude),
    )


def load_config(path: Path | None = None) -> SkillsyncConfig:
    """Load and resolve the global config file.

    Args:
        path: Config file to read; defaults to config_path()

    Returns:
        Resolved configuration

    Raises:
        ConfigError: If the file is missing or invalid
    """
    cfg_path = path if path is not None else config_path()
    if not cfg_path.exists():
        raise ConfigError(f"Config not found at {cfg_path}: run 'skillsync init' first")

    data = _read_yaml_mapping(cfg_path)
    try:
        raw = GlobalConfigFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(cfg_path, e)) from e

    default_mode = raw.mode or DEFAULT_MODE
    targets: dict[str, TargetConfig] = {}
    for name, entry in raw.targets.items():
        targets[name] = _resolve_entry(
            name,
            entry,
            default_mode=default_mode,
            fallback_path=lookup_global_target(name),
        )

    logger.debug("Loaded %d target(s) from %s", len(targets), cfg_path)
    return SkillsyncConfig(
        source=expand_path(raw.source),
        mode=default_mode,
        targets=targets,
        config_path=cfg_path,
        is_project=False,
    )


def load_project_config(project_root: Path) -> SkillsyncConfig:
    """Load .skillsync/config.yaml from a project.

    Bare string entries name a well-known target and take its project path;
    object entries may set their own path. Relative paths are resolved
    against the project root.

    Raises:
        ConfigError: If the file is missing, invalid, or names an unknown
            target without a path
    """
    cfg_path = project_config_path(project_root)
    if not cfg_path.exists():
        raise ConfigError(f"Project config not found at {cfg_path}: run 'skillsync init --project' first")

    data = _read_yaml_mapping(cfg_path)
    try:
        raw = ProjectConfigFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(cfg_path, e)) from e

    default_mode = raw.mode or DEFAULT_MODE
    targets: dict[str, TargetConfig] = {}
    for entry in raw.targets:
        if entry.name is None:
            raise ConfigError(f"Invalid config {cfg_path}: target entry without a name")
        if entry.name in targets:
            raise ConfigError(f"Invalid config {cfg_path}: duplicate target '{entry.name}'")

        relative = entry.path if entry.path is not None else lookup_project_target(entry.name)
        if relative is None:
            raise ConfigError(f"Target '{entry.name}' has no path and is not a known target")
        path = Path(relative).expanduser()
        if not path.is_absolute():
            path = project_root / path

        targets[entry.name] = TargetConfig(
            name=entry.name,
            path=path.absolute(),
            mode=entry.mode or default_mode,
            include=tuple(entry.include),
            exclude=tuple(entry.exclude),
        )

    return SkillsyncConfig(
        source=project_source_dir(project_root).absolute(),
        mode=default_mode,
        targets=targets,
        config_path=cfg_path,
        is_project=True,
    )


def select_targets(config: SkillsyncConfig, names: list[str]) -> list[TargetConfig]:
    """Return the named targets, or all targets when names is empty.

    Raises:
        UnknownTargetError: If a name is not configured
    """
    if not names:
        return list(config.targets.values())

    selected: list[TargetConfig] = []
    for name in names:
        if name not in config.targets:
            raise UnknownTargetError(name, list(config.targets))
        selected.append(config.targets[name])
    return selected


def create_default_config(source: Path) -> GlobalConfigFile:
    """Build an initial config with every well-known target whose tool is installed.

    A tool counts as installed when the parent of its skills directory exists
    (e.g. ~/.claude for ~/.claude/skills).
    """
    targets: dict[str, TargetEntry] = {}
    for name, path in default_targets().items():
        if path.parent.exists():
            targets[name] = TargetEntry(path=str(path))
    return GlobalConfigFile(source=str(source), mode=DEFAULT_MODE, targets=targets)


def save_config(path: Path, config: GlobalConfigFile) -> None:
    """Write a global config file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, object] = {"source": config.source}
    if config.mode is not None:
        data["mode"] = config.mode
    targets: dict[str, dict[str, object]] = {}
    for name, entry in config.targets.items():
        entry_data: dict[str, object] = {}
        if entry.path is not None:
            entry_data["path"] = entry.path
        if entry.mode is not None:
            entry_data["mode"] = entry.mode
        if entry.include:
            entry_data["include"] = list(entry.include)
        if entry.exclude:
            entry_data["exclude"] = list(entry.exclude)
        targets[name] = entry_data
    data["targets"] = targets

    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


def create_default_project_config(project_root: Path) -> ProjectConfigFile:
    """Build an initial project config from the tool directories present.

    A tool counts as used by the project when the parent of its project
    skills directory exists (e.g. .claude/ for .claude/skills). Two tools
    sharing one directory are only listed once.
    """
    entries: list[TargetEntry] = []
    seen_paths: set[str] = set()
    for name, relative in project_targets().items():
        if relative in seen_paths:
            continue
        if (project_root / relative).parent.is_dir():
            entries.append(TargetEntry(name=name))
            seen_paths.add(relative)
    return ProjectConfigFile(targets=entries)


def save_project_config(path: Path, config: ProjectConfigFile) -> None:
    """Write a project config, using the bare-name shorthand where possible."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, object] = {}
    if config.mode is not None:
        data["mode"] = config.mode
    targets: list[object] = []
    for entry in config.targets:
        if entry.path is None and entry.mode is None and not entry.include and not entry.exclude:
            targets.append(entry.name)
            continue
        entry_data: dict[str, object] = {"name": entry.name}
        if entry.path is not None:
            entry_data["path"] = entry.path
        if entry.mode is not None:
            entry_data["mode"] = entry.mode
        if entry.include:
            entry_data["include"] = list(entry.include)
        if entry.exclude:
            entry_data["exclude"] = list(entry.exclude)
        targets.append(entry_data)
    data["targets"] = targets

    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
