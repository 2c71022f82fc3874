"""Configuration models.

Two layers live here:

- File models (`TargetEntry`, `GlobalConfigFile`, `ProjectConfigFile`) mirror
  what users write in YAML, including the string-or-object target shorthand
  of project configs.
- Resolved models (`TargetConfig`, `SkillsyncConfig`) are what the sync
  engine consumes: absolute paths and a concrete mode for every target.
"""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from skillsync.sync.exceptions import FilterPatternError
from skillsync.sync.filters import validate_patterns
from skillsync.sync.models import SyncMode


def _validated_patterns(value: object, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list")
    patterns: list[str] = []
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise ValueError(f"{field_name}[{i}] must be a string")
        patterns.append(item)
    try:
        return validate_patterns(patterns)
    except FilterPatternError as e:
        raise ValueError(str(e)) from e


class TargetEntry(BaseModel):
    """A target as written in a config file.

    In the global config the name comes from the mapping key; in project
    configs it is given explicitly (or as a bare string, see ProjectConfigFile).
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    path: str | None = None
    mode: SyncMode | None = None
    include: list[str] = []
    exclude: list[str] = []

    @field_validator("name", "path", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("include", mode="before")
    @classmethod
    def validate_include(cls, v: object) -> list[str]:
        return _validated_patterns(v, "include")

    @field_validator("exclude", mode="before")
    @classmethod
    def validate_exclude(cls, v: object) -> list[str]:
        return _validated_patterns(v, "exclude")


class GlobalConfigFile(BaseModel):
    """Shape of ~/.config/skillsync/config.yaml.

    Example:
      source: ~/.config/skillsync/skills
      mode: merge
      targets:
        claude:
          path: ~/.claude/skills
        codex:
          path: ~/.codex/skills
          mode: copy
          exclude: ["_team__*"]
    """

    model_config = ConfigDict(frozen=True)

    source: str
    mode: SyncMode | None = None
    targets: dict[str, TargetEntry] = {}

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("targets", mode="before")
    @classmethod
    def default_targets(cls, v: object) -> object:
        # `targets:` with no entries parses as None
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: ({} if entry is None else entry) for k, entry in v.items()}
        return v


class ProjectConfigFile(BaseModel):
    """Shape of .skillsync/config.yaml inside a project.

    Example:
      targets:
        - claude
        - name: my-ide
          path: .my-ide/skills
          mode: copy
    """

    model_config = ConfigDict(frozen=True)

    mode: SyncMode | None = None
    targets: list[TargetEntry] = []

    @field_validator("targets", mode="before")
    @classmethod
    def expand_string_entries(cls, v: object) -> object:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("must be a list")
        entries: list[object] = []
        for item in v:
            if isinstance(item, str):
                entries.append({"name": item})
            else:
                entries.append(item)
        return entries


class TargetConfig(BaseModel):
    """A fully resolved sync destination."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    mode: SyncMode
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True)
class SkillsyncConfig:
    """Resolved configuration handed to the sync engine.

    Attributes:
        source: Canonical skill source directory
        mode: Default mode for targets that do not set one
        targets: Targets keyed by name, in config file order
        config_path: File this configuration was loaded from
        is_project: True for project-scoped (.skillsync/) configs
    """

    source: Path
    mode: SyncMode
    targets: dict[str, TargetConfig]
    config_path: Path
    is_project: bool
