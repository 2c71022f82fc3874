"""Table of well-known tool skill directories.

The table ships as package data (data/targets.yaml) and is loaded once
into immutable specs. The sync engine only ever sees resolved
TargetConfig records; this module is consulted at config load time and
for alias-aware target name matching.
"""

from dataclasses import dataclass
from functools import cache
from pathlib import Path

import yaml

from skillsync.config.paths import expand_path


@dataclass(frozen=True)
class TargetSpec:
    """One row of the default target table."""

    global_name: str | None
    project_name: str | None
    global_path: str | None
    project_path: str | None
    aliases: tuple[str, ...]

    @property
    def all_names(self) -> tuple[str, ...]:
        names = [n for n in (self.global_name, self.project_name) if n]
        return (*names, *self.aliases)


def _targets_data_path() -> Path:
    # data/ sits next to this module in both wheel and editable installs
    return Path(__file__).parent / "data" / "targets.yaml"


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@cache
def load_target_specs() -> tuple[TargetSpec, ...]:
    """Load the embedded target table.

    Returns:
        Specs in file order
    """
    data = yaml.safe_load(_targets_data_path().read_text(encoding="utf-8"))
    rows = data.get("targets", []) if isinstance(data, dict) else []

    specs: list[TargetSpec] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        specs.append(
            TargetSpec(
                global_name=_optional_str(row.get("global_name")),
                project_name=_optional_str(row.get("project_name")),
                global_path=_optional_str(row.get("global_path")),
                project_path=_optional_str(row.get("project_path")),
                aliases=tuple(str(a) for a in row.get("aliases") or []),
            )
        )
    return tuple(specs)


def default_targets() -> dict[str, Path]:
    """Well-known global skill directories keyed by target name."""
    targets: dict[str, Path] = {}
    for spec in load_target_specs():
        if spec.global_name and spec.global_path:
            targets[spec.global_name] = expand_path(spec.global_path)
    return targets


def project_targets() -> dict[str, str]:
    """Well-known project skill directories (relative to project root)."""
    targets: dict[str, str] = {}
    for spec in load_target_specs():
        if spec.project_name and spec.project_path:
            targets[spec.project_name] = spec.project_path
    return targets


def lookup_global_target(name: str) -> Path | None:
    """Return the default global path for a target name, if known."""
    return default_targets().get(name)


def lookup_project_target(name: str) -> str | None:
    """Return the project-relative path for a target name or one of its aliases."""
    targets = project_targets()
    if name in targets:
        return targets[name]

    for spec in load_target_specs():
        if name in spec.aliases and spec.project_name and spec.project_path:
            return spec.project_path
    return None


def matches_target_name(skill_target: str, config_target: str) -> bool:
    """Check whether a skill-declared target name matches a configured target.

    Names match exactly, or when both appear in the same table row
    (e.g. "claude-code" matches "claude").
    """
    if skill_target == config_target:
        return True

    for spec in load_target_specs():
        names = spec.all_names
        if skill_target in names and config_target in names:
            return True
    return False


def known_target_names() -> list[str]:
    """All names (global, project and aliases) in table order, deduplicated."""
    seen: list[str] = []
    for spec in load_target_specs():
        for name in spec.all_names:
            if name not in seen:
                seen.append(name)
    return seen
