"""Data models for skill synchronization."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

SyncMode = Literal["symlink", "merge", "copy"]

SYNC_MODES: tuple[SyncMode, ...] = ("symlink", "merge", "copy")

DEFAULT_MODE: SyncMode = "merge"

# Marker file identifying a skill directory
SKILL_FILE = "SKILL.md"

# Joins nested path segments into a flat target name: _team/ui -> _team__ui
FLAT_NAME_SEPARATOR = "__"


@dataclass(frozen=True)
class DiscoveredSkill:
    """A skill found while scanning the source directory.

    Attributes:
        source_path: Absolute skill directory (e.g. ~/.config/skillsync/skills/_team/ui)
        rel_path: POSIX path relative to the source root (e.g. "_team/ui")
        flat_name: Name used in every target (e.g. "_team__ui")
        is_in_repo: Whether the skill lives inside a tracked repo (_-prefixed dir)
        targets: Target allow-list from SKILL.md frontmatter; None means all targets
    """

    source_path: Path
    rel_path: str
    flat_name: str
    is_in_repo: bool
    targets: tuple[str, ...] | None


@dataclass(frozen=True)
class InstallMeta:
    """Install record written next to a skill by the installer.

    Display only; never consulted when reconciling.
    """

    source: str
    version: str | None
    installed_at: str | None


class TargetStatus(Enum):
    """Relationship between a target path and the source directory."""

    UNKNOWN = "unknown"
    NOT_EXIST = "not exist"
    LINKED = "linked"
    HAS_FILES = "has files"
    BROKEN = "broken"
    CONFLICT = "conflict"
    MERGED = "merged"
    COPIED = "copied"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SymlinkResult:
    """Outcome of reconciling a symlink-mode target."""

    status: TargetStatus
    action: Literal["none", "created", "fixed", "migrated", "relinked"]
    message: str


@dataclass
class MergeResult:
    """Outcome of a merge-mode pass.

    `local` is the subset of `skipped` that are real directories the user owns.
    """

    linked: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    local: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class CopyResult:
    """Outcome of a copy-mode pass."""

    copied: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    local: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class PruneResult:
    """Outcome of orphan pruning."""

    removed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
