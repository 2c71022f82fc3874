"""Exceptions raised by the sync engine."""

from pathlib import Path


class SyncError(Exception):
    """Base class for all skillsync errors."""


class ConfigError(SyncError):
    """Configuration is invalid.

    Raised before any filesystem mutation begins.
    """


class FilterPatternError(ConfigError):
    """An include/exclude glob pattern is syntactically invalid."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class UnknownTargetError(ConfigError):
    """A target name was requested that is not configured."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        available = ", ".join(sorted(known)) if known else "(none)"
        super().__init__(f"Unknown target: {name}\nConfigured targets: {available}")


class SourceNotFoundError(SyncError):
    """The canonical source directory is missing or unreadable."""

    def __init__(self, source: Path) -> None:
        self.source = source
        super().__init__(f"Source directory does not exist: {source}")


class TargetConflictError(SyncError):
    """Target path is occupied by a symlink to a foreign location.

    Raised when a target cannot be reconciled because its path links
    somewhere other than the source and force is not enabled.
    """

    def __init__(
        self,
        target_path: Path,
        link_dest: Path | None,
        suggestion: str = "Use --force to replace the existing link",
    ) -> None:
        self.target_path = target_path
        self.link_dest = link_dest
        self.suggestion = suggestion
        dest = str(link_dest) if link_dest is not None else "(unable to resolve target)"
        super().__init__(f"Target is a symlink to a different location: {target_path} -> {dest}\n{suggestion}")


class MigrationConflictError(SyncError):
    """Local target content collides with skills already in the source."""

    def __init__(self, target_path: Path, names: list[str]) -> None:
        self.target_path = target_path
        self.names = names
        joined = ", ".join(names)
        super().__init__(
            f"Cannot migrate {target_path} into source: {joined} already exist in source\n"
            "Resolve the duplicates manually, then run sync again"
        )
