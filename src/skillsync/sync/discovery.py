"""Discover skills in the canonical source directory."""

import json
import logging
import os
from pathlib import Path

from skillsync.core.frontmatter import read_skill_metadata
from skillsync.sync.exceptions import SourceNotFoundError
from skillsync.sync.links import is_hidden, normalize_path
from skillsync.sync.models import (
    FLAT_NAME_SEPARATOR,
    SKILL_FILE,
    DiscoveredSkill,
    InstallMeta,
)

logger = logging.getLogger(__name__)

# Written by the installer next to SKILL.md
INSTALL_META_FILE = ".skillsync-meta.json"

# Top-level directories with this prefix hold a whole tracked git repo
TRACKED_REPO_PREFIX = "_"


def is_tracked_repo_dir(name: str) -> bool:
    """Return True if a top-level source directory is a tracked repo container."""
    return len(name) > 1 and name.startswith(TRACKED_REPO_PREFIX)


def path_to_flat_name(rel_path: str) -> str:
    """Convert a source-relative path to the name used in targets.

    Examples:
        "writing" -> "writing"
        "personal/writing/email" -> "personal__writing__email"
    """
    normalized = rel_path.replace("\\", "/").strip("/")
    return FLAT_NAME_SEPARATOR.join(part for part in normalized.split("/") if part)


def _require_readable_source(source: Path) -> None:
    if not source.is_dir():
        raise SourceNotFoundError(source)
    if not os.access(source, os.R_OK | os.X_OK):
        raise SourceNotFoundError(source)


def discover_source_skills(source: Path) -> list[DiscoveredSkill]:
    """Recursively scan the source directory for skills.

    A skill is any directory containing SKILL.md. Grouping directories do not
    need their own SKILL.md. Hidden directories are not descended into, and
    symlinked directories are treated as sync artifacts rather than skills.

    Args:
        source: Canonical source directory

    Returns:
        Discovered skills sorted by relative path

    Raises:
        SourceNotFoundError: If the source directory is missing or unreadable
    """
    _require_readable_source(source)
    root = normalize_path(source)

    skills: list[DiscoveredSkill] = []
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        current = Path(dirpath)
        # Prune in place so os.walk skips hidden and linked directories
        dirnames[:] = sorted(
            d for d in dirnames if not is_hidden(d) and not (current / d).is_symlink()
        )

        if current == root or SKILL_FILE not in filenames:
            continue

        rel_path = current.relative_to(root).as_posix()
        metadata = read_skill_metadata(current)
        skills.append(
            DiscoveredSkill(
                source_path=current,
                rel_path=rel_path,
                flat_name=path_to_flat_name(rel_path),
                is_in_repo=is_tracked_repo_dir(rel_path.split("/")[0]),
                targets=metadata.targets,
            )
        )

    logger.debug("Discovered %d skill(s) under %s", len(skills), root)
    return sorted(skills, key=lambda s: s.rel_path)


def list_source_entries(source: Path) -> list[str]:
    """Coarse fallback listing: non-hidden top-level directory names.

    Used by read-only diagnostics when full discovery fails.
    """
    if not source.is_dir():
        return []
    try:
        entries = list(source.iterdir())
    except OSError as e:
        logger.debug("Cannot list %s: %s", source, e)
        return []
    return sorted(e.name for e in entries if e.is_dir() and not is_hidden(e.name))


def read_install_meta(skill_dir: Path) -> InstallMeta | None:
    """Read the installer's metadata record for a skill, if present."""
    meta_path = skill_dir / INSTALL_META_FILE
    if not meta_path.is_file():
        return None

    try:
        data = json.loads(meta_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.debug("Ignoring malformed %s", meta_path)
        return None

    if not isinstance(data, dict) or not isinstance(data.get("source"), str):
        return None

    version = data.get("version")
    installed_at = data.get("installed_at")
    return InstallMeta(
        source=data["source"],
        version=str(version) if version is not None else None,
        installed_at=str(installed_at) if installed_at is not None else None,
    )
