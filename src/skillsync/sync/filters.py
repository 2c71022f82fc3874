"""Include/exclude and per-skill target filtering."""

from collections.abc import Sequence

import pathspec

from skillsync.config.targets import matches_target_name
from skillsync.sync.exceptions import FilterPatternError
from skillsync.sync.models import DiscoveredSkill


def _check_brackets(pattern: str) -> None:
    depth = 0
    escaped = False
    for char in pattern:
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
        elif char == "[":
            if depth:
                raise FilterPatternError(pattern, "nested '[' in character class")
            depth = 1
        elif char == "]" and depth:
            depth = 0
    if escaped:
        raise FilterPatternError(pattern, "trailing backslash")
    if depth:
        raise FilterPatternError(pattern, "unterminated character class")


def validate_patterns(patterns: Sequence[str]) -> list[str]:
    """Validate glob patterns, returning them stripped of surrounding whitespace.

    Raises:
        FilterPatternError: If any pattern is empty, a comment, or malformed
    """
    cleaned: list[str] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            raise FilterPatternError(raw, "pattern is empty")
        if pattern.startswith("#"):
            raise FilterPatternError(raw, "patterns cannot start with '#'")
        _check_brackets(pattern)
        try:
            pathspec.PathSpec.from_lines("gitwildmatch", [pattern])
        except ValueError as e:
            raise FilterPatternError(raw, str(e)) from e
        cleaned.append(pattern)
    return cleaned


def _compile(patterns: Sequence[str]) -> pathspec.PathSpec | None:
    if not patterns:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def _matches(spec: pathspec.PathSpec | None, flat_name: str) -> bool:
    return spec is not None and spec.match_file(flat_name)


def should_sync_flat_name(flat_name: str, include: Sequence[str], exclude: Sequence[str]) -> bool:
    """Return True if a flat name passes the include/exclude rules.

    Empty include means "match everything". Exclude wins ties.
    """
    include_spec = _compile(validate_patterns(include))
    exclude_spec = _compile(validate_patterns(exclude))
    if include_spec is not None and not _matches(include_spec, flat_name):
        return False
    return not _matches(exclude_spec, flat_name)


def filter_skills(
    skills: list[DiscoveredSkill],
    include: Sequence[str],
    exclude: Sequence[str],
) -> list[DiscoveredSkill]:
    """Apply include/exclude patterns to discovered skills.

    Patterns are validated even when `skills` is empty so that a bad
    configuration surfaces at validate time rather than mid-sync.

    Raises:
        FilterPatternError: If any pattern is invalid
    """
    include_spec = _compile(validate_patterns(include))
    exclude_spec = _compile(validate_patterns(exclude))

    kept: list[DiscoveredSkill] = []
    for skill in skills:
        if include_spec is not None and not _matches(include_spec, skill.flat_name):
            continue
        if _matches(exclude_spec, skill.flat_name):
            continue
        kept.append(skill)
    return kept


def filter_skills_by_target(skills: list[DiscoveredSkill], target_name: str) -> list[DiscoveredSkill]:
    """Drop skills whose SKILL.md `targets` list does not name this target."""
    kept: list[DiscoveredSkill] = []
    for skill in skills:
        if skill.targets is None:
            kept.append(skill)
            continue
        if any(matches_target_name(declared, target_name) for declared in skill.targets):
            kept.append(skill)
    return kept


def skills_for_target(
    skills: list[DiscoveredSkill],
    *,
    target_name: str,
    include: Sequence[str],
    exclude: Sequence[str],
) -> list[DiscoveredSkill]:
    """Subset of skills relevant to one target: patterns, then allow-list."""
    return filter_skills_by_target(filter_skills(skills, include, exclude), target_name)
