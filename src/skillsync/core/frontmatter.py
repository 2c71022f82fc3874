"""Frontmatter parsing for SKILL.md files.

Only two fields matter to the sync engine: `name` (used for collision
reports) and `targets` (the per-skill target allow-list). Everything else
in a skill is opaque content.
"""

from dataclasses import dataclass
from pathlib import Path

import frontmatter
import yaml

from skillsync.sync.models import SKILL_FILE

FRONTMATTER_DELIMITER = "---"


@dataclass(frozen=True)
class FrontmatterParseResult:
    """Result of parsing the frontmatter block of a SKILL.md.

    Attributes:
        metadata: Parsed frontmatter mapping, or None if there was none or it was invalid
        body: Markdown after the frontmatter (the whole content on failure)
        error: Why metadata is None, if it is
    """

    metadata: dict[str, object] | None
    body: str
    error: str | None

    @property
    def is_valid(self) -> bool:
        return self.metadata is not None


@dataclass(frozen=True)
class SkillMetadata:
    """Fields of SKILL.md frontmatter the engine cares about."""

    name: str | None
    targets: tuple[str, ...] | None


def _failed(content: str, error: str) -> FrontmatterParseResult:
    return FrontmatterParseResult(metadata=None, body=content, error=error)


def parse_skill_frontmatter(content: str) -> FrontmatterParseResult:
    """Split SKILL.md content into its YAML frontmatter and markdown body.

    python-frontmatter silently drops non-mapping YAML, so an empty result
    is told apart from a missing block by looking for the opening delimiter.
    """
    try:
        post = frontmatter.loads(content)
    except yaml.YAMLError as e:
        return _failed(content, f"Invalid YAML: {e}")

    if post.metadata:
        return FrontmatterParseResult(metadata=dict(post.metadata), body=post.content, error=None)

    if content.lstrip().startswith(FRONTMATTER_DELIMITER):
        return _failed(post.content, "Frontmatter is not a YAML mapping")
    return _failed(content, "No frontmatter found")


def _coerce_targets(value: object) -> tuple[str, ...] | None:
    # Accepts `targets: [claude, codex]` or `targets: claude, codex`
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    elif isinstance(value, list):
        items = [str(part).strip() for part in value if part is not None]
    else:
        return None
    cleaned = tuple(item for item in items if item)
    if not cleaned:
        return None
    return cleaned


def read_skill_metadata(skill_dir: Path) -> SkillMetadata:
    """Read `name` and `targets` from a skill's SKILL.md.

    Missing files and unparseable frontmatter yield empty metadata; the
    skill still syncs to every target.
    """
    skill_file = skill_dir / SKILL_FILE
    if not skill_file.is_file():
        return SkillMetadata(name=None, targets=None)

    result = parse_skill_frontmatter(skill_file.read_text(encoding="utf-8", errors="replace"))
    if result.metadata is None:
        return SkillMetadata(name=None, targets=None)

    raw_name = result.metadata.get("name")
    name = str(raw_name).strip() if raw_name is not None else None
    return SkillMetadata(
        name=name or None,
        targets=_coerce_targets(result.metadata.get("targets")),
    )
