"""Copy-mode manifest stored inside each copy target.

The manifest records which entries of a target directory skillsync owns,
so orphan pruning and diagnostics never mistake a user's own directory
for a managed copy.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path

import tomli
import tomli_w

from skillsync.gateway.filesystem.abc import Filesystem

logger = logging.getLogger(__name__)

MANIFEST_FILE = ".skillsync-manifest.toml"


@dataclass(frozen=True)
class Manifest:
    """Managed entries of a copy-mode target.

    The managed dict maps flat skill names to source fingerprints
    ("sha256:..."), recorded when the copy was made.
    """

    managed: dict[str, str]
    updated_at: str | None

    def with_entry(self, flat_name: str, fingerprint: str) -> "Manifest":
        """Return new manifest with an entry added or replaced."""
        return replace(self, managed={**self.managed, flat_name: fingerprint})

    def without_entry(self, flat_name: str) -> "Manifest":
        """Return new manifest with an entry dropped."""
        return replace(self, managed={k: v for k, v in self.managed.items() if k != flat_name})


def get_manifest_path(target_path: Path) -> Path:
    return target_path / MANIFEST_FILE


def empty_manifest() -> Manifest:
    return Manifest(managed={}, updated_at=None)


def read_manifest(target_path: Path) -> Manifest:
    """Load the manifest of a target directory.

    Returns an empty manifest if the file does not exist. A corrupt file is
    also treated as empty so that the next sync rebuilds it.
    """
    path = get_manifest_path(target_path)
    if not path.is_file():
        return empty_manifest()

    try:
        data = tomli.loads(path.read_text(encoding="utf-8"))
    except tomli.TOMLDecodeError as e:
        logger.warning("Ignoring corrupt manifest %s: %s", path, e)
        return empty_manifest()

    managed = data.get("managed", {})
    if not isinstance(managed, dict):
        return empty_manifest()
    updated_at = data.get("updated_at")
    return Manifest(
        managed={str(k): str(v) for k, v in managed.items()},
        updated_at=str(updated_at) if updated_at is not None else None,
    )


def write_manifest(fs: Filesystem, target_path: Path, manifest: Manifest) -> Manifest:
    """Persist the manifest, stamping updated_at.

    Returns:
        The manifest as written
    """
    stamped = replace(manifest, updated_at=datetime.now(timezone.utc).isoformat())
    data = {
        "updated_at": stamped.updated_at,
        "managed": dict(sorted(stamped.managed.items())),
    }
    fs.write_text(get_manifest_path(target_path), tomli_w.dumps(data))
    return stamped


def remove_manifest(fs: Filesystem, target_path: Path) -> bool:
    """Delete the manifest when a target leaves copy mode.

    Returns:
        True if a manifest existed
    """
    path = get_manifest_path(target_path)
    if not path.is_file():
        return False
    fs.remove_link(path)
    return True
