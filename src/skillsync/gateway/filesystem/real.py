import os
import shutil
from pathlib import Path

from skillsync.gateway.filesystem.abc import Filesystem


class RealFilesystem(Filesystem):
    @property
    def is_dry_run(self) -> bool:
        return False

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def create_symlink(self, *, link_path: Path, dest: Path) -> None:
        link_path.parent.mkdir(parents=True, exist_ok=True)
        link_path.symlink_to(dest, target_is_directory=True)

    def remove_link(self, path: Path) -> None:
        path.unlink()

    def remove_tree(self, path: Path) -> None:
        shutil.rmtree(path)

    def copy_tree(self, *, src: Path, dst: Path) -> None:
        dst.parent.mkdir(parents=True, exist_ok=True)
        # Links inside a skill are copied as links, not followed
        shutil.copytree(src, dst, symlinks=True)

    def copy_file(self, *, src: Path, dst: Path) -> None:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst, follow_symlinks=False)

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, path)
