"""Shared fixtures for skillsync tests."""

from pathlib import Path

import pytest


@pytest.fixture
def source(tmp_path: Path) -> Path:
    """Empty canonical source directory."""
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def targets_root(tmp_path: Path) -> Path:
    """Directory under which tests create target directories."""
    path = tmp_path / "targets"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and XDG directories into tmp_path so no test sees real user state."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.delenv("SKILLSYNC_CONFIG", raising=False)
    return home
