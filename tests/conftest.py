from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable

import pytest

from dotty.features import SystemFeatures


@pytest.fixture
def fake_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("DOTTY_CONFIG", raising=False)
    return home


@pytest.fixture
def linux_x86() -> SystemFeatures:
    return SystemFeatures(os="linux", arch="x86", family="unix")


@pytest.fixture
def darwin_arm() -> SystemFeatures:
    return SystemFeatures(os="darwin", arch="aarch64", family="unix")


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Build a dotfiles tree from a mapping of relative path to contents."""

    def _make(files: dict[str, str], name: str = "repo") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return root

    return _make


@pytest.fixture
def copy_sync(tmp_path: Path):
    """A stand-in for ``git.sync`` that copies local source trees into place.

    ``calls`` records every ``(url, destination)`` pair it was asked for.
    """

    class CopySync:
        def __init__(self) -> None:
            self.calls: list[tuple[str, Path]] = []

        def __call__(self, url: str, destination: Path) -> None:
            self.calls.append((url, destination))
            source = Path(url)
            if destination.exists():
                shutil.rmtree(destination)
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, destination)

    return CopySync()
