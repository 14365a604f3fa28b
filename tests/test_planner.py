from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

import pytest

from dotty.errors import ConflictError, ScanError
from dotty.features import SystemFeatures
from dotty.models import SkipReason
from dotty.planner import plan


def test_plan_links_matching_files(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo(
        {
            ".bashrc": "export A=1\n",
            ".tmux.linux.conf": "set -g mouse on\n",
            ".tmux.darwin.conf": "set -g mouse off\n",
        }
    )
    home = tmp_path / "home"

    result = plan(repo, home, linux_x86)

    assert [(a.source.name, a.destination) for a in result.actions] == [
        (".bashrc", home / ".bashrc"),
        (".tmux.linux.conf", home / ".tmux.os.conf"),
    ]
    assert [(s.relative_path, s.reason) for s in result.skipped] == [
        (PurePosixPath(".tmux.darwin.conf"), SkipReason.FEATURE_MISMATCH)
    ]
    assert result.errors == ()


def test_plan_order_is_depth_first_lexicographic(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo(
        {
            "b.txt": "",
            ".zshrc": "",
            ".config/nvim/init.lua": "",
            ".config/alacritty.yml": "",
            "a/z.txt": "",
        }
    )

    result = plan(repo, tmp_path / "home", linux_x86)

    assert [a.source.relative_to(repo).as_posix() for a in result.actions] == [
        ".config/alacritty.yml",
        ".config/nvim/init.lua",
        ".zshrc",
        "a/z.txt",
        "b.txt",
    ]


def test_plan_is_deterministic(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo({".vim/colors/x.vim": "", ".vimrc": "", ".gitconfig.unix.ini": "", ".a.darwin.b": ""})
    home = tmp_path / "home"

    first = plan(repo, home, linux_x86)
    second = plan(repo, home, linux_x86)

    assert first == second
    assert first.describe() == second.describe()


def test_directories_are_only_materialised_as_parents(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo({".vim/colors/x.vim": "colorscheme\n"})
    home = tmp_path / "home"

    result = plan(repo, home, linux_x86)

    assert len(result.actions) == 1
    action = result.actions[0]
    assert action.destination == home / ".vim" / "colors" / "x.vim"
    assert action.directories == (home / ".vim", home / ".vim" / "colors")


def test_invalid_flags_are_reported_and_planning_continues(
    make_repo, tmp_path: Path, linux_x86: SystemFeatures
) -> None:
    repo = make_repo({".tmux.linux.darwin.conf": "", ".zshrc": ""})

    result = plan(repo, tmp_path / "home", linux_x86)

    assert [a.source.name for a in result.actions] == [".zshrc"]
    assert len(result.errors) == 1
    assert result.errors[0].reason is SkipReason.INVALID_FLAGS
    assert "linux" in (result.errors[0].details or "")


def test_conflicting_destinations_raise(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo({".a.linux.txt": "flagged\n", ".a.os.txt": "literal\n"})

    with pytest.raises(ConflictError) as excinfo:
        plan(repo, tmp_path / "home", linux_x86)

    assert {path.name for path in excinfo.value.sources} == {".a.linux.txt", ".a.os.txt"}
    assert ".a.linux.txt" in str(excinfo.value)
    assert ".a.os.txt" in str(excinfo.value)


def test_lenient_plan_skips_conflicting_destinations(
    make_repo, tmp_path: Path, linux_x86: SystemFeatures
) -> None:
    repo = make_repo({".a.linux.txt": "", ".a.os.txt": "", ".bashrc": ""})
    home = tmp_path / "home"

    result = plan(repo, home, linux_x86, strict=False)

    assert [action.source.name for action in result.actions] == [".a.linux.txt", ".bashrc"]
    assert [(entry.relative_path.name, entry.reason) for entry in result.skipped] == [
        (".a.os.txt", SkipReason.CONFLICT)
    ]
    assert result.errors == ()


def test_git_metadata_is_ignored(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo({".git/config": "", ".git/HEAD": "", ".gitignore": "", ".gitconfig": ""})

    result = plan(repo, tmp_path / "home", linux_x86)

    assert [a.source.name for a in result.actions] == [".gitconfig"]


def test_symlinks_inside_repository_are_not_planned(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo({".bashrc": "", "shared/x": ""})
    (repo / ".profile").symlink_to(repo / ".bashrc")
    (repo / "linked-dir").symlink_to(repo / "shared", target_is_directory=True)

    result = plan(repo, tmp_path / "home", linux_x86)

    assert [a.source.relative_to(repo).as_posix() for a in result.actions] == [".bashrc", "shared/x"]


def test_missing_repository_raises_scan_error(tmp_path: Path, linux_x86: SystemFeatures) -> None:
    with pytest.raises(ScanError):
        plan(tmp_path / "missing", tmp_path / "home", linux_x86)


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="requires POSIX permissions as non-root")
def test_unreadable_subdirectory_raises_scan_error(make_repo, tmp_path: Path, linux_x86: SystemFeatures) -> None:
    repo = make_repo({"locked/file": ""})
    locked = repo / "locked"
    locked.chmod(0o000)
    try:
        with pytest.raises(ScanError):
            plan(repo, tmp_path / "home", linux_x86)
    finally:
        locked.chmod(0o755)
