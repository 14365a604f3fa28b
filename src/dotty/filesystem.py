"""Filesystem helpers for dotty."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath
from typing import Iterator

# Directories never descended while looking for dotfiles.
IGNORED_DIRECTORIES = frozenset({".git"})

# Repository bookkeeping files that are not dotfiles. Git worktrees have `.git` files.
IGNORED_FILES = frozenset({".git", ".gitignore", ".gitmodules"})


def walk_files(root: Path) -> Iterator[tuple[Path, PurePosixPath]]:
    """Yield ``(absolute, relative)`` pairs for every regular file under ``root``.

    The walk is depth-first with the entries of each directory visited in
    lexicographic order, so repeated walks of an unchanged tree agree. Symlinks
    are neither followed nor yielded.

    Raises:
        OSError: if ``root`` or one of its subdirectories cannot be listed.
    """

    yield from _walk(root, PurePosixPath())


def _walk(directory: Path, relative: PurePosixPath) -> Iterator[tuple[Path, PurePosixPath]]:
    with os.scandir(directory) as handle:
        entries = sorted(handle, key=lambda item: item.name)

    for entry in entries:
        if entry.is_symlink():
            continue
        child = directory / entry.name
        child_relative = relative / entry.name
        if entry.is_dir(follow_symlinks=False):
            if entry.name in IGNORED_DIRECTORIES:
                continue
            yield from _walk(child, child_relative)
        elif entry.is_file(follow_symlinks=False):
            if entry.name in IGNORED_FILES:
                continue
            yield child, child_relative


def intermediate_directories(root: Path, destination: Path) -> tuple[Path, ...]:
    """Return the directories between ``root`` and ``destination``, shallowest first."""

    relative = destination.parent.relative_to(root)
    directories: list[Path] = []
    current = root
    for part in relative.parts:
        current = current / part
        directories.append(current)
    return tuple(directories)


def link_target(path: Path) -> Path:
    """Return the absolute, normalised target of the symlink at ``path``."""

    target = Path(os.readlink(path))
    if not target.is_absolute():
        target = path.parent / target
    return Path(os.path.normpath(target))


def symlink_points_to(source: Path, target: Path) -> bool:
    """Return ``True`` if ``source`` is a symlink that points at ``target``."""

    if not source.is_symlink():
        return False
    return link_target(source) == Path(os.path.normpath(target))


def points_inside(path: Path, root: Path) -> bool:
    """Return ``True`` if ``path`` is a symlink whose target lies inside ``root``."""

    if not path.is_symlink():
        return False
    target = link_target(path)
    candidates = {Path(os.path.normpath(root)), root.resolve(strict=False)}
    return any(target == base or target.is_relative_to(base) for base in candidates)


def replace_symlink(path: Path, target: Path) -> None:
    """Point the symlink at ``path`` at ``target``, replacing any existing link."""

    if path.is_symlink():
        path.unlink()
    path.symlink_to(target)


def describe_occupant(path: Path) -> str:
    """Describe what currently sits at ``path`` for error messages."""

    if path.is_symlink():
        return f"is a symlink to '{link_target(path)}' outside the dotfiles repository"
    if path.is_dir():
        return "is an existing directory"
    return "is an existing file"


def remove_empty_directories(directories: list[Path], *, stop_at: Path) -> tuple[list[Path], list[Path]]:
    """Remove each empty directory in ``directories``, deepest first.

    ``stop_at`` and anything outside it are never touched. Returns the removed
    and the non-empty directories.
    """

    removed: list[Path] = []
    kept: list[Path] = []
    ordered = sorted(set(directories), key=lambda item: (len(item.parts), item.as_posix()), reverse=True)

    for directory in ordered:
        if directory == stop_at or not directory.is_relative_to(stop_at):
            continue
        if directory.is_symlink() or not directory.is_dir():
            continue
        if any(directory.iterdir()):
            kept.append(directory)
            continue
        directory.rmdir()
        removed.append(directory)

    return removed, kept
