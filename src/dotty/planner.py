"""Planning of the symlinks a dotfiles repository calls for."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ConflictError, ParseError, ScanError
from .features import SystemFeatures, matches, parse_filename
from .filesystem import intermediate_directories, walk_files
from .mapping import map_destination
from .models import DotfileEntry, LinkAction, LinkPlan, SkippedEntry, SkipReason

logger = logging.getLogger(__name__)


def discover(repo_root: Path, system: SystemFeatures) -> list[tuple[DotfileEntry, ParseError | None]]:
    """Walk ``repo_root`` and classify every file against ``system``.

    Raises:
        ScanError: if the repository cannot be read.
    """

    if not repo_root.is_dir():
        raise ScanError(f"Dotfiles repository '{repo_root}' does not exist or is not a directory")

    discovered: list[tuple[DotfileEntry, ParseError | None]] = []
    try:
        for source, relative in walk_files(repo_root):
            try:
                parsed = parse_filename(relative.name)
            except ParseError as exc:
                entry = DotfileEntry(source=source, relative_path=relative, parsed=None, matched=False)
                discovered.append((entry, exc))
                continue
            entry = DotfileEntry(
                source=source,
                relative_path=relative,
                parsed=parsed,
                matched=matches(parsed.tokens, system),
            )
            discovered.append((entry, None))
    except OSError as exc:
        raise ScanError(f"Unable to read dotfiles repository '{repo_root}': {exc}") from exc

    return discovered


def plan(repo_root: Path, home_root: Path, system: SystemFeatures, *, strict: bool = True) -> LinkPlan:
    """Build the ordered link plan for ``repo_root`` into ``home_root``.

    With ``strict=False`` a file whose destination is already claimed is
    skipped with a warning instead of failing the whole plan; removing links
    still works on such a repository.

    Raises:
        ScanError: if the repository cannot be read.
        ConflictError: if two files map to the same destination and ``strict``
            is set.
    """

    repo_root = Path(repo_root).absolute()
    home_root = Path(home_root).absolute()

    actions: list[LinkAction] = []
    skipped: list[SkippedEntry] = []
    claimed: dict[Path, Path] = {}

    for entry, error in discover(repo_root, system):
        if error is not None:
            logger.warning("Skipping '%s': %s", entry.relative_path, error)
            skipped.append(
                SkippedEntry(
                    source=entry.source,
                    relative_path=entry.relative_path,
                    reason=SkipReason.INVALID_FLAGS,
                    details=str(error),
                )
            )
            continue

        if not entry.matched:
            logger.debug("Skipping '%s': not supported by this system", entry.relative_path)
            skipped.append(
                SkippedEntry(
                    source=entry.source,
                    relative_path=entry.relative_path,
                    reason=SkipReason.FEATURE_MISMATCH,
                )
            )
            continue

        destination = home_root.joinpath(*map_destination(entry.relative_path, system).parts)

        if destination in claimed:
            conflict = ConflictError(destination, claimed[destination], entry.source)
            if strict:
                raise conflict
            logger.warning("Skipping '%s': %s", entry.relative_path, conflict)
            skipped.append(
                SkippedEntry(
                    source=entry.source,
                    relative_path=entry.relative_path,
                    reason=SkipReason.CONFLICT,
                    details=str(conflict),
                )
            )
            continue
        claimed[destination] = entry.source

        actions.append(
            LinkAction(
                source=entry.source,
                destination=destination,
                directories=intermediate_directories(home_root, destination),
            )
        )

    return LinkPlan(
        repo_root=repo_root,
        home_root=home_root,
        actions=tuple(actions),
        skipped=tuple(skipped),
    )
