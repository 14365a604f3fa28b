"""Application and removal of planned symlinks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .errors import DestinationOccupiedError
from .filesystem import (
    describe_occupant,
    points_inside,
    remove_empty_directories,
    replace_symlink,
    symlink_points_to,
)
from .models import ApplyReport, LinkAction, LinkOutcome, LinkPlan, LinkResult, UnlinkReport

logger = logging.getLogger(__name__)


def apply(plan: LinkPlan) -> ApplyReport:
    """Create every symlink in ``plan``.

    An occupied destination fails only its own action; the failure is collected
    and the remaining actions still run.
    """

    results: list[LinkResult] = []
    created_directories: list[Path] = []
    failures: list[DestinationOccupiedError] = []

    for action in plan.actions:
        try:
            created_directories.extend(_ensure_directories(action))
            outcome = _link(action, plan.repo_root)
        except DestinationOccupiedError as exc:
            logger.warning("%s", exc)
            failures.append(exc)
            results.append(LinkResult(action=action, outcome=LinkOutcome.FAILED, details=exc.reason))
            continue
        results.append(LinkResult(action=action, outcome=outcome))

    return ApplyReport(
        results=tuple(results),
        created_directories=tuple(created_directories),
        failures=tuple(failures),
    )


def unlink(plan: LinkPlan, created_directories: Iterable[Path] = ()) -> UnlinkReport:
    """Remove the symlinks of ``plan`` that point into its repository.

    Anything else found at a destination is left alone. Of the parents of the
    removed links, only those listed in ``created_directories`` (the ones an
    earlier ``apply`` made) are deleted once empty, deepest first.
    """

    created = set(created_directories)
    removed: list[Path] = []
    parents: list[Path] = []

    for action in plan.actions:
        destination = action.destination
        if not points_inside(destination, plan.repo_root):
            continue
        destination.unlink()
        logger.debug("Removed %s", destination)
        removed.append(destination)
        parents.extend(directory for directory in action.directories if directory in created)

    removed_directories, kept = remove_empty_directories(parents, stop_at=plan.home_root)
    return UnlinkReport(
        removed=tuple(removed),
        removed_directories=tuple(removed_directories),
        left_in_place=tuple(kept),
    )


def _ensure_directories(action: LinkAction) -> list[Path]:
    created: list[Path] = []
    for directory in action.directories:
        if directory.is_dir():
            continue
        if directory.exists() or directory.is_symlink():
            raise DestinationOccupiedError(
                action.destination, f"cannot be created because '{directory}' is not a directory"
            )
        directory.mkdir(exist_ok=True)
        logger.debug("Created directory %s", directory)
        created.append(directory)
    return created


def _link(action: LinkAction, repo_root: Path) -> LinkOutcome:
    destination = action.destination

    if symlink_points_to(destination, action.source):
        return LinkOutcome.UNCHANGED

    if destination.is_symlink():
        if not points_inside(destination, repo_root):
            raise DestinationOccupiedError(destination, describe_occupant(destination))
        replace_symlink(destination, action.source)
        logger.debug("Replaced %s -> %s", destination, action.source)
        return LinkOutcome.REPLACED

    if destination.exists():
        raise DestinationOccupiedError(destination, describe_occupant(destination))

    destination.symlink_to(action.source)
    logger.debug("Linked %s -> %s", destination, action.source)
    return LinkOutcome.CREATED
