"""Shared models and enums for dotty."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from .errors import DestinationOccupiedError
from .features import ParsedName


@dataclass(frozen=True, slots=True)
class DotfileEntry:
    """A file discovered while walking the dotfiles repository."""

    source: Path
    relative_path: PurePosixPath
    parsed: ParsedName | None
    matched: bool


@dataclass(frozen=True, slots=True)
class LinkAction:
    """A symlink to create at ``destination`` pointing at ``source``."""

    source: Path
    destination: Path
    directories: tuple[Path, ...] = ()


class SkipReason(str, Enum):
    """Why a repository file was left out of a plan."""

    FEATURE_MISMATCH = "feature mismatch"
    INVALID_FLAGS = "invalid flags"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True)
class SkippedEntry:
    """A repository file that was not planned."""

    source: Path
    relative_path: PurePosixPath
    reason: SkipReason
    details: str | None = None


@dataclass(frozen=True, slots=True)
class LinkPlan:
    """Ordered link actions for one repository and home directory."""

    repo_root: Path
    home_root: Path
    actions: tuple[LinkAction, ...]
    skipped: tuple[SkippedEntry, ...] = ()

    @property
    def errors(self) -> tuple[SkippedEntry, ...]:
        return tuple(entry for entry in self.skipped if entry.reason is SkipReason.INVALID_FLAGS)

    def describe(self) -> str:
        """Render the plan as stable text, one line per entry."""

        lines = [f"link {action.source} -> {action.destination}" for action in self.actions]
        lines.extend(f"skip {entry.relative_path} ({entry.reason.value})" for entry in self.skipped)
        return "\n".join(lines)


class LinkOutcome(str, Enum):
    """Outcome of applying a single link action."""

    CREATED = "created"
    REPLACED = "replaced"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class LinkResult:
    """Result emitted for each applied action."""

    action: LinkAction
    outcome: LinkOutcome
    details: str | None = None


@dataclass(frozen=True, slots=True)
class ApplyReport:
    """Everything an ``apply`` run did, in plan order."""

    results: tuple[LinkResult, ...]
    created_directories: tuple[Path, ...] = ()
    failures: tuple[DestinationOccupiedError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    def count(self, outcome: LinkOutcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)


@dataclass(frozen=True, slots=True)
class UnlinkReport:
    """Symlinks and directories removed by an ``unlink`` run."""

    removed: tuple[Path, ...]
    removed_directories: tuple[Path, ...] = ()
    left_in_place: tuple[Path, ...] = ()

    @property
    def count(self) -> int:
        return len(self.removed)


class LinkState(str, Enum):
    """Current on-disk state of a planned destination."""

    LINKED = "linked"
    MISSING = "missing"
    STALE = "stale"
    OCCUPIED = "occupied"


@dataclass(frozen=True, slots=True)
class InfoEntry:
    """Status information for a planned link."""

    action: LinkAction
    state: LinkState


@dataclass(frozen=True, slots=True)
class InfoReport:
    """Summary of a user's cached dotfiles and their links."""

    user: str
    source: str
    url: str
    cache_path: Path
    revision: str | None
    entries: tuple[InfoEntry, ...] = ()
    skipped: tuple[SkippedEntry, ...] = ()
    disabled_features: tuple[str, ...] = ()
