"""Exception taxonomy for dotty."""

from __future__ import annotations

from pathlib import Path


class DottyError(RuntimeError):
    """Raised when dotty encounters an unrecoverable state."""


class ScanError(DottyError):
    """Raised when the dotfiles repository cannot be walked."""


class ParseError(DottyError):
    """Raised when a filename carries two feature flags of the same category."""

    def __init__(self, filename: str, category: str, first: str, second: str) -> None:
        super().__init__(
            f"'{filename}' has more than one '{category}' flag ('{first}' and '{second}')"
        )
        self.filename = filename
        self.category = category
        self.tokens = (first, second)


class ConflictError(DottyError):
    """Raised when two repository files map to the same home destination."""

    def __init__(self, destination: Path, first: Path, second: Path) -> None:
        super().__init__(f"'{first}' and '{second}' both map to '{destination}'")
        self.destination = destination
        self.sources = (first, second)


class DestinationOccupiedError(DottyError):
    """Raised when a link destination holds something dotty does not manage."""

    def __init__(self, destination: Path, reason: str) -> None:
        super().__init__(f"'{destination}' {reason}")
        self.destination = destination
        self.reason = reason


class SourceError(DottyError, ValueError):
    """Raised when a dotfiles source specifier cannot be understood."""


class SyncError(DottyError):
    """Base class for repository synchronisation failures."""


class GitError(SyncError):
    """Raised when git fails for a reason other than connectivity."""


class NetworkError(SyncError):
    """Raised when the remote repository cannot be reached."""
