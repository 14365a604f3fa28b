"""Repository synchronisation through the ``git`` binary."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .errors import GitError, NetworkError

logger = logging.getLogger(__name__)

# Fragments of git's stderr that indicate the remote could not be reached.
NETWORK_MARKERS = (
    "could not resolve host",
    "could not resolve hostname",
    "unable to access",
    "connection refused",
    "connection timed out",
    "network is unreachable",
    "operation timed out",
    "could not read from remote repository",
    "failed to connect",
)


def is_repository(path: Path) -> bool:
    return (path / ".git").exists()


def sync(url: str, destination: Path) -> None:
    """Clone ``url`` into ``destination``, or pull if it is already a clone.

    Raises:
        NetworkError: if the remote cannot be reached.
        GitError: for any other git failure, including a missing ``git``.
    """

    if is_repository(destination):
        logger.info("Pulling latest dotfiles into '%s'", destination)
        _run(["git", "-C", str(destination), "pull", "--ff-only"], action=f"update '{destination}'")
        return

    if destination.exists():
        shutil.rmtree(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Cloning '%s' into '%s'", url, destination)
    _run(["git", "clone", url, str(destination)], action=f"clone '{url}'")
    logger.info("Successfully cloned '%s'", url)


def head_revision(path: Path) -> str | None:
    """Return the abbreviated HEAD commit of the clone at ``path``."""

    if not is_repository(path):
        return None
    output = _run(["git", "-C", str(path), "rev-parse", "--short", "HEAD"], action="read HEAD")
    return output.strip() or None


def _run(args: list[str], *, action: str) -> str:
    logger.debug("Running %s", " ".join(args))
    try:
        result = subprocess.run(args, capture_output=True, text=True, check=True)
    except FileNotFoundError as exc:
        raise GitError("`git` command not found. Please install Git.") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        lowered = stderr.lower()
        if any(marker in lowered for marker in NETWORK_MARKERS):
            raise NetworkError(f"Failed to {action}: {stderr}") from exc
        raise GitError(f"Failed to {action}: {stderr or f'git exited with status {exc.returncode}'}") from exc
    return result.stdout
