"""Cache directory layout for dotty.

::

    <cache root>/
        users/
            <user>/
                manifest.toml   recorded source and created directories
                dotfiles/       the synced repository
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable

from .errors import DottyError
from .manifest import Manifest
from .source import SourceSpec

logger = logging.getLogger(__name__)

SyncFunc = Callable[[str, Path], None]

MANIFEST_FILENAME = "manifest.toml"
DOTFILES_DIRNAME = "dotfiles"


class Cache:
    """The root cache directory shared by every managed user."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def user(self, username: str) -> "UserCache":
        return UserCache(self, username)


class UserCache:
    """Cache for a particular user."""

    def __init__(self, cache: Cache, username: str) -> None:
        if not username or username in {".", ".."} or "/" in username or "\\" in username:
            raise DottyError(f"Invalid user name '{username}'")
        self.cache = cache
        self.username = username

    @property
    def base_path(self) -> Path:
        return self.cache.path / "users" / self.username

    @property
    def manifest_path(self) -> Path:
        return self.base_path / MANIFEST_FILENAME

    @property
    def dotfiles_path(self) -> Path:
        return self.base_path / DOTFILES_DIRNAME

    def exists(self) -> bool:
        return self.manifest_path.exists()

    def manifest(self) -> Manifest:
        if not self.exists():
            raise DottyError(
                f"No dotfiles have been set up for user '{self.username}'. Run 'dotty setup <source>' first."
            )
        return Manifest.load(self.manifest_path)

    def initialize(self, source: SourceSpec, sync: SyncFunc) -> Manifest:
        """Fetch ``source`` into the cache and record it.

        The manifest is only written once the sync succeeded, so a failed
        fetch leaves any previous setup untouched.
        """

        previous = Manifest.load(self.manifest_path) if self.exists() else None
        if previous is not None and previous.url != source.url and self.dotfiles_path.exists():
            logger.info("Source changed from '%s' to '%s'; replacing cached clone", previous.source, source)
            shutil.rmtree(self.dotfiles_path)

        sync(source.url, self.dotfiles_path)

        manifest = Manifest(
            path=self.manifest_path,
            source=source,
            created_directories=previous.created_directories if previous is not None else (),
        )
        manifest.save()
        return manifest

    def update(self, sync: SyncFunc) -> Manifest:
        manifest = self.manifest()
        logger.info("Updating dotfiles from %s", manifest.source)
        sync(manifest.url, self.dotfiles_path)
        return manifest

    def remove(self) -> None:
        if self.base_path.exists():
            shutil.rmtree(self.base_path)
            logger.info("Removed cache for user '%s'", self.username)
