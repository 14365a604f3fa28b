"""High level orchestration for dotty operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from . import executor, git, planner
from .cache import Cache, SyncFunc, UserCache
from .config import Settings
from .errors import DottyError, ScanError
from .features import SystemFeatures, disabled_features
from .filesystem import points_inside, symlink_points_to
from .models import ApplyReport, InfoEntry, InfoReport, LinkPlan, LinkState, UnlinkReport
from .source import SourceSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LinkReport:
    """A computed plan together with the result of applying it."""

    plan: LinkPlan
    applied: ApplyReport

    @property
    def ok(self) -> bool:
        return self.applied.ok and not self.plan.errors


class DottyManager:
    """Coordinates fetching, linking and unlinking for one user."""

    def __init__(
        self,
        settings: Settings,
        user: str | None = None,
        *,
        system: SystemFeatures | None = None,
        sync: SyncFunc = git.sync,
    ) -> None:
        self.settings = settings
        self.system = system or SystemFeatures.current()
        self.cache = Cache(settings.cache_root)
        self.user_cache: UserCache = self.cache.user(user or settings.default_user)
        self._sync = sync

    @property
    def user(self) -> str:
        return self.user_cache.username

    def setup(self, source: SourceSpec | str) -> LinkReport:
        """Fetch ``source`` and link it into the home directory."""

        self.grab(source)
        return self.link()

    def grab(self, source: SourceSpec | str) -> None:
        """Fetch ``source`` into the cache without linking anything."""

        spec = SourceSpec.parse(source) if isinstance(source, str) else source
        if self.user_cache.exists():
            current = self.user_cache.manifest()
            if current.url != spec.url and self.user_cache.dotfiles_path.is_dir():
                # Links into the old clone would dangle once it is replaced.
                self._release_links()
        self.user_cache.initialize(spec, self._sync)

    def plan(self, *, strict: bool = True) -> LinkPlan:
        self.user_cache.manifest()
        return planner.plan(self.user_cache.dotfiles_path, self.settings.home, self.system, strict=strict)

    def link(self) -> LinkReport:
        """Create (or refresh) every symlink for this system."""

        plan = self.plan()
        applied = executor.apply(plan)
        if applied.created_directories:
            self.user_cache.manifest().with_directories(added=applied.created_directories).save()
        logger.info(
            "Linked %d file(s) for user '%s' (%d skipped)",
            len(plan.actions) - len(applied.failures),
            self.user,
            len(plan.skipped),
        )
        return LinkReport(plan=plan, applied=applied)

    def update(self) -> LinkReport:
        """Pull the latest dotfiles and relink them."""

        self.user_cache.update(self._sync)
        return self.link()

    def unlink(self, *, strict: bool = True) -> UnlinkReport:
        """Remove the symlinks dotty created, leaving the cache in place.

        Only directories recorded as created by ``link`` are removed once empty.
        """

        manifest = self.user_cache.manifest()
        report = executor.unlink(self.plan(strict=strict), manifest.created_directories)
        gone = [directory for directory in manifest.created_directories if not directory.is_dir()]
        if gone:
            manifest.with_directories(removed=gone).save()
        logger.info("Removed %d link(s) for user '%s'", report.count, self.user)
        return report

    def forget(self) -> UnlinkReport:
        """Remove the symlinks and the cached repository."""

        if not self.user_cache.exists() and not self.user_cache.base_path.exists():
            raise DottyError(f"Nothing is cached for user '{self.user}'")

        report = UnlinkReport(removed=())
        if self.user_cache.exists() and self.user_cache.dotfiles_path.is_dir():
            report = self._release_links()
        self.user_cache.remove()
        return report

    def _release_links(self) -> UnlinkReport:
        # Used before the clone goes away; a broken repository must not keep
        # the user from replacing or deleting it.
        try:
            return self.unlink(strict=False)
        except ScanError as exc:
            logger.warning("Could not remove links for user '%s': %s", self.user, exc)
            return UnlinkReport(removed=())

    def info(self) -> InfoReport:
        manifest = self.user_cache.manifest()
        plan = self.plan()
        entries = tuple(
            InfoEntry(action=action, state=self._link_state(plan, action.source, action.destination))
            for action in plan.actions
        )
        return InfoReport(
            user=self.user,
            source=str(manifest.source),
            url=manifest.url,
            cache_path=self.user_cache.dotfiles_path,
            revision=git.head_revision(self.user_cache.dotfiles_path),
            entries=entries,
            skipped=plan.skipped,
            disabled_features=tuple(disabled_features(self.system)),
        )

    @staticmethod
    def _link_state(plan: LinkPlan, source: Path, destination: Path) -> LinkState:
        if symlink_points_to(destination, source):
            return LinkState.LINKED
        if points_inside(destination, plan.repo_root):
            return LinkState.STALE
        if destination.exists() or destination.is_symlink():
            return LinkState.OCCUPIED
        return LinkState.MISSING
