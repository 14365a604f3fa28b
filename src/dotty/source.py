"""Dotfiles source specifiers."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import SourceError

# The assumed name of a repository containing dotfiles.
DEFAULT_REPOSITORY_NAME = "dotfiles"

HOSTS: dict[str, str] = {
    "github": "https://github.com",
    "gitlab": "https://gitlab.com",
    "bitbucket": "https://bitbucket.org",
}


@dataclass(frozen=True, slots=True)
class SourceSpec:
    """Where a user's dotfiles come from.

    Either a hosted short form such as ``github:alice`` or
    ``github:alice/config``, or a literal clone URL (or local path).
    """

    host: str | None = None
    username: str | None = None
    repository: str | None = None
    raw_url: str | None = None

    @classmethod
    def parse(cls, text: str) -> "SourceSpec":
        value = text.strip()
        if not value:
            raise SourceError("Dotfiles source must not be empty")

        prefix, sep, rest = value.partition(":")
        if sep and prefix in HOSTS:
            username, slash, repository = rest.partition("/")
            if not username:
                raise SourceError(f"Source '{value}' is missing a username")
            if slash and not repository:
                raise SourceError(f"Source '{value}' is missing a repository name")
            if "/" in repository:
                raise SourceError(f"Source '{value}' must look like '{prefix}:<user>[/<repository>]'")
            return cls(host=prefix, username=username, repository=repository or None)

        return cls(raw_url=value)

    @property
    def url(self) -> str:
        """The canonical clone URL."""

        if self.host is None:
            return self.raw_url or ""
        repository = self.repository or DEFAULT_REPOSITORY_NAME
        return f"{HOSTS[self.host]}/{self.username}/{repository}.git"

    def __str__(self) -> str:
        if self.host is None:
            return self.raw_url or ""
        if self.repository:
            return f"{self.host}:{self.username}/{self.repository}"
        return f"{self.host}:{self.username}"
