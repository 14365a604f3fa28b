"""Per-user manifest persistence for dotty."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable

from tomli_w import dump as toml_dump

from .errors import DottyError
from .source import SourceSpec


@dataclass(frozen=True, slots=True)
class Manifest:
    """Records where a user's cached dotfiles were fetched from.

    Links themselves are not recorded; they are recomputed from the repository
    whenever they are needed. The directories ``link`` had to create in the
    home directory are kept so that ``unlink`` removes only those.
    """

    path: Path
    source: SourceSpec
    created_directories: tuple[Path, ...] = ()

    @property
    def url(self) -> str:
        return self.source.url

    @classmethod
    def load(cls, path: Path) -> "Manifest":
        try:
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        except FileNotFoundError as exc:
            raise DottyError(f"Manifest '{path}' does not exist") from exc
        except tomllib.TOMLDecodeError as exc:
            raise DottyError(f"Manifest '{path}' is not valid TOML: {exc}") from exc

        source_section = data.get("source") or {}
        spec = source_section.get("spec")
        if not spec:
            raise DottyError(f"Manifest '{path}' does not record a dotfiles source")

        directories = (data.get("links") or {}).get("created_directories", [])
        if not isinstance(directories, list):
            raise DottyError(f"Manifest '{path}' has an invalid 'links.created_directories' entry")

        return cls(
            path=path,
            source=SourceSpec.parse(spec),
            created_directories=tuple(Path(item) for item in directories),
        )

    def with_directories(self, added: Iterable[Path] = (), removed: Iterable[Path] = ()) -> "Manifest":
        gone = set(removed)
        directories = [item for item in self.created_directories if item not in gone]
        directories.extend(item for item in added if item not in directories)
        return replace(self, created_directories=tuple(directories))

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload: dict[str, dict] = {
            "source": {
                "spec": str(self.source),
                "url": self.source.url,
            }
        }
        if self.created_directories:
            payload["links"] = {"created_directories": [str(item) for item in self.created_directories]}
        with self.path.open("wb") as handle:
            toml_dump(payload, handle)
