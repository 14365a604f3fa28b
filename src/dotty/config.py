"""TOML configuration loading for dotty."""

from __future__ import annotations

import getpass
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIG_FILENAME = "dotty.toml"
CONFIG_ENV_VAR = "DOTTY_CONFIG"


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be parsed or validated."""


def default_config_path() -> Path:
    return Path.home() / ".dotty" / DEFAULT_CONFIG_FILENAME


def _expand_path(raw: str | os.PathLike[str] | Path, *, base_dir: Path) -> Path:
    """Return an absolute ``Path`` by expanding env vars and user segments."""

    text = str(raw)
    expanded = Path(os.path.expandvars(text)).expanduser()
    if expanded.is_absolute():
        return expanded.resolve(strict=False)
    return (base_dir / expanded).resolve(strict=False)


def _login_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "default"


class Settings(BaseModel):
    """Global configuration options."""

    model_config = ConfigDict(frozen=True)

    cache_root: Path = Field(default_factory=lambda: Path.home() / ".dotty" / "cache")
    home: Path = Field(default_factory=Path.home)
    default_user: str = Field(default_factory=_login_name)
    config_path: Path | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], *, base_dir: Path, config_path: Path | None = None) -> "Settings":
        values: dict[str, Any] = {"config_path": config_path}
        if "cache_root" in raw:
            values["cache_root"] = _expand_path(raw["cache_root"], base_dir=base_dir)
        if "home" in raw:
            values["home"] = _expand_path(raw["home"], base_dir=base_dir)
        if "default_user" in raw:
            user = str(raw["default_user"]).strip()
            if not user:
                raise ConfigError("'default_user' must not be empty")
            values["default_user"] = user
        return cls(**values)


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Optional path to the TOML file (or a directory containing
            ``dotty.toml``). Defaults to ``$DOTTY_CONFIG`` and then
            ``~/.dotty/dotty.toml``; a missing default file yields the
            built-in defaults.
    """

    if path is None:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        if env_value:
            path = Path(env_value).expanduser()
        else:
            path = default_config_path()
            if not path.exists():
                return Settings()

    config_path = _resolve_config_path(path)

    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration file '{config_path}' is not valid TOML: {exc}") from exc

    unknown = set(data) - {"settings"}
    if unknown:
        raise ConfigError(f"Unknown configuration section(s): {', '.join(sorted(unknown))}")

    return Settings.from_raw(data.get("settings", {}), base_dir=config_path.parent, config_path=config_path)


def _resolve_config_path(path: Path) -> Path:
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Configuration file '{path}' does not exist")
    if path.is_dir():
        candidate = path / DEFAULT_CONFIG_FILENAME
        if not candidate.exists():
            raise ConfigError(f"Expected to find '{DEFAULT_CONFIG_FILENAME}' inside '{path}', but none was located")
        path = candidate

    return path.resolve(strict=False)
