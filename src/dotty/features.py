"""Platform feature flags encoded in dotfile names.

A dotfile may restrict itself to particular systems by carrying feature tokens
between the dots of its name, e.g. ``.tmux.linux.conf`` or
``.profile.darwin.arm.sh``. The first and last segments of a name are never
flags, so ``.bashrc`` and ``notes.linux`` are always unconditional.
"""

from __future__ import annotations

import os
import platform
import sys
from dataclasses import dataclass
from enum import Enum

from .errors import ParseError


class FeatureCategory(str, Enum):
    """Kinds of platform features a dotfile can depend on."""

    OS = "os"
    ARCH = "arch"
    FAMILY = "family"


OS_NAMES: tuple[str, ...] = (
    "linux",
    "darwin",
    "ios",
    "freebsd",
    "dragonfly",
    "netbsd",
    "openbsd",
    "solaris",
    "android",
)

ARCH_NAMES: tuple[str, ...] = (
    "x86",
    "x86_64",
    "arm",
    "aarch64",
    "mips",
    "mips64",
    "powerpc",
    "powerpc64",
    "riscv64",
    "s390x",
    "sparc64",
)

FAMILIES: tuple[str, ...] = (
    "unix",
    "windows",
)

FEATURE_TABLE: dict[str, FeatureCategory] = {
    **{name: FeatureCategory.OS for name in OS_NAMES},
    **{name: FeatureCategory.ARCH for name in ARCH_NAMES},
    **{name: FeatureCategory.FAMILY for name in FAMILIES},
}

_MACHINE_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "arm64": "aarch64",
    "armv6l": "arm",
    "armv7l": "arm",
    "armv8l": "arm",
    "ppc": "powerpc",
    "ppc64": "powerpc64",
    "ppc64le": "powerpc64",
    "mips64el": "mips64",
    "mipsel": "mips",
}


@dataclass(frozen=True, slots=True)
class FeatureToken:
    """A recognised flag and the segment index it was found at."""

    value: str
    category: FeatureCategory
    position: int


@dataclass(frozen=True, slots=True)
class ParsedName:
    """A filename split into dot segments plus its recognised flags."""

    segments: tuple[str, ...]
    tokens: tuple[FeatureToken, ...]

    @property
    def is_conditional(self) -> bool:
        return bool(self.tokens)


@dataclass(frozen=True, slots=True)
class SystemFeatures:
    """The feature values of one (real or synthetic) system."""

    os: str
    arch: str
    family: str

    @classmethod
    def current(cls) -> "SystemFeatures":
        """Detect the features of the running interpreter's system."""

        return cls(os=_detect_os(), arch=_detect_arch(), family=_detect_family())

    def value_for(self, category: FeatureCategory) -> str:
        return getattr(self, category.value)

    def enabled(self) -> frozenset[str]:
        return frozenset((self.os, self.arch, self.family))


def parse_filename(filename: str) -> ParsedName:
    """Split ``filename`` on dots and extract its feature tokens.

    Only interior segments are candidates, scanned left to right. Segments not
    in :data:`FEATURE_TABLE` are kept as literal name parts.

    Raises:
        ParseError: if two tokens of the same category are present.
    """

    segments = tuple(filename.split("."))
    tokens: list[FeatureToken] = []
    seen: dict[FeatureCategory, str] = {}

    for position in range(1, len(segments) - 1):
        segment = segments[position]
        category = FEATURE_TABLE.get(segment)
        if category is None:
            continue
        if category in seen:
            raise ParseError(filename, category.value, seen[category], segment)
        seen[category] = segment
        tokens.append(FeatureToken(value=segment, category=category, position=position))

    return ParsedName(segments=segments, tokens=tuple(tokens))


def matches(tokens: tuple[FeatureToken, ...] | list[FeatureToken], system: SystemFeatures) -> bool:
    """Return ``True`` when every token equals the system's value for its category."""

    return all(system.value_for(token.category) == token.value for token in tokens)


def disabled_features(system: SystemFeatures) -> list[str]:
    """Return every known token that ``system`` does not enable."""

    enabled = system.enabled()
    return [name for name in FEATURE_TABLE if name not in enabled]


def _detect_os() -> str:
    if sys.platform.startswith("linux"):
        # Android reports itself as linux through sys.platform on older interpreters.
        if hasattr(sys, "getandroidapilevel"):
            return "android"
        return "linux"
    if sys.platform.startswith("freebsd"):
        return "freebsd"
    if sys.platform.startswith("openbsd"):
        return "openbsd"
    if sys.platform.startswith("netbsd"):
        return "netbsd"
    if sys.platform.startswith("dragonfly"):
        return "dragonfly"
    if sys.platform.startswith("sunos"):
        return "solaris"
    if sys.platform == "win32":
        return "windows"
    return platform.system().lower() or sys.platform


def _detect_arch() -> str:
    machine = platform.machine().lower()
    return _MACHINE_ALIASES.get(machine, machine)


def _detect_family() -> str:
    return "windows" if os.name == "nt" else "unix"
