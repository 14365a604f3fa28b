"""Mapping of repository paths to home directory paths."""

from __future__ import annotations

from pathlib import PurePath, PurePosixPath

from .features import ParsedName, SystemFeatures, matches, parse_filename


def map_filename(parsed: ParsedName) -> str:
    """Rebuild a filename with each flag replaced by its category name."""

    segments = list(parsed.segments)
    for token in parsed.tokens:
        segments[token.position] = token.category.value
    return ".".join(segments)


def map_destination(relative_path: PurePath | str, system: SystemFeatures) -> PurePosixPath:
    """Return the home-relative path for a repository-relative ``relative_path``.

    Directory components pass through untouched; only the final name has its
    flags substituted. The mapping is only defined for paths whose flags match
    ``system``.

    Raises:
        ParseError: if the filename carries duplicate flags.
        ValueError: if the flags do not match ``system``.
    """

    path = PurePosixPath(PurePath(relative_path).as_posix())
    if not path.name:
        raise ValueError(f"'{relative_path}' has no filename to map")

    parsed = parse_filename(path.name)
    if not matches(parsed.tokens, system):
        raise ValueError(f"'{relative_path}' does not apply to this system")

    return path.with_name(map_filename(parsed))
