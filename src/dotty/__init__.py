"""Core package for the dotty project."""

from .cli import app, run
from .config import ConfigError, Settings, load_settings
from .errors import (
    ConflictError,
    DestinationOccupiedError,
    DottyError,
    GitError,
    NetworkError,
    ParseError,
    ScanError,
    SourceError,
)
from .features import FeatureCategory, FeatureToken, ParsedName, SystemFeatures, matches, parse_filename
from .manager import DottyManager, LinkReport
from .mapping import map_destination
from .models import (
    ApplyReport,
    LinkAction,
    LinkOutcome,
    LinkPlan,
    LinkState,
    SkippedEntry,
    SkipReason,
    UnlinkReport,
)
from .planner import plan
from .source import SourceSpec

__all__ = [
    "ApplyReport",
    "ConfigError",
    "ConflictError",
    "DestinationOccupiedError",
    "DottyError",
    "DottyManager",
    "FeatureCategory",
    "FeatureToken",
    "GitError",
    "LinkAction",
    "LinkOutcome",
    "LinkPlan",
    "LinkReport",
    "LinkState",
    "NetworkError",
    "ParseError",
    "ParsedName",
    "ScanError",
    "Settings",
    "SkipReason",
    "SkippedEntry",
    "SourceError",
    "SourceSpec",
    "SystemFeatures",
    "UnlinkReport",
    "app",
    "load_settings",
    "map_destination",
    "matches",
    "parse_filename",
    "plan",
    "run",
]
