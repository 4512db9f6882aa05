"""HEAD versus working-directory snapshots of single files."""

from .constants import WORKDIFF_VERSION as __version__
from .config import ResolverConfig, load_resolver_config
from .core import ChangeType, DecodeMode, FileSnapshot
from .errors import (
    ConfigError,
    HeadResolutionError,
    InvalidPathError,
    ObjectReadError,
    RepositoryResolutionError,
    SnapshotError,
    TreeAccessError,
    WorkdirReadError,
)
from .resolver import FileSnapshotResolver, resolve_file_snapshot

__all__ = [
    "ChangeType",
    "ConfigError",
    "DecodeMode",
    "FileSnapshot",
    "FileSnapshotResolver",
    "HeadResolutionError",
    "InvalidPathError",
    "ObjectReadError",
    "RepositoryResolutionError",
    "ResolverConfig",
    "SnapshotError",
    "TreeAccessError",
    "WorkdirReadError",
    "load_resolver_config",
    "resolve_file_snapshot",
]
