"""Custom exceptions for workdiff.

Every failure that stops a snapshot from being produced maps to one of the
types below. "File absent at HEAD" and "file absent on disk" are not errors;
they are reported through the snapshot's existence flags.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class SnapshotError(RuntimeError):
    """Base class for all snapshot errors."""

    cause: Optional[BaseException] = None


# Repository Errors
class RepositoryResolutionError(SnapshotError):
    """No usable repository found by any lookup tier."""

    def __init__(self, path: PathLike, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to open repository at '{self.path}'{detail}")


class InvalidPathError(RepositoryResolutionError):
    """Path cannot be expressed relative to the repository working directory."""

    def __init__(self, path: PathLike, reason: str):
        self.path = str(path)
        self.reason = reason
        self.cause = None
        SnapshotError.__init__(self, f"Invalid repository path '{self.path}': {reason}")


class HeadResolutionError(SnapshotError):
    """HEAD is missing, unborn, or does not peel to a commit."""

    def __init__(self, repo: PathLike, cause: Optional[BaseException] = None):
        self.repo = str(repo)
        self.cause = cause
        super().__init__(f"Failed to get HEAD commit in '{self.repo}': {cause}")


class TreeAccessError(SnapshotError):
    """The HEAD commit's tree object cannot be loaded."""

    def __init__(self, repo: PathLike, cause: Optional[BaseException] = None):
        self.repo = str(repo)
        self.cause = cause
        super().__init__(f"Failed to get HEAD tree in '{self.repo}': {cause}")


# Content Errors
class ObjectReadError(SnapshotError):
    """Tree entry is not a readable blob, or its bytes cannot be materialized."""

    def __init__(self, path: PathLike, reason: str, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.reason = reason
        self.cause = cause
        super().__init__(f"Failed to read '{self.path}' at HEAD: {reason}")


class WorkdirReadError(SnapshotError):
    """File exists on disk but could not be read."""

    def __init__(self, path: PathLike, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to read current file '{self.path}': {cause}")


# Configuration Errors
class ConfigError(SnapshotError):
    """Invalid workdiff configuration."""
    pass
