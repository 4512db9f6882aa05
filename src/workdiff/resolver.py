"""Resolve a file's HEAD and working-directory content.

Resolution order for the repository:

1. If the file exists on disk, discover the nearest repository upward from
   its parent directory and express the file relative to that repository's
   working directory. This picks up nested repositories and files outside
   the project.
2. If discovery fails, open the project directory itself as a repository
   and use the file path literally.
3. If the file does not exist on disk, go straight to step 2.

HEAD is then peeled to its tree, the relative path is looked up, and the
file is read from disk. Only "no tree entry at this path" and "no file on
disk" are absorbed into the snapshot's flags; everything else is raised.
"""

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple, Union

from .config import ResolverConfig
from .core import FileSnapshot, decode_bytes
from .errors import (
    ObjectReadError,
    RepositoryResolutionError,
    WorkdirReadError,
)
from .paths import normalize_repo_path, resolve_actual_path, strip_workdir
from .stores.base import RepositoryHandle, RepositoryStore
from .stores.git import GitRepositoryStore

logger = logging.getLogger(__name__)

PathArg = Union[str, Path]


@dataclass
class ResolvedLocation:
    """Where a file's committed content is looked up."""

    handle: RepositoryHandle
    rel_path: Optional[PurePosixPath]  # None: outside the working directory
    actual_path: Path
    tier: str  # "discovered" | "project-fallback" | "project-direct"


class FileSnapshotResolver:
    """Produces FileSnapshots from a repository store and the filesystem."""

    def __init__(
        self,
        store: Optional[RepositoryStore] = None,
        config: Optional[ResolverConfig] = None,
    ):
        """
        Args:
            store: Repository store (defaults to GitRepositoryStore)
            config: Decoding configuration (defaults to ResolverConfig())
        """
        self.store = store or GitRepositoryStore()
        self.config = config or ResolverConfig()

    def resolve(self, project_path: PathArg, file_path: PathArg) -> FileSnapshot:
        """
        Get the HEAD and working-directory content of a file.

        Args:
            project_path: Project root, used as fallback repository and as
                the base for a relative file_path
            file_path: Absolute path, or path relative to project_path

        Returns:
            FileSnapshot for the file

        Raises:
            RepositoryResolutionError: No repository found by any tier
            InvalidPathError: Lookup path escapes the repository
            HeadResolutionError: HEAD is unborn or not a commit
            TreeAccessError: HEAD tree cannot be loaded
            ObjectReadError: Entry is not a readable blob
            WorkdirReadError: File exists on disk but cannot be read
        """
        project_path = Path(project_path)
        with ExitStack() as stack:
            location = self._locate(project_path, file_path, stack)
            logger.debug(
                "Resolved %s via %s: repository %s, path %s",
                file_path, location.tier, location.handle.workdir, location.rel_path,
            )
            original, exists_at_head = self._read_head(location)

        current, exists_in_workdir = self._read_workdir(location.actual_path)

        return FileSnapshot(
            original=original,
            current=current,
            exists_at_head=exists_at_head,
            exists_in_workdir=exists_in_workdir,
        )

    def _locate(self, project_path: Path, file_path: PathArg, stack: ExitStack) -> ResolvedLocation:
        """Pick the repository and relative path for the tree lookup."""
        actual_path = resolve_actual_path(project_path, file_path)

        if actual_path.exists():
            start = actual_path.parent
            try:
                handle = stack.enter_context(self.store.discover(start))
            except RepositoryResolutionError as e:
                logger.debug("No repository above %s (%s), falling back to %s", start, e, project_path)
            else:
                workdir = handle.workdir
                if workdir is None:
                    raise RepositoryResolutionError(start, ValueError("Repository has no working directory"))
                stripped = strip_workdir(actual_path, workdir)
                rel_path = normalize_repo_path(stripped if stripped is not None else file_path, workdir)
                return ResolvedLocation(handle, rel_path, actual_path, "discovered")
            tier = "project-fallback"
        else:
            tier = "project-direct"

        handle = stack.enter_context(self.store.open(project_path))
        rel_path = normalize_repo_path(file_path, handle.workdir)
        return ResolvedLocation(handle, rel_path, actual_path, tier)

    def _read_head(self, location: ResolvedLocation) -> Tuple[str, bool]:
        """Read the file's content from the HEAD tree."""
        tree = location.handle.head_tree()
        if location.rel_path is None:
            return "", False

        data = location.handle.read_blob(tree, location.rel_path)
        if data is None:
            # New file, not yet committed
            return "", False

        try:
            text = decode_bytes(data, self.config.head_decoding, self.config.encoding)
        except UnicodeDecodeError as e:
            raise ObjectReadError(location.rel_path, "content is not valid text", e) from e
        return text, True

    def _read_workdir(self, actual_path: Path) -> Tuple[str, bool]:
        """Read the file's current content from disk."""
        if not actual_path.exists():
            # Deleted, or never created
            return "", False

        try:
            data = actual_path.read_bytes()
            text = decode_bytes(data, self.config.workdir_decoding, self.config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise WorkdirReadError(actual_path, e) from e
        return text, True


def resolve_file_snapshot(
    project_path: PathArg,
    file_path: PathArg,
    *,
    store: Optional[RepositoryStore] = None,
    config: Optional[ResolverConfig] = None,
) -> FileSnapshot:
    """Get the HEAD and working-directory content of one file.

    See FileSnapshotResolver.resolve for arguments and errors.
    """
    return FileSnapshotResolver(store=store, config=config).resolve(project_path, file_path)
