"""GitPython repository store."""

import logging
import os
from pathlib import Path, PurePosixPath
from typing import List, Optional

import git
from git.exc import GitError
from gitdb.exc import ODBError

from ..errors import (
    HeadResolutionError,
    ObjectReadError,
    RepositoryResolutionError,
    TreeAccessError,
)

logger = logging.getLogger(__name__)


def _ceiling_dirs() -> List[Path]:
    """Directories upward discovery must not climb into (GIT_CEILING_DIRECTORIES)."""
    value = os.environ.get("GIT_CEILING_DIRECTORIES", "")
    return [Path(p) for p in value.split(os.pathsep) if p and os.path.isabs(p)]


def _crosses_ceiling(start: Path, root: Path) -> bool:
    """Check if a repository found from start lies at or above a ceiling directory."""
    start = start.resolve()
    root = root.resolve()
    for ceiling in _ceiling_dirs():
        ceiling = ceiling.resolve()
        if ceiling in start.parents and (root == ceiling or root in ceiling.parents):
            return True
    return False


class GitRepositoryHandle:
    """Open GitPython repository."""

    def __init__(self, repo: git.Repo):
        self._repo = repo

    @property
    def workdir(self) -> Optional[Path]:
        if self._repo.working_tree_dir is None:
            return None
        return Path(self._repo.working_tree_dir)

    @property
    def location(self) -> str:
        """Working directory, or git dir for a bare repository."""
        return self._repo.working_tree_dir or self._repo.git_dir

    def head_tree(self) -> git.Tree:
        try:
            commit = self._repo.head.commit
        except (ValueError, TypeError, GitError, ODBError) as e:
            raise HeadResolutionError(self.location, e) from e

        try:
            tree = commit.tree
            # Trees load lazily; force the object read here
            len(tree)
        except (ValueError, IndexError, GitError, ODBError, OSError) as e:
            raise TreeAccessError(self.location, e) from e
        return tree

    def read_blob(self, tree: git.Tree, rel_path: PurePosixPath) -> Optional[bytes]:
        path = rel_path.as_posix()
        try:
            entry = tree / path
        except KeyError:
            return None
        except (ValueError, IndexError, GitError, ODBError, OSError) as e:
            raise ObjectReadError(path, "tree entry could not be resolved", e) from e

        if entry.type != "blob":
            raise ObjectReadError(path, f"entry is a {entry.type}, not a blob")

        try:
            return entry.data_stream.read()
        except (ValueError, GitError, ODBError, OSError) as e:
            raise ObjectReadError(path, "blob content could not be read", e) from e

    def close(self) -> None:
        self._repo.close()

    def __enter__(self) -> "GitRepositoryHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class GitRepositoryStore:
    """
    Repository store backed by GitPython.

    Every call opens a new git.Repo; nothing is cached between calls.
    """

    def discover(self, start: Path) -> GitRepositoryHandle:
        try:
            repo = git.Repo(start, search_parent_directories=True)
        except (GitError, OSError, ValueError) as e:
            raise RepositoryResolutionError(start, e) from e

        root = Path(repo.working_tree_dir or repo.git_dir)
        if _crosses_ceiling(Path(start), root):
            repo.close()
            raise RepositoryResolutionError(
                start, GitError(f"repository at {root} is above GIT_CEILING_DIRECTORIES")
            )

        logger.debug("Discovered repository at %s from %s", root, start)
        return GitRepositoryHandle(repo)

    def open(self, path: Path) -> GitRepositoryHandle:
        try:
            repo = git.Repo(path)
        except (GitError, OSError, ValueError) as e:
            raise RepositoryResolutionError(path, e) from e
        return GitRepositoryHandle(repo)
