"""Base protocols for repository store implementations."""

from pathlib import Path, PurePosixPath
from typing import Any, Optional, Protocol


class RepositoryHandle(Protocol):
    """
    An open repository, owned by exactly one resolver call.

    Handles are context managers; leaving the block releases any
    resources held by the underlying library.
    """

    @property
    def workdir(self) -> Optional[Path]:
        """Working directory root, or None for a bare repository."""
        ...

    def head_tree(self) -> Any:
        """
        Resolve HEAD to a commit and load that commit's tree.

        Returns:
            Opaque tree object accepted by read_blob

        Raises:
            HeadResolutionError: If HEAD is unborn or not a commit
            TreeAccessError: If the commit's tree cannot be loaded
        """
        ...

    def read_blob(self, tree: Any, rel_path: PurePosixPath) -> Optional[bytes]:
        """
        Read the bytes of the blob at rel_path in tree.

        Args:
            tree: Tree returned by head_tree
            rel_path: Normalized repository-relative path

        Returns:
            Blob bytes, or None if no entry exists at rel_path

        Raises:
            ObjectReadError: If the entry is not a blob or cannot be read
        """
        ...

    def close(self) -> None:
        """Release the handle."""
        ...

    def __enter__(self) -> "RepositoryHandle":
        ...

    def __exit__(self, *exc_info) -> None:
        ...


class RepositoryStore(Protocol):
    """
    Protocol for locating and opening repositories.

    Both operations return a fresh handle on every call; stores keep no
    open handles between calls.
    """

    def discover(self, start: Path) -> RepositoryHandle:
        """
        Open the nearest repository enclosing start, searching upward.

        Raises:
            RepositoryResolutionError: If no repository is found
        """
        ...

    def open(self, path: Path) -> RepositoryHandle:
        """
        Open the repository rooted exactly at path (no upward search).

        Raises:
            RepositoryResolutionError: If path is not a repository
        """
        ...
