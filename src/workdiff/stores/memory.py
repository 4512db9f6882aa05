"""In-memory repository store for testing and embedding."""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Optional, Union

from ..errors import (
    HeadResolutionError,
    ObjectReadError,
    RepositoryResolutionError,
    TreeAccessError,
)


@dataclass(frozen=True)
class Gitlink:
    """Submodule entry pointing at a commit in another repository."""

    commit: str = "0" * 40


@dataclass(frozen=True)
class UnreadableBlob:
    """Blob entry whose bytes cannot be materialized."""

    reason: str = "object missing from store"


Entry = Union[bytes, Gitlink, UnreadableBlob]


@dataclass
class MemoryRepository:
    """
    A repository whose HEAD tree is a flat mapping of POSIX paths to entries.

    Directories are implied by the paths. ``head`` is None for a repository
    with no commits (unborn HEAD).
    """

    location: Path
    head: Optional[Dict[str, Entry]] = field(default_factory=dict)
    bare: bool = False
    corrupt_tree: bool = False

    def commit(self, files: Dict[str, Union[str, Entry]]) -> None:
        """Replace the HEAD tree with files (str content is UTF-8 encoded)."""
        self.head = {
            path: content.encode("utf-8") if isinstance(content, str) else content
            for path, content in files.items()
        }


class MemoryRepositoryHandle:
    """Handle onto a MemoryRepository, counted by its store while open."""

    def __init__(self, store: "MemoryRepositoryStore", repo: MemoryRepository):
        self._store = store
        self._repo = repo
        self._closed = False
        store.open_handles += 1

    @property
    def workdir(self) -> Optional[Path]:
        return None if self._repo.bare else self._repo.location

    def head_tree(self) -> Dict[str, Entry]:
        if self._repo.head is None:
            cause = ValueError("reference 'refs/heads/main' does not exist")
            raise HeadResolutionError(self._repo.location, cause) from cause
        if self._repo.corrupt_tree:
            cause = ValueError("tree object is corrupt")
            raise TreeAccessError(self._repo.location, cause) from cause
        return dict(self._repo.head)

    def read_blob(self, tree: Dict[str, Entry], rel_path: PurePosixPath) -> Optional[bytes]:
        path = rel_path.as_posix()
        if path in tree:
            entry = tree[path]
            if isinstance(entry, Gitlink):
                raise ObjectReadError(path, "entry is a submodule, not a blob")
            if isinstance(entry, UnreadableBlob):
                cause = OSError(entry.reason)
                raise ObjectReadError(path, "blob content could not be read", cause) from cause
            return entry
        if any(key.startswith(path + "/") for key in tree):
            raise ObjectReadError(path, "entry is a tree, not a blob")
        return None

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._store.open_handles -= 1

    def __enter__(self) -> "MemoryRepositoryHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class MemoryRepositoryStore:
    """
    Repository store holding repositories in memory, keyed by location.

    Discovery walks lexically from the start path upward, matching the
    nearest registered location.
    """

    def __init__(self):
        self.repositories: Dict[Path, MemoryRepository] = {}
        self.open_handles = 0

    def add_repository(
        self,
        location: Union[str, Path],
        files: Optional[Dict[str, Union[str, Entry]]] = None,
        *,
        unborn: bool = False,
        bare: bool = False,
        corrupt_tree: bool = False,
    ) -> MemoryRepository:
        """Register a repository at location with files committed at HEAD."""
        repo = MemoryRepository(location=Path(location), bare=bare, corrupt_tree=corrupt_tree)
        if unborn:
            repo.head = None
        else:
            repo.commit(files or {})
        self.repositories[repo.location] = repo
        return repo

    def discover(self, start: Path) -> MemoryRepositoryHandle:
        start = Path(start)
        for candidate in (start, *start.parents):
            repo = self.repositories.get(candidate)
            if repo is not None:
                return MemoryRepositoryHandle(self, repo)
        cause = LookupError("could not find repository")
        raise RepositoryResolutionError(start, cause) from cause

    def open(self, path: Path) -> MemoryRepositoryHandle:
        repo = self.repositories.get(Path(path))
        if repo is None:
            cause = LookupError("not a repository")
            raise RepositoryResolutionError(path, cause) from cause
        return MemoryRepositoryHandle(self, repo)
