"""Repository store package."""

from .base import RepositoryHandle, RepositoryStore
from .git import GitRepositoryStore
from .memory import MemoryRepositoryStore

__all__ = ["RepositoryHandle", "RepositoryStore", "GitRepositoryStore", "MemoryRepositoryStore"]
