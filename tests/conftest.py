"""Shared test fixtures and utilities."""

from pathlib import Path
from typing import Dict, Optional

import git
import pytest

from workdiff.constants import ENV_ENCODING, ENV_HEAD_DECODING, ENV_WORKDIR_DECODING
from workdiff.stores.memory import MemoryRepositoryStore


TEST_ACTOR = git.Actor("Test User", "test@example.com")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep discovery inside tmp_path and clear WORKDIFF_* overrides."""
    # Repositories above tmp_path (e.g. a checkout containing /tmp) must not be found
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    for var in (ENV_HEAD_DECODING, ENV_WORKDIR_DECODING, ENV_ENCODING):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content="test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content)
        return file_path
    return _write


def _commit_files(repo: git.Repo, files: Dict[str, object], message: str = "commit") -> git.Commit:
    """Write files into the repo's working tree, stage them and commit."""
    root = Path(repo.working_tree_dir)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    repo.index.add(list(files))
    return repo.index.commit(message, author=TEST_ACTOR, committer=TEST_ACTOR)


@pytest.fixture
def make_repo():
    """Factory fixture to create git repositories, closed on teardown."""
    repos = []

    def _make(path: Path, files: Optional[Dict[str, object]] = None) -> git.Repo:
        path.mkdir(parents=True, exist_ok=True)
        repo = git.Repo.init(path)
        repos.append(repo)
        if files:
            _commit_files(repo, files, "initial")
        return repo

    yield _make

    for repo in repos:
        repo.close()


@pytest.fixture
def commit():
    """Fixture returning a helper that writes, stages and commits files."""
    return _commit_files


@pytest.fixture
def memory_store():
    """Empty in-memory repository store."""
    return MemoryRepositoryStore()
