"""End-to-end tests against real git repositories (GitPython store)."""

import os

import pytest

from workdiff.core import ChangeType
from workdiff.errors import (
    HeadResolutionError,
    ObjectReadError,
    RepositoryResolutionError,
    WorkdirReadError,
)
from workdiff.resolver import FileSnapshotResolver, resolve_file_snapshot
from workdiff.stores.git import GitRepositoryStore


class TestSnapshotStates:
    """Test testable properties against real repositories."""

    def test_modified_file(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"src/app.py": "print('v1')\n"})
        (project / "src" / "app.py").write_text("print('v2')\n")

        snapshot = resolve_file_snapshot(project, "src/app.py")

        assert snapshot.exists_at_head is True
        assert snapshot.exists_in_workdir is True
        assert snapshot.original == "print('v1')\n"
        assert snapshot.current == "print('v2')\n"

    def test_unchanged_file(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"a.txt": "same\n"})

        snapshot = resolve_file_snapshot(project, "a.txt")

        assert snapshot.change_type == ChangeType.UNCHANGED

    def test_new_uncommitted_file(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"a.txt": "a"})
        (project / "b.txt").write_text("brand new")

        snapshot = resolve_file_snapshot(project, "b.txt")

        assert snapshot.exists_at_head is False
        assert snapshot.original == ""
        assert snapshot.exists_in_workdir is True
        assert snapshot.current == "brand new"

    def test_deleted_file(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"docs/readme.md": "hello\n"})
        (project / "docs" / "readme.md").unlink()

        snapshot = resolve_file_snapshot(project, "docs/readme.md")

        assert snapshot.exists_at_head is True
        assert snapshot.original == "hello\n"
        assert snapshot.exists_in_workdir is False
        assert snapshot.current == ""

    def test_deleted_file_by_absolute_path(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"a.txt": "committed"})
        (project / "a.txt").unlink()

        snapshot = resolve_file_snapshot(project, str(project / "a.txt"))

        assert snapshot.original == "committed"
        assert snapshot.change_type == ChangeType.DELETED

    def test_idempotent(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"a.txt": "one"})
        (project / "a.txt").write_text("two")
        resolver = FileSnapshotResolver()

        first = resolver.resolve(project, "a.txt")
        second = resolver.resolve(project, "a.txt")

        assert first == second

    def test_reads_head_not_branch_tip(self, tmp_path, make_repo, commit):
        project = tmp_path / "project"
        repo = make_repo(project, {"a.txt": "first"})
        first = repo.head.commit
        commit(repo, {"a.txt": "second"})
        repo.head.reference = first  # detach HEAD at the first commit

        snapshot = resolve_file_snapshot(project, "a.txt")

        assert snapshot.original == "first"
        assert snapshot.current == "second"

    def test_head_content_decoded_lossily(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"data.bin": b"ab\xffcd"})
        (project / "data.bin").unlink()

        snapshot = resolve_file_snapshot(project, "data.bin")

        assert snapshot.original == "ab�cd"

    def test_invalid_utf8_on_disk_is_read_error(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"a.txt": "x"})
        (project / "a.txt").write_bytes(b"\xff\xfe")

        with pytest.raises(WorkdirReadError):
            resolve_file_snapshot(project, "a.txt")


class TestDiscovery:
    """Test repository discovery against nested and external locations."""

    def test_nested_repository_uses_inner_head(self, tmp_path, make_repo, commit):
        outer = tmp_path / "outer"
        make_repo(outer, {"vendor/inner/lib.txt": "outer version\n"})
        inner = make_repo(outer / "vendor" / "inner")
        commit(inner, {"lib.txt": "inner committed\n"})
        (outer / "vendor" / "inner" / "lib.txt").write_text("inner working\n")

        by_absolute = resolve_file_snapshot(outer, str(outer / "vendor" / "inner" / "lib.txt"))
        by_relative = resolve_file_snapshot(outer, "vendor/inner/lib.txt")

        assert by_absolute.original == "inner committed\n"
        assert by_absolute.current == "inner working\n"
        assert by_relative == by_absolute

    def test_file_in_other_repository(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"a.txt": "project"})
        make_repo(tmp_path / "library", {"lib.py": "library code\n"})

        snapshot = resolve_file_snapshot(project, str(tmp_path / "library" / "lib.py"))

        assert snapshot.original == "library code\n"

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinked_project_location(self, tmp_path, make_repo):
        real = tmp_path / "real"
        make_repo(real, {"pkg/mod.py": "committed\n"})
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)

        snapshot = resolve_file_snapshot(link, "pkg/mod.py")

        assert snapshot.exists_at_head is True
        assert snapshot.original == "committed\n"

    def test_missing_file_falls_back_to_project(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"docs/guide.md": "guide"})
        (project / "docs" / "guide.md").unlink()
        (project / "docs").rmdir()

        snapshot = resolve_file_snapshot(project, "docs/guide.md")

        assert snapshot.original == "guide"

    def test_file_outside_repositories_uses_project(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"a.txt": "x"})
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        (scratch / "notes.txt").write_text("notes")

        snapshot = resolve_file_snapshot(project, str(scratch / "notes.txt"))

        assert snapshot.exists_at_head is False
        assert snapshot.current == "notes"

    def test_no_repository_anywhere(self, tmp_path):
        plain = tmp_path / "plain"
        plain.mkdir()
        (plain / "a.txt").write_text("x")

        with pytest.raises(RepositoryResolutionError) as exc_info:
            resolve_file_snapshot(plain, "a.txt")
        assert exc_info.value.cause is not None

    def test_unborn_head(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project)
        (project / "a.txt").write_text("x")

        with pytest.raises(HeadResolutionError):
            resolve_file_snapshot(project, "a.txt")

    def test_unborn_head_missing_file(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project)

        with pytest.raises(HeadResolutionError):
            resolve_file_snapshot(project, "a.txt")

    def test_directory_at_head_is_object_error(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"src/a.py": "x"})

        with pytest.raises(ObjectReadError, match="tree"):
            resolve_file_snapshot(project, "src")


class TestGitRepositoryStore:
    """Test the store operations directly."""

    def test_open_does_not_search_upward(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"sub/a.txt": "x"})

        with pytest.raises(RepositoryResolutionError):
            GitRepositoryStore().open(project / "sub")

    def test_discover_searches_upward(self, tmp_path, make_repo):
        project = tmp_path / "project"
        make_repo(project, {"sub/deeper/a.txt": "x"})

        with GitRepositoryStore().discover(project / "sub" / "deeper") as handle:
            assert handle.workdir.resolve() == project.resolve()

    def test_discover_stops_at_ceiling(self, tmp_path, make_repo):
        make_repo(tmp_path, {"sub/a.txt": "x"})

        with pytest.raises(RepositoryResolutionError, match="GIT_CEILING_DIRECTORIES"):
            GitRepositoryStore().discover(tmp_path / "sub")

    def test_missing_entry_is_none(self, tmp_path, make_repo):
        from pathlib import PurePosixPath

        project = tmp_path / "project"
        make_repo(project, {"a.txt": "x"})

        with GitRepositoryStore().open(project) as handle:
            tree = handle.head_tree()
            assert handle.read_blob(tree, PurePosixPath("nope.txt")) is None
            assert handle.read_blob(tree, PurePosixPath("a.txt/below")) is None
            assert handle.read_blob(tree, PurePosixPath("a.txt")) == b"x"
