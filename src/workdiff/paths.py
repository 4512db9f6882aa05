"""Path resolution between project, disk and repository-relative forms."""

from pathlib import Path, PurePosixPath
from typing import Optional, Union

from .errors import InvalidPathError


def resolve_actual_path(project_path: Union[str, Path], file_path: Union[str, Path]) -> Path:
    """Get the on-disk path of a file.

    Absolute paths are used as-is; relative paths are joined onto project_path.
    """
    p = Path(file_path)
    if p.is_absolute():
        return p
    return Path(project_path) / p


def strip_workdir(path: Path, workdir: Path) -> Optional[PurePosixPath]:
    """Get path relative to a working directory, or None if it lies outside.

    The lexical form is tried first, then the symlink-resolved form of both
    paths, so files reached through a symlinked directory still map into the
    repository that actually contains them.
    """
    try:
        return PurePosixPath(path.relative_to(workdir).as_posix())
    except ValueError:
        pass

    try:
        return PurePosixPath(path.resolve().relative_to(workdir.resolve()).as_posix())
    except (ValueError, OSError):
        return None


def normalize_repo_path(
    path: Union[str, Path, PurePosixPath],
    workdir: Optional[Path] = None,
) -> Optional[PurePosixPath]:
    """Convert a path to the POSIX repository-relative form used for tree lookups.

    Args:
        path: Relative path, or absolute path inside workdir
        workdir: Repository working directory (needed for absolute paths)

    Returns:
        Normalized relative path without '.' or '..' segments, or None if
        path is absolute and lies outside workdir (it cannot be in the tree)

    Raises:
        InvalidPathError: If the path is empty or climbs above the
            repository root
    """
    p = Path(path)
    if p.is_absolute():
        rel = strip_workdir(p, workdir) if workdir is not None else None
        if rel is None:
            return None
        p = Path(rel)

    parts = []
    for part in PurePosixPath(p.as_posix()).parts:
        if part in ("", "."):
            continue
        if part == "..":
            if not parts:
                raise InvalidPathError(path, "path escapes the repository root")
            parts.pop()
        else:
            parts.append(part)

    if not parts:
        raise InvalidPathError(path, "empty path")
    return PurePosixPath(*parts)
