"""Stable API for workdiff.

This module provides a minimal, stable API surface for a consuming layer
(typically a UI process rendering a two-way diff) that wants plain records
rather than model objects.

Records use lower camelCase keys:

    {"original": ..., "current": ..., "existsAtHead": ..., "existsInWorkdir": ...}
"""

from pathlib import Path
from typing import Any, Dict, Union

from .config import load_resolver_config
from .resolver import resolve_file_snapshot


def snapshot_record(project_path: Union[str, Path], file_path: Union[str, Path]) -> Dict[str, Any]:
    """Resolve a file snapshot and return it as a camelCase record.

    Configuration is loaded from project_path/.workdiff/config.yaml and the
    WORKDIFF_* environment variables on every call.

    Args:
        project_path: Project root (fallback repository)
        file_path: Absolute path, or path relative to project_path

    Returns:
        Dict with keys original, current, existsAtHead, existsInWorkdir

    Raises:
        SnapshotError: Any resolution or read failure (see workdiff.errors)

    Example:
        >>> from workdiff.api import snapshot_record
        >>> record = snapshot_record("/work/project", "src/app.py")
        >>> record["existsAtHead"]
        True
    """
    config = load_resolver_config(Path(project_path))
    return resolve_file_snapshot(project_path, file_path, config=config).to_record()


# Name used by callers of the original diff-viewer command
get_git_file_diff = snapshot_record
