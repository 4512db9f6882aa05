"""Core data models for workdiff.

A FileSnapshot is the pair of texts a caller needs to render a two-way diff
for one file: what HEAD recorded and what is on disk right now. Existence is
carried by flags rather than by errors, so "new file" and "deleted file" are
ordinary snapshots.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


# ============= Decoding =============

class DecodeMode(str, Enum):
    """How undecodable bytes are handled when turning content into text."""

    REPLACE = "replace"  # invalid sequences become U+FFFD
    STRICT = "strict"    # invalid sequences are an error


def decode_bytes(data: bytes, mode: DecodeMode, encoding: str = "utf-8") -> str:
    """Decode content bytes to text.

    Raises:
        UnicodeDecodeError: If mode is STRICT and data is not valid for encoding
    """
    return data.decode(encoding, errors=DecodeMode(mode).value)


# ============= Change Detection =============

class ChangeType(str, Enum):
    """Type of change between HEAD and the working directory."""

    UNCHANGED = "unchanged"
    ADDED = "added"        # on disk, not at HEAD
    DELETED = "deleted"    # at HEAD, not on disk
    MODIFIED = "modified"
    MISSING = "missing"    # neither at HEAD nor on disk


# ============= Snapshot =============

class FileSnapshot(BaseModel):
    """HEAD and working-directory content of a single file.

    Field names are snake_case in Python and lower camelCase on the wire
    (``existsAtHead``, ``existsInWorkdir``).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    original: str = ""
    current: str = ""
    exists_at_head: bool = False
    exists_in_workdir: bool = False

    @model_validator(mode="after")
    def check_absent_sides_are_empty(self):
        """An absent side never carries content."""
        if not self.exists_at_head and self.original:
            raise ValueError("original must be empty when the file does not exist at HEAD")
        if not self.exists_in_workdir and self.current:
            raise ValueError("current must be empty when the file does not exist in the working directory")
        return self

    @property
    def change_type(self) -> ChangeType:
        if self.exists_at_head and self.exists_in_workdir:
            if self.original == self.current:
                return ChangeType.UNCHANGED
            return ChangeType.MODIFIED
        if self.exists_in_workdir:
            return ChangeType.ADDED
        if self.exists_at_head:
            return ChangeType.DELETED
        return ChangeType.MISSING

    @property
    def has_changes(self) -> bool:
        """Check if the working directory differs from HEAD."""
        return self.change_type not in (ChangeType.UNCHANGED, ChangeType.MISSING)

    def to_record(self) -> Dict[str, Any]:
        """Serialize with camelCase keys for transport to a UI layer."""
        return self.model_dump(by_alias=True)
