"""Pydantic schemas for stagedfs.

These schemas define the validated data structures exchanged at the edges
of the library:
- StagedFileSystemOptions: Constructor configuration for an overlay
- DiffSummary: JSON-serializable view of a staged diff

All schemas use Pydantic v2 for validation and serialization.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_serializer, field_validator

from stagedfs.core.constants import DEFAULT_IGNORED_GLOBS


class StagedFileSystemOptions(BaseModel):
    """Configuration recognized by the staged filesystem.

    Attributes:
        cwd: Working root; None falls back to STAGEDFS_CWD, then the
            process working directory
        ignored_globs: Root-relative patterns hidden from glob() and from
            enumeration when a real directory moves
    """

    cwd: Path | None = None
    ignored_globs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORED_GLOBS)
    )

    @field_validator("ignored_globs")
    @classmethod
    def validate_ignored_globs(cls, v: list[str]) -> list[str]:
        """Strip whitespace and reject empty patterns."""
        cleaned = [pattern.strip() for pattern in v]
        if any(not pattern for pattern in cleaned):
            raise ValueError("Ignored glob patterns cannot be empty")
        return cleaned


class MoveRecord(BaseModel):
    """A pending real move."""

    source: Path
    destination: Path

    @field_serializer("source", "destination")
    def serialize_paths(self, path: Path) -> str:
        """Serialize Path to string for JSON."""
        return str(path)


class StagedWrite(BaseModel):
    """A staged directory creation or file write."""

    path: Path
    kind: Literal["directory", "file"]
    size: int | None = None

    @field_serializer("path")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string for JSON."""
        return str(path)


class DiffSummary(BaseModel):
    """JSON-friendly summary of a staged diff.

    File contents are summarized by size; the diff itself keeps the bytes.
    """

    root: Path
    total_changes: int = Field(ge=0)
    deleted_paths: list[Path] = Field(default_factory=list)
    moves: list[MoveRecord] = Field(default_factory=list)
    writes: list[StagedWrite] = Field(default_factory=list)

    @field_serializer("root")
    def serialize_root(self, root: Path) -> str:
        """Serialize Path to string for JSON."""
        return str(root)

    @field_serializer("deleted_paths")
    def serialize_deleted_paths(self, paths: list[Path]) -> list[str]:
        """Serialize Paths to strings for JSON."""
        return [str(path) for path in paths]
