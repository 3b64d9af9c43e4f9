"""Staged filesystem: overlay, real adapter, diffs and commit.

This package lets transformation code mutate a file tree speculatively and
commit the result as a single ordered diff.
"""

from stagedfs.fs.apply import ApplyReport, apply_staged_diff
from stagedfs.fs.async_fs import AsyncFileSystem
from stagedfs.fs.diff import (
    FormattedDiff,
    StagedDiff,
    format_staged_diff,
    summarize_diff,
)
from stagedfs.fs.paths import PathResolver, normalize_path
from stagedfs.fs.real_fs import RealFileSystem
from stagedfs.fs.staged import StagedFileSystem
from stagedfs.fs.types import (
    DIRECTORY,
    DirectoryMarker,
    DirEntry,
    FileContent,
    FileSystem,
    MoveOperation,
    RenameBinding,
    StagedEntry,
)

__all__ = [
    "DIRECTORY",
    "ApplyReport",
    "AsyncFileSystem",
    "DirEntry",
    "DirectoryMarker",
    "FileContent",
    "FileSystem",
    "FormattedDiff",
    "MoveOperation",
    "PathResolver",
    "RealFileSystem",
    "RenameBinding",
    "StagedDiff",
    "StagedEntry",
    "StagedFileSystem",
    "apply_staged_diff",
    "format_staged_diff",
    "normalize_path",
    "summarize_diff",
]
