"""Shared types for the real and staged filesystems."""

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

PathLike = str | os.PathLike[str]


@dataclass(frozen=True)
class DirEntry:
    """A file or directory entry returned by ``read_dir``.

    Attributes:
        name: Base name of the entry (no path separators)
        path: Absolute path to the entry
        is_directory: True for directories, False for files
    """

    name: str
    path: Path
    is_directory: bool


@dataclass(frozen=True)
class FileContent:
    """Staged bytes for a file."""

    data: bytes


@dataclass(frozen=True)
class DirectoryMarker:
    """Staged directory with no content of its own."""


#: Value stored for every staged path
StagedEntry = FileContent | DirectoryMarker

DIRECTORY = DirectoryMarker()


@dataclass(frozen=True)
class RenameBinding:
    """Redirect from a virtual path to the real path it was moved from.

    Attributes:
        original: Real path on disk before the transformation run
        is_directory: Whether the real path is a directory
    """

    original: Path
    is_directory: bool


@dataclass(frozen=True)
class MoveOperation:
    """A real move to replay on disk when the diff is applied."""

    source: Path
    destination: Path


class FileSystem(Protocol):
    """Filesystem surface consumed by transformation code."""

    @property
    def is_case_sensitive(self) -> bool: ...

    def cwd(self) -> Path: ...

    def read_dir(self, path: PathLike) -> list[DirEntry]: ...

    def mkdir(self, path: PathLike) -> None: ...

    def rm(self, path: PathLike, *, recursive: bool = False) -> None: ...

    def move(self, src: PathLike, dest: PathLike) -> None: ...

    def copy(self, src: PathLike, dest: PathLike) -> None: ...

    def read_bytes(self, path: PathLike) -> bytes: ...

    def read_text(self, path: PathLike) -> str: ...

    def write_bytes(self, path: PathLike, data: bytes) -> None: ...

    def write_text(self, path: PathLike, content: str) -> None: ...

    def exists(self, path: PathLike) -> bool: ...

    def glob(self, patterns: str | Iterable[str]) -> list[Path]: ...
