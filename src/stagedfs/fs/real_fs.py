"""Real filesystem adapter.

Stateless access to actual disk entries. Every OS error is translated into
the stagedfs error taxonomy before it reaches the caller.
"""

from __future__ import annotations

import os
import shutil
import sys
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from stagedfs.core.errors import map_os_error
from stagedfs.fs.globbing import matches_any, normalize_patterns
from stagedfs.fs.paths import PathResolver, resolve_working_root
from stagedfs.fs.types import DirEntry, PathLike

if TYPE_CHECKING:  # pragma: no cover - typing only
    from stagedfs.fs.async_fs import AsyncFileSystem


@contextmanager
def translate_os_errors(path: PathLike) -> Iterator[None]:
    """Re-raise ``OSError`` raised inside the block as a StagedFsError.

    Errors without a mapping propagate unchanged.
    """
    try:
        yield
    except OSError as err:
        mapped = map_os_error(err, path)
        if mapped is err:
            raise
        raise mapped from err


class RealFileSystem:
    """Filesystem adapter backed by the operating system.

    Relative paths are resolved against the adapter's working root and
    absolute paths must stay under it.
    """

    def __init__(self, cwd: PathLike | None = None) -> None:
        self._resolver = PathResolver(resolve_working_root(cwd))

    @property
    def is_case_sensitive(self) -> bool:
        return sys.platform != "win32"

    def cwd(self) -> Path:
        return self._resolver.root

    def resolve(self, path: PathLike) -> Path:
        return self._resolver.resolve(path)

    def as_async(self) -> AsyncFileSystem:
        """Return an awaitable view that runs blocking I/O in worker threads."""
        from stagedfs.fs.async_fs import AsyncFileSystem

        return AsyncFileSystem(self, offload=True)

    # --- Directory operations ---

    def read_dir(self, path: PathLike) -> list[DirEntry]:
        resolved = self.resolve(path)
        with translate_os_errors(resolved), os.scandir(resolved) as it:
            entries = [
                DirEntry(
                    name=entry.name,
                    path=resolved / entry.name,
                    is_directory=entry.is_dir(),
                )
                for entry in it
            ]
        return sorted(entries, key=lambda entry: entry.name)

    def mkdir(self, path: PathLike) -> None:
        resolved = self.resolve(path)
        with translate_os_errors(resolved):
            resolved.mkdir(parents=True, exist_ok=True)

    def rm(self, path: PathLike, *, recursive: bool = False) -> None:
        resolved = self.resolve(path)
        with translate_os_errors(resolved):
            if resolved.is_dir() and not resolved.is_symlink():
                if recursive:
                    shutil.rmtree(resolved)
                else:
                    resolved.rmdir()
            else:
                resolved.unlink()

    def move(self, src: PathLike, dest: PathLike) -> None:
        resolved_src = self.resolve(src)
        resolved_dest = self.resolve(dest)
        with translate_os_errors(resolved_src):
            shutil.move(resolved_src, resolved_dest)

    def copy(self, src: PathLike, dest: PathLike) -> None:
        resolved_src = self.resolve(src)
        resolved_dest = self.resolve(dest)
        with translate_os_errors(resolved_src):
            shutil.copyfile(resolved_src, resolved_dest)

    # --- File operations ---

    def read_bytes(self, path: PathLike) -> bytes:
        resolved = self.resolve(path)
        with translate_os_errors(resolved):
            return resolved.read_bytes()

    def read_text(self, path: PathLike) -> str:
        return self.read_bytes(path).decode("utf-8")

    def write_bytes(self, path: PathLike, data: bytes) -> None:
        resolved = self.resolve(path)
        with translate_os_errors(resolved):
            resolved.write_bytes(data)

    def write_text(self, path: PathLike, content: str) -> None:
        self.write_bytes(path, content.encode("utf-8"))

    # --- Existence checks ---

    def exists(self, path: PathLike) -> bool:
        resolved = self.resolve(path)
        try:
            os.stat(resolved)
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as err:
            mapped = map_os_error(err, resolved)
            if mapped is err:
                raise
            raise mapped from err
        return True

    def is_dir(self, path: PathLike) -> bool:
        return self.resolve(path).is_dir()

    # --- Traversal ---

    def walk(
        self, base: PathLike, ignored_globs: Iterable[str] = ()
    ) -> Iterator[DirEntry]:
        """Yield every entry beneath ``base``, depth first.

        Entries whose path relative to the working root matches one of
        ``ignored_globs`` are skipped along with everything beneath them.
        A missing or non-directory ``base`` yields nothing.
        """
        patterns = tuple(ignored_globs)
        resolved = self.resolve(base)
        if not resolved.is_dir():
            return

        pending = [resolved]
        while pending:
            current = pending.pop()
            for entry in self.read_dir(current):
                relative = self._resolver.relative(entry.path)
                if patterns and matches_any(relative, patterns):
                    continue
                yield entry
                if entry.is_directory:
                    pending.append(entry.path)

    def glob(self, patterns: str | Iterable[str]) -> list[Path]:
        """Return files under the working root matching any pattern."""
        compiled = normalize_patterns(patterns)
        return sorted(
            entry.path
            for entry in self.walk(self.cwd())
            if not entry.is_directory
            and matches_any(self._resolver.relative(entry.path), compiled)
        )
