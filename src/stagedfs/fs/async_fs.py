"""Awaitable facade over a synchronous filesystem.

Every method mirrors the synchronous one of the wrapped filesystem, so
the logic exists exactly once. Overlay filesystems run inline; real ones
push blocking I/O to a worker thread.
"""

from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path
from typing import Any, TypeVar

import anyio

from stagedfs.fs.types import DirEntry, FileSystem, PathLike

T = TypeVar("T")


class AsyncFileSystem:
    """Async view of a :class:`~stagedfs.fs.types.FileSystem`."""

    def __init__(self, fs: FileSystem, *, offload: bool) -> None:
        """Initialize the facade.

        Args:
            fs: Synchronous filesystem doing the actual work
            offload: Run calls in a worker thread via anyio when True
        """
        self.sync = fs
        self._offload = offload

    async def _call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        if self._offload:
            return await anyio.to_thread.run_sync(partial(func, *args, **kwargs))
        return func(*args, **kwargs)

    @property
    def is_case_sensitive(self) -> bool:
        return self.sync.is_case_sensitive

    def cwd(self) -> Path:
        return self.sync.cwd()

    async def read_dir(self, path: PathLike) -> list[DirEntry]:
        return await self._call(self.sync.read_dir, path)

    async def mkdir(self, path: PathLike) -> None:
        await self._call(self.sync.mkdir, path)

    async def rm(self, path: PathLike, *, recursive: bool = False) -> None:
        await self._call(self.sync.rm, path, recursive=recursive)

    async def move(self, src: PathLike, dest: PathLike) -> None:
        await self._call(self.sync.move, src, dest)

    async def copy(self, src: PathLike, dest: PathLike) -> None:
        await self._call(self.sync.copy, src, dest)

    async def read_bytes(self, path: PathLike) -> bytes:
        return await self._call(self.sync.read_bytes, path)

    async def read_text(self, path: PathLike) -> str:
        return await self._call(self.sync.read_text, path)

    async def write_bytes(self, path: PathLike, data: bytes) -> None:
        await self._call(self.sync.write_bytes, path, data)

    async def write_text(self, path: PathLike, content: str) -> None:
        await self._call(self.sync.write_text, path, content)

    async def exists(self, path: PathLike) -> bool:
        return await self._call(self.sync.exists, path)

    async def glob(self, patterns: str | Iterable[str]) -> list[Path]:
        return await self._call(self.sync.glob, patterns)
