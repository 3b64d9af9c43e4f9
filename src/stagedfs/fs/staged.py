"""Staged (overlay) filesystem.

Transformation code mutates a file tree through this class without touching
real storage. Pending changes live in memory as:

- staged content: path -> file bytes or directory marker
- rename bindings: virtual path -> real path it was moved from
- tombstones: real paths slated for deletion
- a move log replayed against disk when the diff is applied

Queries merge that state with the real filesystem so callers always see
"real + pending changes" as a single tree.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeVar

from stagedfs.core.errors import (
    IllegalOperationOnDirectoryError,
    NotFoundError,
)
from stagedfs.fs.diff import StagedDiff
from stagedfs.fs.globbing import matches_any, normalize_patterns
from stagedfs.fs.paths import (
    PathResolver,
    is_same_or_descendant,
    relocate,
    resolve_working_root,
)
from stagedfs.fs.real_fs import RealFileSystem
from stagedfs.fs.types import (
    DIRECTORY,
    DirectoryMarker,
    DirEntry,
    FileContent,
    MoveOperation,
    PathLike,
    RenameBinding,
    StagedEntry,
)
from stagedfs.utils.debug import debug

if TYPE_CHECKING:  # pragma: no cover - typing only
    from stagedfs.core.schemas import StagedFileSystemOptions
    from stagedfs.fs.async_fs import AsyncFileSystem

_V = TypeVar("_V")


@dataclass
class _PendingMove:
    """Move log entry.

    ``origin`` is the real path before the run; ``source`` is where that
    entry sits on disk once every earlier move has been replayed.
    """

    origin: Path
    source: Path
    destination: Path


def _related(a: Path, b: Path) -> bool:
    return is_same_or_descendant(a, b) or is_same_or_descendant(b, a)


def _rewrite_prefix(
    mapping: dict[Path, _V], old_base: Path, new_base: Path
) -> dict[Path, _V]:
    """Re-key every entry at or beneath ``old_base`` onto ``new_base``."""
    return {
        relocate(path, old_base, new_base)
        if is_same_or_descendant(path, old_base)
        else path: value
        for path, value in mapping.items()
    }


class StagedFileSystem:
    """In-memory overlay in front of a real filesystem.

    One instance serves one transformation run. It is not thread-safe and
    never writes to disk; call :meth:`get_diff` and hand the result to
    :func:`stagedfs.fs.apply.apply_staged_diff` to commit.
    """

    def __init__(
        self,
        cwd: PathLike | None = None,
        ignored_globs: Iterable[str] | None = None,
        real_fs: RealFileSystem | None = None,
    ) -> None:
        """Initialize a staged filesystem.

        Args:
            cwd: Working root. Every path must resolve beneath it.
            ignored_globs: Patterns (relative to the root) excluded from
                glob() and from enumeration when a real directory moves
            real_fs: Adapter used for real lookups; created for ``cwd``
                when omitted
        """
        if cwd is None and real_fs is not None:
            root = real_fs.cwd()
        else:
            root = resolve_working_root(cwd)
        self._resolver = PathResolver(root)
        self._real = real_fs or RealFileSystem(root)
        self._ignored_globs = tuple(ignored_globs or ())

        self._staged: dict[Path, StagedEntry] = {}
        self._bindings: dict[Path, RenameBinding] = {}
        # reverse of _bindings: original real path -> current virtual path
        self._moved_from: dict[Path, Path] = {}
        # ordered set of tombstoned original paths
        self._deleted: dict[Path, None] = {}
        self._moves: list[_PendingMove] = []

    @classmethod
    def from_options(cls, options: StagedFileSystemOptions) -> StagedFileSystem:
        """Build a staged filesystem from validated options."""
        return cls(cwd=options.cwd, ignored_globs=options.ignored_globs)

    @property
    def is_case_sensitive(self) -> bool:
        return self._real.is_case_sensitive

    @property
    def ignored_globs(self) -> tuple[str, ...]:
        return self._ignored_globs

    def cwd(self) -> Path:
        return self._resolver.root

    def as_async(self) -> AsyncFileSystem:
        """Return an awaitable view over this overlay.

        Overlay work is in-memory, so the awaitables complete without
        suspending.
        """
        from stagedfs.fs.async_fs import AsyncFileSystem

        return AsyncFileSystem(self, offload=False)

    # ------------------------------------------------------------------
    # Path bookkeeping
    # ------------------------------------------------------------------

    def _resolve(self, path: PathLike) -> Path:
        return self._resolver.resolve(path)

    def _lineage(self, path: Path) -> Iterable[Path]:
        """Yield ``path`` and its ancestors up to and including the root."""
        yield path
        for parent in path.parents:
            if not is_same_or_descendant(parent, self._resolver.root):
                return
            yield parent

    def _original_path(self, resolved: Path) -> Path:
        """Map a virtual path to the real path backing it.

        Follows the nearest bound ancestor so entries never enumerated
        during a move still resolve to their real location.
        """
        for candidate in self._lineage(resolved):
            binding = self._bindings.get(candidate)
            if binding is not None:
                return relocate(resolved, candidate, binding.original)
        return resolved

    def _current_location(self, original: Path) -> Path:
        """Map a real path to where it currently lives in the merged view."""
        for candidate in self._lineage(original):
            virtual = self._moved_from.get(candidate)
            if virtual is not None:
                return relocate(original, candidate, virtual)
        return original

    def _is_deleted(self, original: Path) -> bool:
        """Tombstones cover the deleted path and everything beneath it."""
        return any(
            candidate in self._deleted for candidate in self._lineage(original)
        )

    def _is_visible(self, resolved: Path, original: Path) -> bool:
        """Whether the real ``original`` still shows up at ``resolved``."""
        if self._is_deleted(original):
            return False
        # moved away from here
        return self._current_location(original) == resolved

    def _is_real_backed(self, resolved: Path, original: Path) -> bool:
        return self._is_visible(resolved, original) and self._real.exists(original)

    def _exists(self, resolved: Path) -> bool:
        if resolved in self._staged:
            return True
        return self._is_real_backed(resolved, self._original_path(resolved))

    def _tombstone(self, original: Path) -> None:
        self._deleted[original] = None

    def _rebuild_reverse_bindings(self) -> None:
        self._moved_from = {
            binding.original: virtual for virtual, binding in self._bindings.items()
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mkdir(self, path: PathLike) -> None:
        """Create a directory and any missing ancestors. Idempotent."""
        current = self._resolve(path)
        root = self._resolver.root
        while current != root and not self._exists(current):
            self._staged[current] = DIRECTORY
            debug(f"Staged directory: {current}")
            current = current.parent

    def write_bytes(self, path: PathLike, data: bytes) -> None:
        """Stage ``data`` as the content of ``path``, creating parents."""
        resolved = self._resolve(path)
        if isinstance(self._staged.get(resolved), DirectoryMarker):
            raise IllegalOperationOnDirectoryError(resolved)

        # a fresh write revives a previously deleted real path
        self._deleted.pop(self._original_path(resolved), None)

        self.mkdir(resolved.parent)
        self._staged[resolved] = FileContent(bytes(data))
        debug(f"Staged write: {resolved} ({len(data)} bytes)")

    def write_text(self, path: PathLike, content: str) -> None:
        """Stage UTF-8 encoded ``content`` for ``path``."""
        self.write_bytes(path, content.encode("utf-8"))

    def rm(self, path: PathLike, *, recursive: bool = False) -> None:
        """Delete a file or directory from the merged view.

        The overlay removes whole sub-trees regardless of ``recursive``;
        the flag exists for parity with the real filesystem, where the
        applier always deletes recursively.

        Raises:
            IllegalOperationOnDirectoryError: If ``path`` is the working root
        """
        resolved = self._resolve(path)
        if resolved == self._resolver.root:
            raise IllegalOperationOnDirectoryError(resolved)
        self._remove(resolved)

    def _remove(self, resolved: Path) -> None:
        original = self._original_path(resolved)
        # false when a real entry moved away and this path was re-created
        owns_original = self._current_location(original) == resolved

        for staged_path in [
            p for p in self._staged if is_same_or_descendant(p, resolved)
        ]:
            del self._staged[staged_path]

        for virtual in [
            v for v in self._bindings if is_same_or_descendant(v, resolved)
        ]:
            binding = self._bindings.pop(virtual)
            # real paths moved into the removed tree are deleted at their origin
            if not owns_original or not is_same_or_descendant(
                binding.original, original
            ):
                self._tombstone(binding.original)

        if owns_original:
            self._tombstone(original)
        self._moves = [
            move for move in self._moves if not self._is_deleted(move.origin)
        ]
        self._rebuild_reverse_bindings()
        debug(f"Staged delete: {resolved} (original {original})")

    def move(self, src: PathLike, dest: PathLike) -> None:
        """Move or rename a file or directory.

        Staged entries and rename bindings beneath ``src`` follow it to
        ``dest``. Moving a path that originates on real disk also queues a
        real move for the applier. An existing ``dest`` is replaced.

        Raises:
            NotFoundError: If ``src`` or the parent of ``dest`` is missing
            IllegalOperationOnDirectoryError: If ``dest`` lies inside ``src``,
                is an ancestor of it, or is the working root
        """
        resolved_src = self._resolve(src)
        resolved_dest = self._resolve(dest)

        if not self._exists(resolved_src):
            raise NotFoundError(resolved_src)
        if resolved_dest == resolved_src:
            return
        if resolved_dest == self._resolver.root or _related(
            resolved_dest, resolved_src
        ):
            raise IllegalOperationOnDirectoryError(resolved_dest)
        if not self._exists(resolved_dest.parent):
            raise NotFoundError(resolved_dest.parent)

        origin = self._original_path(resolved_src)
        new_bindings: dict[Path, RenameBinding] = {}
        if self._is_real_backed(resolved_src, origin):
            is_directory = self._real.is_dir(origin)
            new_bindings[resolved_dest] = RenameBinding(origin, is_directory)
            if is_directory:
                for entry in self._real.walk(origin, self._ignored_globs):
                    moved_to = relocate(entry.path, origin, resolved_dest)
                    new_bindings[moved_to] = RenameBinding(
                        entry.path, entry.is_directory
                    )

        if self._exists(resolved_dest):
            self._remove(resolved_dest)

        self._bindings = _rewrite_prefix(self._bindings, resolved_src, resolved_dest)
        self._staged = _rewrite_prefix(self._staged, resolved_src, resolved_dest)
        self._bindings.update(new_bindings)

        # content moved onto a replaced file supersedes its tombstone
        for staged_path, entry in self._staged.items():
            if isinstance(entry, FileContent) and is_same_or_descendant(
                staged_path, resolved_dest
            ):
                self._deleted.pop(self._original_path(staged_path), None)

        if new_bindings:
            self._record_move(origin, resolved_dest)
        else:
            # real paths moved into a staged-only tree travel with it
            for pending in self._moves:
                if is_same_or_descendant(pending.source, resolved_src):
                    pending.source = relocate(
                        pending.source, resolved_src, resolved_dest
                    )
                if is_same_or_descendant(pending.destination, resolved_src):
                    pending.destination = relocate(
                        pending.destination, resolved_src, resolved_dest
                    )
        self._rebuild_reverse_bindings()
        debug(
            f"Staged move: {resolved_src} -> {resolved_dest} "
            f"({len(new_bindings)} rename bindings)"
        )

    def _replay_location(self, origin: Path) -> Path:
        """Where ``origin`` sits on disk after replaying the current log."""
        location = origin
        for pending in self._moves:
            if is_same_or_descendant(location, pending.source):
                location = relocate(location, pending.source, pending.destination)
        return location

    def _record_move(self, origin: Path, destination: Path) -> None:
        source = self._replay_location(origin)

        # Moving the same unit again rewrites the earlier entry instead of
        # chaining, as long as nothing logged after it touches either end.
        for index in range(len(self._moves) - 1, -1, -1):
            pending = self._moves[index]
            if pending.destination != source:
                continue
            later = self._moves[index + 1 :]
            if any(
                _related(move.source, end) or _related(move.destination, end)
                for move in later
                for end in (source, destination)
            ):
                break
            if destination == pending.source:
                del self._moves[index]
            else:
                pending.destination = destination
            return

        self._moves.append(
            _PendingMove(origin=origin, source=source, destination=destination)
        )

    def copy(self, src: PathLike, dest: PathLike) -> None:
        """Copy file content from ``src`` to ``dest``.

        Directories cannot be copied; create them with :meth:`mkdir` and
        copy their files individually.
        """
        self.write_bytes(dest, self.read_bytes(src))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def exists(self, path: PathLike) -> bool:
        """Return True if ``path`` exists in the merged view."""
        return self._exists(self._resolve(path))

    def read_dir(self, path: PathLike) -> list[DirEntry]:
        """List a directory of the merged view.

        Staged entries shadow real entries with the same name; deleted and
        moved-away real entries are hidden, moved-in ones are listed.

        Raises:
            NotFoundError: If the directory does not exist
        """
        resolved = self._resolve(path)
        if not self._exists(resolved):
            raise NotFoundError(resolved)

        entries = [
            DirEntry(
                name=staged_path.name,
                path=staged_path,
                is_directory=isinstance(entry, DirectoryMarker),
            )
            for staged_path, entry in self._staged.items()
            if staged_path.parent == resolved
        ]
        names = {entry.name for entry in entries}

        for virtual, binding in self._bindings.items():
            if virtual.parent != resolved or virtual.name in names:
                continue
            if self._is_deleted(binding.original):
                continue
            if self._current_location(binding.original) != virtual:
                continue
            if not self._real.exists(binding.original):
                continue
            entries.append(DirEntry(virtual.name, virtual, binding.is_directory))
            names.add(virtual.name)

        try:
            real_entries = self._real.read_dir(self._original_path(resolved))
        except NotFoundError:
            real_entries = []

        for real_entry in real_entries:
            if self._is_deleted(real_entry.path):
                continue
            location = self._current_location(real_entry.path)
            if location.parent != resolved or location.name in names:
                continue
            entries.append(DirEntry(location.name, location, real_entry.is_directory))
            names.add(location.name)

        return entries

    def read_bytes(self, path: PathLike) -> bytes:
        """Return the content of a file in the merged view.

        Raises:
            IllegalOperationOnDirectoryError: If ``path`` is a directory
            NotFoundError: If ``path`` does not exist
        """
        resolved = self._resolve(path)
        entry = self._staged.get(resolved)
        if isinstance(entry, DirectoryMarker):
            raise IllegalOperationOnDirectoryError(resolved)
        if isinstance(entry, FileContent):
            return entry.data

        original = self._original_path(resolved)
        if not self._is_visible(resolved, original):
            raise NotFoundError(resolved)
        return self._real.read_bytes(original)

    def read_text(self, path: PathLike) -> str:
        """Return the UTF-8 decoded content of a file."""
        return self.read_bytes(path).decode("utf-8")

    def glob(self, patterns: str | Iterable[str]) -> list[Path]:
        """Return files whose root-relative path matches any pattern.

        Paths matching the ignored globs are skipped, including whole
        directories. Results are absolute and sorted.
        """
        compiled = normalize_patterns(patterns)
        matched: list[Path] = []

        pending = [self._resolver.root]
        while pending:
            for entry in self.read_dir(pending.pop()):
                relative = self._resolver.relative(entry.path)
                if self._ignored_globs and matches_any(relative, self._ignored_globs):
                    continue
                if entry.is_directory:
                    pending.append(entry.path)
                elif matches_any(relative, compiled):
                    matched.append(entry.path)

        return sorted(matched)

    # ------------------------------------------------------------------
    # Diff
    # ------------------------------------------------------------------

    @property
    def move_operations(self) -> list[MoveOperation]:
        return [MoveOperation(move.source, move.destination) for move in self._moves]

    @property
    def deleted_paths(self) -> list[Path]:
        return list(self._deleted)

    @property
    def staged_content(self) -> Mapping[Path, StagedEntry]:
        return MappingProxyType(self._staged)

    def get_diff(self) -> StagedDiff:
        """Snapshot pending changes. The overlay itself is left untouched."""
        return StagedDiff(
            move_operations=tuple(self.move_operations),
            deleted_paths=tuple(self._deleted),
            staged_content=MappingProxyType(dict(self._staged)),
        )
