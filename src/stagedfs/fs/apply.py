"""Apply a staged diff to the real filesystem.

The commit runs in three sequential phases:

1. delete every tombstoned path (recursively, missing paths are fine)
2. replay the move log in recorded order
3. create staged directories and write staged files, parents first

There is no rollback. A failure leaves disk partially updated and raises
:class:`~stagedfs.core.errors.DiffApplyError` naming the failed step.
"""

import shutil
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from stagedfs.core.errors import DiffApplyError, StagedFsError
from stagedfs.fs.diff import StagedDiff
from stagedfs.fs.paths import ensure_parent_dir, path_depth
from stagedfs.fs.real_fs import translate_os_errors
from stagedfs.fs.types import DirectoryMarker, FileContent, StagedEntry
from stagedfs.utils.debug import debug


@dataclass
class ApplyReport:
    """Summary report of diff application."""

    report_id: str
    deleted_count: int = 0
    moved_count: int = 0
    directories_created: int = 0
    files_written: int = 0
    written_paths: list[Path] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return (
            self.deleted_count
            + self.moved_count
            + self.directories_created
            + self.files_written
        )


def ordered_staged_entries(diff: StagedDiff) -> list[tuple[Path, StagedEntry]]:
    """Order staged entries so every parent precedes its children.

    Sorting by depth first makes the order safe for arbitrary sibling
    names, which a plain lexicographic sort does not guarantee.
    """
    return sorted(
        diff.staged_content.items(),
        key=lambda item: (path_depth(item[0]), str(item[0])),
    )


def _delete_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def apply_staged_diff(diff: StagedDiff) -> ApplyReport:
    """Apply a staged diff to disk.

    Args:
        diff: Snapshot produced by ``StagedFileSystem.get_diff()``

    Returns:
        ApplyReport with per-phase counts

    Raises:
        DiffApplyError: If any step fails; earlier steps stay applied
    """
    report = ApplyReport(report_id=str(uuid.uuid4()))

    # Step 1: Delete files and directories
    for deleted_path in diff.deleted_paths:
        try:
            with translate_os_errors(deleted_path):
                _delete_path(deleted_path)
        except (OSError, StagedFsError) as err:
            raise DiffApplyError(
                "delete", deleted_path, f"Failed to delete path: {deleted_path}", err
            ) from err
        report.deleted_count += 1
        debug(f"Deleted: {deleted_path}")

    # Step 2: Apply move operations sequentially
    for move in diff.move_operations:
        try:
            with translate_os_errors(move.source):
                ensure_parent_dir(move.destination)
                shutil.move(move.source, move.destination)
        except (OSError, StagedFsError) as err:
            raise DiffApplyError(
                "move",
                move.source,
                f"Failed to move path from {move.source} to {move.destination}",
                err,
            ) from err
        report.moved_count += 1
        debug(f"Moved: {move.source} -> {move.destination}")

    # Step 3: Write staged content (directories and files), parents first
    for staged_path, entry in ordered_staged_entries(diff):
        if isinstance(entry, DirectoryMarker):
            try:
                with translate_os_errors(staged_path):
                    staged_path.mkdir(parents=True, exist_ok=True)
            except (OSError, StagedFsError) as err:
                raise DiffApplyError(
                    "mkdir",
                    staged_path,
                    f"Failed to create directory: {staged_path}",
                    err,
                ) from err
            report.directories_created += 1
        elif isinstance(entry, FileContent):
            try:
                with translate_os_errors(staged_path):
                    ensure_parent_dir(staged_path)
                    staged_path.write_bytes(entry.data)
            except (OSError, StagedFsError) as err:
                raise DiffApplyError(
                    "write", staged_path, f"Failed to write file: {staged_path}", err
                ) from err
            report.files_written += 1
            report.written_paths.append(staged_path)
        debug(f"Materialized: {staged_path}")

    return report
