"""Staged filesystem diffs.

A diff is the immutable summary of every pending mutation in a staged
filesystem. It is consumed by the preview formatter and by the applier.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from stagedfs.core.schemas import DiffSummary, MoveRecord, StagedWrite
from stagedfs.fs.types import DirectoryMarker, FileContent, MoveOperation, StagedEntry


@dataclass(frozen=True)
class StagedDiff:
    """Snapshot of pending mutations.

    Attributes:
        move_operations: Real moves, in the order they must be replayed
        deleted_paths: Real paths to delete, in the order they were removed
        staged_content: Directories to create and files to write
    """

    move_operations: tuple[MoveOperation, ...]
    deleted_paths: tuple[Path, ...]
    staged_content: Mapping[Path, StagedEntry]

    @property
    def total_changes(self) -> int:
        return (
            len(self.move_operations)
            + len(self.deleted_paths)
            + len(self.staged_content)
        )

    @property
    def is_empty(self) -> bool:
        return self.total_changes == 0


@dataclass
class FormattedDiff:
    """Human-readable rendering of a diff."""

    total_changes: int
    lines: list[str]


def format_staged_diff(diff: StagedDiff) -> FormattedDiff:
    """Format a staged diff into preview lines.

    Deletions come first, then moves, then directory creations and file
    writes in staging order. The order is cosmetic; the applier defines
    its own safe order.

    Args:
        diff: The staged filesystem diff to format

    Returns:
        FormattedDiff with the total number of changes and one line each
    """
    lines: list[str] = []
    if diff.is_empty:
        return FormattedDiff(total_changes=0, lines=lines)

    # Show deleted files
    for deleted_path in diff.deleted_paths:
        lines.append(f"  🗑️  Delete: {deleted_path}")

    # Show move operations
    for move in diff.move_operations:
        lines.append(f"  📝 Move: {move.source} → {move.destination}")

    # Show written/created files and directories
    for staged_path, entry in diff.staged_content.items():
        if isinstance(entry, DirectoryMarker):
            lines.append(f"  📁 Create directory: {staged_path}")
        elif isinstance(entry, FileContent):
            lines.append(f"  📄 Write file: {staged_path}")

    return FormattedDiff(total_changes=diff.total_changes, lines=lines)


def summarize_diff(diff: StagedDiff, root: Path) -> DiffSummary:
    """Build the JSON-serializable summary of a diff."""
    writes = [
        StagedWrite(path=path, kind="directory")
        if isinstance(entry, DirectoryMarker)
        else StagedWrite(path=path, kind="file", size=len(entry.data))
        for path, entry in diff.staged_content.items()
    ]
    return DiffSummary(
        root=root,
        total_changes=diff.total_changes,
        deleted_paths=list(diff.deleted_paths),
        moves=[
            MoveRecord(source=move.source, destination=move.destination)
            for move in diff.move_operations
        ],
        writes=writes,
    )
