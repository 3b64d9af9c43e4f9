"""stagedfs: speculative file tree edits with an explicit commit step."""

from stagedfs.fs import (
    ApplyReport,
    StagedDiff,
    StagedFileSystem,
    apply_staged_diff,
    format_staged_diff,
)

__version__ = "0.1.0"

__all__ = [
    "ApplyReport",
    "StagedDiff",
    "StagedFileSystem",
    "__version__",
    "apply_staged_diff",
    "format_staged_diff",
]
