"""Custom exceptions for stagedfs.

This module defines the fixed error taxonomy shared by the overlay
filesystem, the real filesystem adapter, and the diff applier. Every error
carries the offending path.
"""

import errno
from pathlib import Path
from typing import Any


class StagedFsError(Exception):
    """Base exception for all stagedfs errors.

    All filesystem errors inherit from this base class so callers can abort
    a transformation run with a single ``except`` clause.

    Attributes:
        path: The path the failing operation was applied to
    """

    kind = "fs_error"
    message_prefix = "Filesystem error"

    def __init__(self, path: str | Path, message: str | None = None) -> None:
        """Initialize a filesystem error.

        Args:
            path: Offending path
            message: Optional message overriding the default one
        """
        self.path = str(path)
        super().__init__(message or f"{self.message_prefix}: {self.path}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON output.

        Returns:
            Dictionary representation suitable for JSON responses
        """
        return {"error": self.kind, "path": self.path, "message": str(self)}

    def __repr__(self) -> str:
        """Return repr string for debugging."""
        return f"{type(self).__name__}(path={self.path!r})"


class NotFoundError(StagedFsError):
    """Raised when a file or directory doesn't exist in the merged view."""

    kind = "not_found"
    message_prefix = "No such file or directory"


class AlreadyExistsError(StagedFsError):
    """Raised when the real filesystem reports a collision."""

    kind = "already_exists"
    message_prefix = "Already exists"


class PermissionDeniedError(StagedFsError):
    """Raised when the real filesystem denies access."""

    kind = "permission_denied"
    message_prefix = "Permission denied"


class DirectoryNotEmptyError(StagedFsError):
    """Raised on a non-recursive delete of a non-empty real directory."""

    kind = "directory_not_empty"
    message_prefix = "Directory not empty"


class IllegalOperationOnDirectoryError(StagedFsError):
    """Raised when a file operation targets a directory."""

    kind = "illegal_operation_on_directory"
    message_prefix = "Illegal operation on a directory"


class OutOfRootError(StagedFsError):
    """Raised when a path resolves outside of the working root.

    Attributes:
        root: The working root the path escaped from
    """

    kind = "out_of_root"
    message_prefix = "Cannot resolve path outside of working directory"

    def __init__(self, path: str | Path, root: str | Path) -> None:
        """Initialize OutOfRootError.

        Args:
            path: Path as given by the caller
            root: Working root the path must stay under
        """
        self.root = str(root)
        super().__init__(path)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON output."""
        result = super().to_dict()
        result["root"] = self.root
        return result


class DiffApplyError(StagedFsError):
    """Raised when committing a staged diff to disk fails.

    The original exception is chained as ``__cause__``. Real disk may be
    left partially updated; nothing is rolled back.

    Attributes:
        step: Commit phase that failed (delete, move, mkdir, write)
    """

    kind = "apply_failed"

    def __init__(
        self, step: str, path: str | Path, context: str, cause: BaseException
    ) -> None:
        """Initialize DiffApplyError.

        Args:
            step: Commit phase that failed
            path: Path being processed
            context: Human readable description of the step
            cause: Underlying exception
        """
        self.step = step
        super().__init__(path, f"{context}: {cause}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON output."""
        result = super().to_dict()
        result["step"] = self.step
        return result


_ERRNO_TO_ERROR: dict[int, type[StagedFsError]] = {
    errno.ENOENT: NotFoundError,
    errno.EACCES: PermissionDeniedError,
    errno.EPERM: PermissionDeniedError,
    errno.ENOTEMPTY: DirectoryNotEmptyError,
    errno.EEXIST: AlreadyExistsError,
    errno.EISDIR: IllegalOperationOnDirectoryError,
}


def map_os_error(err: OSError, path: str | Path) -> Exception:
    """Translate an OS error into the stagedfs error taxonomy.

    Args:
        err: Error raised by the operating system
        path: Path the failing call was made with

    Returns:
        The matching StagedFsError, or ``err`` itself for unknown codes
    """
    error_type = _ERRNO_TO_ERROR.get(err.errno) if err.errno is not None else None
    if error_type is None:
        return err
    return error_type(path)
