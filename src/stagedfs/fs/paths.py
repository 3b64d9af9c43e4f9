"""Path utilities for the staged filesystem.

This module provides the path resolver that scopes every operation to a
working root, plus the separator-aware prefix helpers used when a move
rewrites every path beneath a directory.
"""

import os
import sys
import unicodedata
from pathlib import Path

from stagedfs.core.constants import CWD_ENV_VAR
from stagedfs.core.errors import OutOfRootError


def normalize_path(path: str | os.PathLike[str], root: Path | None = None) -> Path:
    """Normalize a path lexically against a root.

    Unlike ``Path.resolve()`` this never touches the disk, so staged paths
    that do not exist yet normalize the same way as real ones.

    Args:
        path: Path to normalize
        root: Optional root directory for relative paths

    Returns:
        Normalized absolute path
    """
    # Convert to Path if needed
    if not isinstance(path, Path):
        path = Path(path)

    if not path.is_absolute():
        path = (root or Path.cwd()) / path

    normalized = os.path.normpath(path)

    # macOS stores names decomposed; elsewhere NFC and NFD are distinct names
    if sys.platform == "darwin":
        normalized = unicodedata.normalize("NFC", normalized)

    return Path(normalized)


def resolve_working_root(cwd: str | os.PathLike[str] | None = None) -> Path:
    """Resolve the working root for a staged filesystem.

    Args:
        cwd: Explicit working directory. Falls back to ``STAGEDFS_CWD``,
            then to the process working directory.

    Returns:
        Absolute, symlink-free working root
    """
    chosen: str | os.PathLike[str] | None = cwd
    env_cwd = os.getenv(CWD_ENV_VAR)
    if chosen is None and env_cwd:
        chosen = env_cwd
    if chosen is None:
        chosen = Path.cwd()

    return normalize_path(Path(chosen).expanduser().resolve())


def is_same_or_descendant(path: Path, base: Path) -> bool:
    """Check whether ``path`` equals ``base`` or lies beneath it.

    The comparison is component-wise, so ``/a/dir10`` is not considered to
    be under ``/a/dir1``.
    """
    return path == base or base in path.parents


def relocate(path: Path, old_base: Path, new_base: Path) -> Path:
    """Rewrite the ``old_base`` prefix of ``path`` to ``new_base``."""
    if path == old_base:
        return new_base
    return new_base / path.relative_to(old_base)


def path_depth(path: Path) -> int:
    """Return the number of components in an absolute path."""
    return len(path.parts)


def ensure_parent_dir(path: Path) -> None:
    """Ensure parent directory exists for a path.

    Args:
        path: Path whose parent directory should exist

    Raises:
        OSError: If parent directory cannot be created
    """
    parent = path.parent
    if not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


class PathResolver:
    """Resolves caller paths against a fixed working root.

    Every accepted path, once resolved, is the root itself or a descendant
    of it; anything else raises ``OutOfRootError``.
    """

    def __init__(self, root: Path) -> None:
        self.root = normalize_path(root)

    def resolve(self, path: str | os.PathLike[str]) -> Path:
        """Resolve ``path`` to an absolute path under the working root.

        Args:
            path: Relative (to the root) or absolute path

        Returns:
            Normalized absolute path

        Raises:
            OutOfRootError: If the path escapes the working root
        """
        resolved = normalize_path(path, self.root)
        if not is_same_or_descendant(resolved, self.root):
            raise OutOfRootError(path, self.root)
        return resolved

    def relative(self, path: Path) -> str:
        """Return ``path`` relative to the root using forward slashes."""
        return path.relative_to(self.root).as_posix()
