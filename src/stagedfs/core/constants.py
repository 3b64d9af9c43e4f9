"""Core constants for stagedfs.

This module defines constants used throughout the application:
- Glob patterns ignored by every transformation run
- Environment variables recognized by the configuration layer
"""

# ============================================================================
# Ignored Globs
# ============================================================================

#: Paths that transformers never see through glob() and that are not
#: enumerated when a real directory is moved
DEFAULT_IGNORED_GLOBS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/.git/**",
    "**/.venv/**",
    "**/__pycache__/**",
)

# ============================================================================
# Environment
# ============================================================================

#: Overrides the working root when no cwd is passed explicitly
CWD_ENV_VAR = "STAGEDFS_CWD"

#: Enables debug() output when set to 1/true/yes
DEBUG_ENV_VAR = "STAGEDFS_DEBUG"

#: Default transformer attribute looked up by the loader
DEFAULT_TRANSFORMER_ATTRIBUTE = "transformer"
