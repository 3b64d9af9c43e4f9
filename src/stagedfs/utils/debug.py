"""Debug utility for stagedfs.

Provides a single debug() function that can be toggled via the
STAGEDFS_DEBUG environment variable. The filesystem layer reports every
staged mutation through it.

Usage:
    from stagedfs.utils.debug import debug

    debug("Staged write: /work/a.txt")
    debug(f"Registered {count} rename bindings")

Environment:
    STAGEDFS_DEBUG: Set to '1', 'true', 'yes' (case-insensitive) to enable
                    debug output. Any other value or unset disables it.

Example:
    $ STAGEDFS_DEBUG=1 stagedfs run ./rename_tests.py --dry-run
    $ stagedfs run ./rename_tests.py --dry-run     # Debug disabled (default)
"""

import os
import sys
from typing import Any

from stagedfs.core.constants import DEBUG_ENV_VAR

# Determine if debug mode is enabled at module import time
_DEBUG_ENABLED = os.environ.get(DEBUG_ENV_VAR, "").lower() in (
    "1",
    "true",
    "yes",
)


def debug(msg: Any) -> None:
    """Print debug message if STAGEDFS_DEBUG is enabled.

    Args:
        msg: Message to print. Will be converted to string.

    Note:
        The environment variable is read at module import time. Changing it
        after import has no effect unless the module is reloaded.
    """
    if _DEBUG_ENABLED:
        print(f"[DEBUG] {msg}", file=sys.stderr)
