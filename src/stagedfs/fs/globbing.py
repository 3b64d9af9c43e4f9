"""Glob matching over POSIX-style relative paths.

Supports the pattern subset transformation code relies on: ``*``, ``?`` and
``[...]`` within a segment (via :mod:`fnmatch`), ``**`` as a whole segment
matching zero or more segments, and ``{a,b}`` brace alternatives.
Wildcards never match the leading dot of a segment unless the pattern
segment starts with a dot itself.
"""

import fnmatch
import re
from collections.abc import Iterable, Sequence
from functools import lru_cache

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def normalize_patterns(patterns: str | Iterable[str]) -> tuple[str, ...]:
    """Accept a single pattern or an iterable of patterns."""
    if isinstance(patterns, str):
        return (patterns,)
    return tuple(patterns)


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, innermost groups first.

    Examples:
        >>> expand_braces("src/*.{ts,tsx}")
        ['src/*.ts', 'src/*.tsx']
    """
    match = _BRACE_RE.search(pattern)
    if match is None or "," not in match.group(1):
        return [pattern]

    expanded: list[str] = []
    for option in match.group(1).split(","):
        candidate = pattern[: match.start()] + option + pattern[match.end() :]
        expanded.extend(expand_braces(candidate))
    return expanded


def _segment_matches(segment: str, pattern: str) -> bool:
    if segment.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatch.fnmatchcase(segment, pattern)


def _match_segments(path: Sequence[str], pattern: Sequence[str]) -> bool:
    if not pattern:
        return not path

    head, rest = pattern[0], pattern[1:]
    if head == "**":
        # zero segments
        if _match_segments(path, rest):
            return True
        # one more segment, keep the globstar
        if not path or path[0].startswith("."):
            return False
        return _match_segments(path[1:], pattern)

    if not path or not _segment_matches(path[0], head):
        return False
    return _match_segments(path[1:], rest)


@lru_cache(maxsize=512)
def _compile(pattern: str) -> tuple[tuple[str, ...], ...]:
    return tuple(
        tuple(part for part in expanded.strip("/").split("/") if part not in ("", "."))
        for expanded in expand_braces(pattern)
    )


def glob_match(relative_path: str, pattern: str) -> bool:
    """Check a forward-slash relative path against a single pattern."""
    segments = [part for part in relative_path.split("/") if part]
    return any(_match_segments(segments, compiled) for compiled in _compile(pattern))


def matches_any(relative_path: str, patterns: Iterable[str]) -> bool:
    """Check a forward-slash relative path against several patterns."""
    return any(glob_match(relative_path, pattern) for pattern in patterns)
