"""Run a transformer against a fresh staged filesystem."""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Mapping
from typing import Any

from stagedfs.core.constants import DEFAULT_IGNORED_GLOBS
from stagedfs.fs.diff import StagedDiff
from stagedfs.fs.paths import resolve_working_root
from stagedfs.fs.staged import StagedFileSystem
from stagedfs.fs.types import PathLike
from stagedfs.transformers.types import (
    Transformer,
    TransformerContext,
    TransformerOption,
)


class TransformerOptionsError(ValueError):
    """Raised when options passed to a transformer are invalid."""


def validate_options(
    transformer: Transformer, options: Mapping[str, Any]
) -> dict[str, Any]:
    """Check ``options`` against the transformer's declared options.

    Transformers that declare no options receive ``options`` unchanged.

    Raises:
        TransformerOptionsError: On unknown, missing or invalid options
    """
    declared: dict[str, TransformerOption] | None = getattr(
        transformer, "options", None
    )
    if not declared:
        return dict(options)

    unknown = [key for key in options if key not in declared]
    if unknown:
        raise TransformerOptionsError(
            f'Unknown options for transformer "{transformer.name}": '
            f"{', '.join(unknown)}"
        )

    validated: dict[str, Any] = {}
    for key, option in declared.items():
        if key not in options or options[key] is None:
            if option.required:
                raise TransformerOptionsError(
                    f'Missing required option "{key}" for transformer '
                    f'"{transformer.name}"'
                )
            continue
        try:
            validated[key] = option.coerce(options[key])
        except ValueError as exc:
            raise TransformerOptionsError(
                f'Invalid value for option "{key}" in transformer '
                f'"{transformer.name}": {exc}'
            ) from exc
    return validated


async def run_transformer(
    transformer: Transformer,
    options: Mapping[str, Any] | None = None,
    *,
    cwd: PathLike | None = None,
    ignored_globs: Iterable[str] = DEFAULT_IGNORED_GLOBS,
) -> StagedDiff:
    """Run ``transformer`` and return the diff it staged.

    Nothing is written to disk; pass the diff to
    :func:`stagedfs.fs.apply.apply_staged_diff` to commit it.

    Args:
        transformer: Transformer to run
        options: Raw option values keyed by option name
        cwd: Working root of the run
        ignored_globs: Patterns hidden from the transformer's globs

    Returns:
        Snapshot of every staged change
    """
    validated = validate_options(transformer, options or {})
    root = resolve_working_root(cwd)

    fs = StagedFileSystem(cwd=root, ignored_globs=ignored_globs)
    context = TransformerContext(fs=fs, cwd=root)

    result = transformer.transform(context, validated)
    if inspect.isawaitable(result):
        await result

    return fs.get_diff()
