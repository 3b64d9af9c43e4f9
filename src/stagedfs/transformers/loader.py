"""Load transformers from files or importable modules."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path

from stagedfs.core.constants import DEFAULT_TRANSFORMER_ATTRIBUTE
from stagedfs.transformers.types import Transformer


class TransformerLoadError(Exception):
    """Raised when a transformer cannot be imported or is malformed."""


def _split_reference(reference: str) -> tuple[str, str]:
    # keep Windows drive letters ("C:\\x.py") intact
    target, sep, attribute = reference.rpartition(":")
    if not sep or not attribute or "/" in attribute or "\\" in attribute:
        return reference, DEFAULT_TRANSFORMER_ATTRIBUTE
    return target, attribute


def _import_file(path: Path) -> object:
    module_name = f"stagedfs_transformer_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise TransformerLoadError(f"Cannot import transformer file: {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def load_transformer(reference: str) -> Transformer:
    """Load a transformer.

    Args:
        reference: ``path/to/file.py`` or ``package.module``, optionally
            followed by ``:attribute`` (defaults to ``transformer``)

    Returns:
        The transformer object

    Raises:
        TransformerLoadError: If the module or attribute cannot be loaded
    """
    target, attribute = _split_reference(reference)

    try:
        if target.endswith(".py") or Path(target).is_file():
            module = _import_file(Path(target).resolve())
        else:
            module = importlib.import_module(target)
    except TransformerLoadError:
        raise
    except Exception as exc:
        raise TransformerLoadError(
            f'Failed to load transformer "{reference}": {exc}'
        ) from exc

    transformer = getattr(module, attribute, None)
    if transformer is None:
        raise TransformerLoadError(
            f'Transformer "{reference}" has no attribute "{attribute}"'
        )
    if not isinstance(transformer, Transformer):
        raise TransformerLoadError(
            f'"{reference}" is not a transformer (needs name and transform)'
        )
    return transformer
