"""Transformer interface, loader and runner."""

from stagedfs.transformers.loader import TransformerLoadError, load_transformer
from stagedfs.transformers.runner import (
    TransformerOptionsError,
    run_transformer,
    validate_options,
)
from stagedfs.transformers.types import (
    FunctionTransformer,
    Transformer,
    TransformerContext,
    TransformerOption,
)

__all__ = [
    "FunctionTransformer",
    "Transformer",
    "TransformerContext",
    "TransformerLoadError",
    "TransformerOption",
    "TransformerOptionsError",
    "load_transformer",
    "run_transformer",
    "validate_options",
]
