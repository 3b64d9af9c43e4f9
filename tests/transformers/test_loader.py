"""Tests for loading transformers from files and modules."""

from pathlib import Path

import pytest

from stagedfs.transformers.loader import TransformerLoadError, load_transformer
from stagedfs.transformers.types import Transformer

TRANSFORMER_SOURCE = '''
from stagedfs.transformers import FunctionTransformer


def _touch(context, options):
    context.fs.write_text("touched.txt", "yes")


transformer = FunctionTransformer(name="touch", func=_touch)
other = FunctionTransformer(name="other", func=_touch)
not_a_transformer = 42
'''


@pytest.fixture
def transformer_file(tmp_path: Path) -> Path:
    path = tmp_path / "touch_transformer.py"
    path.write_text(TRANSFORMER_SOURCE)
    return path


def test_load_from_file(transformer_file: Path) -> None:
    transformer = load_transformer(str(transformer_file))

    assert isinstance(transformer, Transformer)
    assert transformer.name == "touch"


def test_load_named_attribute(transformer_file: Path) -> None:
    transformer = load_transformer(f"{transformer_file}:other")

    assert transformer.name == "other"


def test_missing_attribute(transformer_file: Path) -> None:
    with pytest.raises(TransformerLoadError, match="no attribute"):
        load_transformer(f"{transformer_file}:missing")


def test_not_a_transformer(transformer_file: Path) -> None:
    with pytest.raises(TransformerLoadError, match="not a transformer"):
        load_transformer(f"{transformer_file}:not_a_transformer")


def test_broken_file(tmp_path: Path) -> None:
    broken = tmp_path / "broken.py"
    broken.write_text("def oops(:\n")

    with pytest.raises(TransformerLoadError, match="Failed to load"):
        load_transformer(str(broken))


def test_missing_module() -> None:
    with pytest.raises(TransformerLoadError):
        load_transformer("stagedfs_no_such_module_anywhere")


def test_load_from_module() -> None:
    with pytest.raises(TransformerLoadError, match="no attribute"):
        load_transformer("stagedfs.transformers.types:nothing_here")
