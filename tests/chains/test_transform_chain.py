"""Tests for transform chain orchestration."""

from collections.abc import Mapping
from io import StringIO
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
from rich.console import Console

from stagedfs.chains.transform_chain import RunOptions, TransformChain
from stagedfs.core.errors import NotFoundError
from stagedfs.transformers.types import FunctionTransformer, TransformerContext


def _reorganize(context: TransformerContext, options: Mapping[str, Any]) -> None:
    context.fs.rm("a.txt")
    context.fs.move("docs", "documentation")
    context.fs.write_text("build/version.txt", "1.0")


def _noop(context: TransformerContext, options: Mapping[str, Any]) -> None:
    return None


def _broken(context: TransformerContext, options: Mapping[str, Any]) -> None:
    context.fs.read_text("missing.txt")


@pytest.fixture
def ui() -> Console:
    return Console(file=StringIO(), width=200)


def _output(ui: Console) -> str:
    assert isinstance(ui.file, StringIO)
    return ui.file.getvalue()


class TestTransformChain:
    """Test transform chain orchestration functionality."""

    @pytest.mark.asyncio
    async def test_dry_run_previews_without_writing(
        self, work_root: Path, ui: Console
    ) -> None:
        chain = TransformChain(logger=Mock(), ui=ui)
        transformer = FunctionTransformer(name="reorganize", func=_reorganize)

        report = await chain.run(
            transformer, opts=RunOptions(cwd=work_root, dry_run=True)
        )

        assert report.dry_run
        assert report.applied is None
        assert report.total_changes == 4
        assert (work_root / "a.txt").exists()
        assert (work_root / "docs").exists()
        assert not (work_root / "build").exists()

        output = _output(ui)
        assert "DRY RUN" in output
        assert "Delete:" in output
        assert "Move:" in output
        assert "Write file:" in output

    @pytest.mark.asyncio
    async def test_run_applies_changes(self, work_root: Path, ui: Console) -> None:
        chain = TransformChain(logger=Mock(), ui=ui)
        transformer = FunctionTransformer(name="reorganize", func=_reorganize)

        report = await chain.run(transformer, opts=RunOptions(cwd=work_root))

        assert report.applied is not None
        assert report.applied.deleted_count == 1
        assert report.applied.moved_count == 1
        assert report.applied.directories_created == 1
        assert report.applied.files_written == 1
        assert not (work_root / "a.txt").exists()
        assert (work_root / "documentation" / "readme.md").read_text() == "# docs"
        assert (work_root / "build" / "version.txt").read_text() == "1.0"
        assert "Applied 4 change(s)" in _output(ui)

    @pytest.mark.asyncio
    async def test_structured_logging(self, work_root: Path, ui: Console) -> None:
        logger = Mock()
        chain = TransformChain(logger=logger, ui=ui)
        transformer = FunctionTransformer(name="reorganize", func=_reorganize)

        report = await chain.run(transformer, opts=RunOptions(cwd=work_root))

        bind_kwargs = logger.bind.call_args.kwargs
        assert bind_kwargs["run_id"] == report.run_id
        assert bind_kwargs["transformer"] == "reorganize"
        assert bind_kwargs["root"] == str(work_root)

        events = [call.args[0] for call in logger.bind.return_value.info.call_args_list]
        assert events == ["transform.start", "transform.preview", "transform.applied"]

    @pytest.mark.asyncio
    async def test_empty_diff(self, work_root: Path, ui: Console) -> None:
        chain = TransformChain(logger=Mock(), ui=ui)

        report = await chain.run(
            FunctionTransformer(name="noop", func=_noop),
            opts=RunOptions(cwd=work_root),
        )

        assert report.diff.is_empty
        assert report.applied is None
        assert "No changes" in _output(ui)

    @pytest.mark.asyncio
    async def test_transformer_errors_propagate(
        self, work_root: Path, ui: Console
    ) -> None:
        chain = TransformChain(logger=Mock(), ui=ui)

        with pytest.raises(NotFoundError):
            await chain.run(
                FunctionTransformer(name="broken", func=_broken),
                opts=RunOptions(cwd=work_root),
            )

    @pytest.mark.asyncio
    async def test_summary(self, work_root: Path, ui: Console) -> None:
        chain = TransformChain(logger=Mock(), ui=ui)

        report = await chain.run(
            FunctionTransformer(name="reorganize", func=_reorganize),
            opts=RunOptions(cwd=work_root, dry_run=True),
        )
        summary = report.summary()

        assert summary.root == work_root
        assert summary.total_changes == 4
        assert summary.deleted_paths == [work_root / "a.txt"]
