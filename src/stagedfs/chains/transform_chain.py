"""Transform chain: run a transformer, preview its diff, then commit it.

This module provides the TransformChain class that drives a whole
transformation run with structured logging and Rich console output.
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from stagedfs.core.constants import DEFAULT_IGNORED_GLOBS
from stagedfs.core.schemas import DiffSummary
from stagedfs.fs.apply import ApplyReport, apply_staged_diff
from stagedfs.fs.diff import StagedDiff, format_staged_diff, summarize_diff
from stagedfs.fs.paths import resolve_working_root
from stagedfs.transformers.runner import run_transformer
from stagedfs.transformers.types import Transformer


@dataclass
class RunOptions:
    """Options for a transformation run.

    Attributes:
        cwd: Working root; None falls back to STAGEDFS_CWD, then the
            process working directory
        dry_run: Preview the diff without touching disk
        ignored_globs: Patterns hidden from the transformer's globs
    """

    cwd: Path | None = None
    dry_run: bool = False
    ignored_globs: tuple[str, ...] = DEFAULT_IGNORED_GLOBS


@dataclass
class RunReport:
    """Outcome of a transformation run."""

    run_id: str
    transformer: str
    root: Path
    diff: StagedDiff
    dry_run: bool
    applied: ApplyReport | None = None
    preview: list[str] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return self.diff.total_changes

    def summary(self) -> DiffSummary:
        return summarize_diff(self.diff, self.root)


class TransformChain:
    """Runs transformers against a staged view and commits the result."""

    def __init__(self, logger: Any = None, ui: Console | None = None) -> None:
        """Initialize transform chain.

        Args:
            logger: Optional structlog logger instance
            ui: Optional Rich console for output
        """
        self._logger = logger or structlog.get_logger()
        self._ui = ui or Console()

    async def run(
        self,
        transformer: Transformer,
        options: Mapping[str, Any] | None = None,
        opts: RunOptions | None = None,
    ) -> RunReport:
        """Run ``transformer`` and apply (or preview) what it staged.

        Args:
            transformer: Transformer to run
            options: Raw transformer option values
            opts: Run options

        Returns:
            RunReport with the diff and, unless dry-run, the apply report

        Raises:
            TransformerOptionsError: If the options are invalid
            DiffApplyError: If committing the diff fails part way
        """
        opts = opts or RunOptions()
        root = resolve_working_root(opts.cwd)
        run_id = str(uuid.uuid4())

        bound_logger = self._logger.bind(
            run_id=run_id,
            transformer=transformer.name,
            root=str(root),
            dry_run=opts.dry_run,
        )
        bound_logger.info("transform.start")

        with self._create_progress() as progress:
            task = progress.add_task(f"Transform — {transformer.name}", total=None)
            diff = await run_transformer(
                transformer,
                options,
                cwd=root,
                ignored_globs=opts.ignored_globs,
            )
            progress.update(task, completed=1, total=1)

        formatted = format_staged_diff(diff)
        report = RunReport(
            run_id=run_id,
            transformer=transformer.name,
            root=root,
            diff=diff,
            dry_run=opts.dry_run,
            preview=formatted.lines,
        )
        bound_logger.info(
            "transform.preview",
            total_changes=diff.total_changes,
            deleted_count=len(diff.deleted_paths),
            moved_count=len(diff.move_operations),
            staged_count=len(diff.staged_content),
        )

        if diff.is_empty:
            self._ui.print("✨ [green]No changes[/green]")
            return report

        if opts.dry_run:
            self._show_preview(formatted.lines, diff.total_changes)
            return report

        report.applied = apply_staged_diff(diff)
        bound_logger.info(
            "transform.applied",
            report_id=report.applied.report_id,
            deleted_count=report.applied.deleted_count,
            moved_count=report.applied.moved_count,
            directories_created=report.applied.directories_created,
            files_written=report.applied.files_written,
        )
        self._ui.print(
            f"✅ [green]Applied {report.applied.total_changes} change(s)[/green]"
        )
        return report

    def _create_progress(self) -> Progress:
        """Create Rich progress display."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            console=self._ui,
            transient=True,
        )

    def _show_preview(self, lines: list[str], total_changes: int) -> None:
        self._ui.print(
            f"🔍 [blue]DRY RUN[/blue] {total_changes} pending change(s):"
        )
        for line in lines:
            self._ui.print(line, markup=False, highlight=False)
