"""CLI entry point for running transformers."""

from __future__ import annotations

import asyncio
import importlib
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

import structlog
from rich.console import Console

from stagedfs.chains.transform_chain import RunOptions, TransformChain
from stagedfs.core.errors import DiffApplyError, StagedFsError
from stagedfs.transformers.loader import TransformerLoadError, load_transformer
from stagedfs.transformers.runner import TransformerOptionsError

app: TyperType = typer.Typer(
    help="Run file tree transformers against a staged view.",
    no_args_is_help=True,
)


TransformerArgument = Annotated[
    str,
    typer.Argument(help="Transformer file or module, optionally with :attribute."),
]
CwdOption = Annotated[
    Path | None,
    typer.Option("--cwd", help="Working root (defaults to $STAGEDFS_CWD or .)."),
]
DryRunFlag = Annotated[
    bool,
    typer.Option("--dry-run", help="Preview changes without writing to disk."),
]
JsonFlag = Annotated[
    bool,
    typer.Option("--json", help="Emit the diff summary as JSON."),
]
OptionList = Annotated[
    list[str] | None,
    typer.Option(
        "--option",
        "-o",
        help="Transformer option as key=value; repeat for several.",
    ),
]


def parse_option_pairs(pairs: Sequence[str]) -> dict[str, str]:
    """Parse ``key=value`` strings into a dict.

    Raises:
        ValueError: If a pair has no ``=`` or an empty key
    """
    parsed: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        parsed[key] = value
    return parsed


@app.callback()
def main() -> None:
    """Run file tree transformers against a staged view."""


def run_transformer_command(  # noqa: D401
    transformer: TransformerArgument,
    cwd: CwdOption = None,
    dry_run: DryRunFlag = False,
    json_output: JsonFlag = False,
    option: OptionList = None,
) -> None:
    """Run a transformer and apply (or preview) the changes it stages."""

    try:
        options = parse_option_pairs(option or [])
        loaded = load_transformer(transformer)
    except (ValueError, TransformerLoadError) as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    if json_output:
        # stdout carries only the JSON document
        chain = TransformChain(
            logger=structlog.wrap_logger(structlog.ReturnLogger()),
            ui=Console(quiet=True),
        )
    else:
        chain = TransformChain(
            logger=structlog.wrap_logger(structlog.PrintLogger(sys.stderr)),
        )

    try:
        report = asyncio.run(
            chain.run(loaded, options, RunOptions(cwd=cwd, dry_run=dry_run))
        )
    except (TransformerOptionsError, DiffApplyError, StagedFsError) as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    if json_output:
        typer.echo(report.summary().model_dump_json(indent=2))


def run_cli(args: Sequence[str] | None = None) -> None:
    app(args=args)


app.command("run")(run_transformer_command)
