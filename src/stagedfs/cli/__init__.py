"""CLI entrypoints for stagedfs."""

from stagedfs.cli.run import app

__all__ = ["app"]
