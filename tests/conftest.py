"""Pytest configuration and fixtures for stagedfs tests."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from stagedfs.core.constants import CWD_ENV_VAR, DEBUG_ENV_VAR


@pytest.fixture(autouse=True)
def _clean_env() -> Iterator[None]:
    """Keep ambient configuration out of every test."""
    saved = {key: os.environ.pop(key, None) for key in (CWD_ENV_VAR, DEBUG_ENV_VAR)}
    yield
    for key, value in saved.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    """Real tree used by most overlay tests.

    Layout::

        a.txt                 "hello"
        src/app.py            "print('app')"
        src/util/helpers.py   "def helper(): ..."
        docs/readme.md        "# docs"
        node_modules/pkg/index.js
        .git/HEAD
    """
    root = (tmp_path / "work").resolve()
    root.mkdir()
    (root / "a.txt").write_text("hello")
    (root / "src" / "util").mkdir(parents=True)
    (root / "src" / "app.py").write_text("print('app')")
    (root / "src" / "util" / "helpers.py").write_text("def helper(): ...")
    (root / "docs").mkdir()
    (root / "docs" / "readme.md").write_text("# docs")
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / "node_modules" / "pkg" / "index.js").write_text("module.exports = 1")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main")
    return root
