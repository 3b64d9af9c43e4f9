"""Tests for the debug utility module.

The debug utility provides a single entrypoint for debug logging that can be
toggled via the STAGEDFS_DEBUG environment variable.
"""

import importlib
import os
from collections.abc import Iterator
from io import StringIO
from unittest.mock import patch

import pytest


def _reload_debug():
    from stagedfs.utils import debug as debug_module

    importlib.reload(debug_module)
    return debug_module.debug


@pytest.fixture(autouse=True)
def _reset_debug_state() -> Iterator[None]:
    yield
    os.environ.pop("STAGEDFS_DEBUG", None)
    _reload_debug()


def test_debug_import() -> None:
    """Test that debug utility can be imported."""
    from stagedfs.utils.debug import debug

    assert callable(debug)


def test_debug_disabled_by_default() -> None:
    """Test that debug output is disabled when STAGEDFS_DEBUG is not set."""
    os.environ.pop("STAGEDFS_DEBUG", None)
    debug = _reload_debug()

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug("This should not print")
        output = fake_stderr.getvalue()

    assert output == "", f"Expected no output, got: {output}"


def test_debug_enabled_when_env_var_set() -> None:
    """Test that debug output is enabled when STAGEDFS_DEBUG=1."""
    os.environ["STAGEDFS_DEBUG"] = "1"
    debug = _reload_debug()

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug("Test message")
        output = fake_stderr.getvalue()

    assert "Test message" in output, f"Expected 'Test message' in output, got: {output}"
    assert "[DEBUG]" in output, f"Expected '[DEBUG]' prefix in output, got: {output}"


def test_debug_never_writes_to_stdout() -> None:
    """Debug output must not mix with JSON printed on stdout."""
    os.environ["STAGEDFS_DEBUG"] = "1"
    debug = _reload_debug()

    with (
        patch("sys.stdout", new=StringIO()) as fake_stdout,
        patch("sys.stderr", new=StringIO()),
    ):
        debug("stderr only")

    assert fake_stdout.getvalue() == ""


@pytest.mark.parametrize("value", ["1", "true", "True", "TRUE", "yes", "Yes", "YES"])
def test_debug_with_various_truthy_values(value: str) -> None:
    """Test that debug works with various truthy env var values."""
    os.environ["STAGEDFS_DEBUG"] = value
    debug = _reload_debug()

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug(f"Testing {value}")
        output = fake_stderr.getvalue()

    assert f"Testing {value}" in output, (
        f"Failed for STAGEDFS_DEBUG={value}, output: {output}"
    )


@pytest.mark.parametrize("value", ["0", "false", "False", "no", "NO", ""])
def test_debug_disabled_for_falsy_values(value: str) -> None:
    """Test that debug is disabled for falsy env var values."""
    os.environ["STAGEDFS_DEBUG"] = value
    debug = _reload_debug()

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug(f"Testing {value}")
        output = fake_stderr.getvalue()

    assert output == "", (
        f"Expected no output for STAGEDFS_DEBUG={value}, got: {output}"
    )


def test_debug_multiple_messages() -> None:
    """Test that multiple debug calls work correctly."""
    os.environ["STAGEDFS_DEBUG"] = "1"
    debug = _reload_debug()

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug("First message")
        debug("Second message")
        output = fake_stderr.getvalue()

    assert "First message" in output
    assert "Second message" in output
    assert output.count("[DEBUG]") == 2
