"""Tests for path helpers and the working root resolver."""

import sys
from pathlib import Path

import pytest

from stagedfs.core.errors import OutOfRootError
from stagedfs.fs.paths import (
    PathResolver,
    is_same_or_descendant,
    normalize_path,
    path_depth,
    relocate,
    resolve_working_root,
)


def test_normalize_path_is_lexical(tmp_path: Path) -> None:
    assert normalize_path("a/../b/./c", tmp_path) == tmp_path / "b" / "c"
    assert normalize_path(tmp_path / "x") == tmp_path / "x"


def test_normalize_path_unicode_form(tmp_path: Path) -> None:
    decomposed = "cafe\u0301"
    expected = "caf\u00e9" if sys.platform == "darwin" else decomposed

    assert normalize_path(decomposed, tmp_path).name == expected


def test_is_same_or_descendant_is_separator_aware() -> None:
    base = Path("/a/dir1")

    assert is_same_or_descendant(Path("/a/dir1"), base)
    assert is_same_or_descendant(Path("/a/dir1/x"), base)
    assert not is_same_or_descendant(Path("/a/dir10"), base)
    assert not is_same_or_descendant(Path("/a/dir10/x"), base)


def test_relocate() -> None:
    assert relocate(Path("/a/src"), Path("/a/src"), Path("/a/lib")) == Path("/a/lib")
    assert relocate(Path("/a/src/x/y"), Path("/a/src"), Path("/b")) == Path("/b/x/y")


def test_path_depth_orders_parents_first() -> None:
    assert path_depth(Path("/a")) < path_depth(Path("/a/b"))


class TestResolveWorkingRoot:
    """Working root precedence: explicit, environment, process cwd."""

    def test_explicit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STAGEDFS_CWD", "/somewhere/else")

        assert resolve_working_root(tmp_path) == tmp_path.resolve()

    def test_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("STAGEDFS_CWD", str(tmp_path))

        assert resolve_working_root() == tmp_path.resolve()

    def test_process_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        assert resolve_working_root() == tmp_path.resolve()


class TestPathResolver:
    """Resolution against a fixed root."""

    def test_resolve_relative(self, tmp_path: Path) -> None:
        resolver = PathResolver(tmp_path)

        assert resolver.resolve("a/b.txt") == tmp_path / "a" / "b.txt"
        assert resolver.resolve(".") == tmp_path

    def test_escape_raises(self, tmp_path: Path) -> None:
        resolver = PathResolver(tmp_path / "root")

        with pytest.raises(OutOfRootError) as exc_info:
            resolver.resolve("../../etc/passwd")

        assert exc_info.value.root == str(tmp_path / "root")

    def test_sibling_with_shared_prefix_is_outside(self, tmp_path: Path) -> None:
        resolver = PathResolver(tmp_path / "work")

        with pytest.raises(OutOfRootError):
            resolver.resolve(tmp_path / "work2" / "file.txt")

    def test_relative_uses_forward_slashes(self, tmp_path: Path) -> None:
        resolver = PathResolver(tmp_path)

        assert resolver.relative(tmp_path / "a" / "b.txt") == "a/b.txt"
