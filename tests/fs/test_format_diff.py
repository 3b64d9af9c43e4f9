"""Tests for diff formatting and summaries."""

import json
from pathlib import Path

from stagedfs.fs.diff import format_staged_diff, summarize_diff
from stagedfs.fs.staged import StagedFileSystem


def test_empty_diff(work_root: Path) -> None:
    diff = StagedFileSystem(cwd=work_root).get_diff()

    formatted = format_staged_diff(diff)

    assert diff.is_empty
    assert formatted.total_changes == 0
    assert formatted.lines == []


def test_format_lists_every_change(work_root: Path) -> None:
    fs = StagedFileSystem(cwd=work_root)
    fs.rm("a.txt")
    fs.move("docs/readme.md", "README.md")
    fs.mkdir("build")
    fs.write_text("build/out.txt", "out")

    formatted = format_staged_diff(fs.get_diff())

    assert formatted.total_changes == 4
    readme = work_root / "docs" / "readme.md"
    assert formatted.lines == [
        f"  🗑️  Delete: {work_root / 'a.txt'}",
        f"  📝 Move: {readme} → {work_root / 'README.md'}",
        f"  📁 Create directory: {work_root / 'build'}",
        f"  📄 Write file: {work_root / 'build' / 'out.txt'}",
    ]


def test_summary_serializes_to_json(work_root: Path) -> None:
    fs = StagedFileSystem(cwd=work_root)
    fs.move("a.txt", "b.txt")
    fs.write_text("c.txt", "12345")

    summary = summarize_diff(fs.get_diff(), work_root)
    payload = json.loads(summary.model_dump_json())

    assert payload["root"] == str(work_root)
    assert payload["total_changes"] == 2
    assert payload["moves"] == [
        {"source": str(work_root / "a.txt"), "destination": str(work_root / "b.txt")}
    ]
    assert payload["writes"] == [
        {"path": str(work_root / "c.txt"), "kind": "file", "size": 5}
    ]
    assert payload["deleted_paths"] == []
