"""Tests for the diff exclusion patterns."""

from pathlib import Path
from unittest.mock import patch

import pytest

from commit_ai.vcs.ignore import (
    DEFAULT_EXCLUDES,
    read_ignore_file,
    resolve_exclusions,
    to_pathspecs,
)


def test_defaults_when_no_ignore_file(tmp_path):
    assert resolve_exclusions(tmp_path) == DEFAULT_EXCLUDES


def test_ignore_file_lines_are_added(tmp_path):
    (tmp_path / ".gitignore").write_text("build/\n.venv\n*.pyc\n", encoding="utf-8")
    patterns = resolve_exclusions(tmp_path)
    assert patterns[: len(DEFAULT_EXCLUDES)] == DEFAULT_EXCLUDES
    assert patterns[len(DEFAULT_EXCLUDES):] == ("build/", ".venv", "*.pyc")


def test_comments_blanks_and_whitespace_dropped(tmp_path):
    (tmp_path / ".gitignore").write_text(
        "# build output\n\n   \n  coverage/  \r\n#.env\n", encoding="utf-8"
    )
    assert read_ignore_file(tmp_path) == ["coverage/"]


def test_duplicates_collapse(tmp_path):
    (tmp_path / ".gitignore").write_text(
        "dist\nnode_modules\n*.log\ntmp\ntmp\n", encoding="utf-8"
    )
    patterns = resolve_exclusions(tmp_path)
    assert len(patterns) == len(set(patterns))
    assert set(patterns) == set(DEFAULT_EXCLUDES) | {"tmp"}


def test_negations_are_skipped(tmp_path):
    (tmp_path / ".gitignore").write_text("*.env\n!example.env\n", encoding="utf-8")
    assert read_ignore_file(tmp_path) == ["*.env"]


def test_unreadable_ignore_file_falls_back_to_defaults(tmp_path):
    (tmp_path / ".gitignore").write_text("secret/\n", encoding="utf-8")
    with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
        assert resolve_exclusions(tmp_path) == DEFAULT_EXCLUDES


def test_ignore_path_that_is_a_directory(tmp_path):
    (tmp_path / ".gitignore").mkdir()
    assert resolve_exclusions(tmp_path) == DEFAULT_EXCLUDES


@pytest.mark.parametrize(
    "content",
    ["", "# only a comment\n", "a\nb\n# c\n\nd\n", "dist\ndist\nyarn.lock\n"],
)
def test_result_is_superset_of_defaults(tmp_path, content):
    (tmp_path / ".gitignore").write_text(content, encoding="utf-8")
    patterns = resolve_exclusions(tmp_path)
    assert set(DEFAULT_EXCLUDES) <= set(patterns)
    assert not any(p.startswith("#") or not p for p in patterns)


def test_to_pathspecs():
    assert to_pathspecs(["dist", "*.log"]) == [":(exclude)dist", ":(exclude)*.log"]
