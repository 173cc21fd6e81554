"""Tests for CLI help text."""

from __future__ import annotations

import pytest

from treeglob.cli import main


def _render_help(capsys: pytest.CaptureFixture[str]) -> str:
    """Run `treeglob --help` via CLI entrypoint and return captured stdout."""
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    return capsys.readouterr().out


def test_help_includes_tagline(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "treeglob: Shell-style glob matching against the filesystem" in out


def test_help_includes_brief_common_usage(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "Common usage:" in out
    assert "treeglob 'src/**/*.py'" in out
    assert "treeglob '*.{jpg,png}' --match-base" in out


def test_help_lists_matching_flags(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    for flag in ("--ignore", "--dot", "--match-base", "--include-dirs", "--no-braces", "--strict"):
        assert flag in out
