"""End-to-end tests for matching patterns against a real directory tree."""

from __future__ import annotations

import itertools
import os
from pathlib import Path

import pytest

from treeglob import GlobOptions, GlobWalkError, Globber, glob, match


def _touch(path: Path, text: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def _tree(root: Path, *names: str) -> None:
    for name in names:
        if name.endswith("/"):
            (root / name).mkdir(parents=True, exist_ok=True)
        else:
            _touch(root / name)


def test_recursive_pattern(tmp_path: Path):
    _tree(tmp_path, "src/a.cs", "src/sub/b.cs", "src/sub/c.txt", "other/d.cs")
    assert glob("src/**/*.cs", base_directory=tmp_path) == ["src/a.cs", "src/sub/b.cs"]


def test_match_base_with_braces(tmp_path: Path):
    _tree(tmp_path, "img/x.png", "img/y.gif", "top.jpg")
    result = glob("*.{jpg,png}", base_directory=tmp_path, match_base=True)
    assert result == ["top.jpg", "img/x.png"]


def test_without_match_base_basename_patterns_stay_at_the_base(tmp_path: Path):
    _tree(tmp_path, "img/x.png", "top.png")
    assert glob("*.png", base_directory=tmp_path) == ["top.png"]


def test_globstar_between_literals(tmp_path: Path):
    _tree(tmp_path, "a/b", "a/x/b", "a/x/c")
    assert glob("a/**/b", base_directory=tmp_path) == ["a/b", "a/x/b"]


def test_literal_path(tmp_path: Path):
    _tree(tmp_path, "docs/readme.md")
    assert glob("docs/readme.md", base_directory=tmp_path) == ["docs/readme.md"]
    assert glob("docs/missing.md", base_directory=tmp_path) == []


def test_literal_path_respects_ignore(tmp_path: Path):
    _tree(tmp_path, "docs/readme.md")
    assert glob("docs/readme.md", base_directory=tmp_path, ignore=["*.md"]) == []


def test_trailing_slash_names_a_directory(tmp_path: Path):
    _tree(tmp_path, "src/a.py", "file.txt")
    assert glob("src/", base_directory=tmp_path) == ["src"]
    assert glob("file.txt/", base_directory=tmp_path) == []


def test_trailing_slash_wildcard_matches_only_directories(tmp_path: Path):
    _tree(tmp_path, "alpha/", "beta/x.txt", "file.txt")
    assert glob("*/", base_directory=tmp_path) == ["alpha", "beta"]


def test_include_directories(tmp_path: Path):
    _tree(tmp_path, "alpha/", "file.txt")
    assert glob("*", base_directory=tmp_path) == ["file.txt"]
    assert glob("*", base_directory=tmp_path, include_directories=True) == ["alpha", "file.txt"]


@pytest.mark.parametrize("pattern", [None, "", "   "])
def test_empty_patterns_match_nothing(tmp_path: Path, pattern: str | None):
    _tree(tmp_path, "a.txt")
    assert glob(pattern, base_directory=tmp_path) == []


def test_non_string_pattern_raises_immediately():
    with pytest.raises(TypeError):
        match(123)  # pyright: ignore[reportArgumentType]


def test_results_are_deduplicated_across_expansions(tmp_path: Path):
    _tree(tmp_path, "a.txt", "b.txt")
    assert glob("{*.txt,a.*}", base_directory=tmp_path) == ["a.txt", "b.txt"]


def test_case_insensitive_results_are_deduplicated(tmp_path: Path):
    _tree(tmp_path, "a.txt")
    result = glob("{*.TXT,*.txt}", base_directory=tmp_path, case_sensitive=False)
    assert result == ["a.txt"]


def test_case_sensitive_matching(tmp_path: Path):
    _tree(tmp_path, "UPPER.TXT")
    assert glob("*.txt", base_directory=tmp_path, case_sensitive=True) == []
    assert glob("*.txt", base_directory=tmp_path, case_sensitive=False) == ["UPPER.TXT"]


def test_absolute_output(tmp_path: Path):
    _tree(tmp_path, "a.txt")
    result = glob("*.txt", base_directory=tmp_path, absolute=True)
    assert result == [(tmp_path / "a.txt").as_posix()]


def test_realpath_output(tmp_path: Path):
    _tree(tmp_path, "a.txt")
    result = glob("*.txt", base_directory=tmp_path, realpath=True)
    assert result == [Path(os.path.realpath(tmp_path / "a.txt")).as_posix()]


def test_absolute_pattern_gives_absolute_output(tmp_path: Path):
    _tree(tmp_path, "sub/a.txt")
    pattern = (tmp_path / "sub").as_posix() + "/*.txt"
    assert glob(pattern, base_directory=tmp_path) == [(tmp_path / "sub" / "a.txt").as_posix()]


def test_ignore_is_relative_to_the_walk_root(tmp_path: Path):
    _tree(tmp_path, "keep/a.txt", "sub/b.txt", "sub/deep/c.txt")
    assert glob("**/*.txt", base_directory=tmp_path, ignore=["sub/**"]) == ["keep/a.txt"]


def test_ignore_with_negation(tmp_path: Path):
    _tree(tmp_path, "error.log", "keep.log", "nested/other.log")
    result = glob("**/*.log", base_directory=tmp_path, ignore=["*.log", "!keep.log"])
    assert result == ["keep.log"]


def test_negation_disabled(tmp_path: Path):
    _tree(tmp_path, "error.log", "keep.log")
    result = glob(
        "*.log", base_directory=tmp_path, ignore=["*.log", "!keep.log"], allow_negation=False
    )
    assert result == []


def test_dot_option(tmp_path: Path):
    _tree(tmp_path, ".env", "visible", ".config/settings")
    assert glob("*", base_directory=tmp_path) == ["visible"]
    assert glob("*", base_directory=tmp_path, dot=True) == [".env", "visible"]
    assert glob(".*", base_directory=tmp_path) == [".env"]
    assert glob("**/settings", base_directory=tmp_path) == []
    assert glob("**/settings", base_directory=tmp_path, dot=True) == [".config/settings"]


def test_missing_directory_is_skipped_by_default(tmp_path: Path):
    assert glob("missing/**/*.txt", base_directory=tmp_path) == []


def test_missing_directory_raises_when_strict(tmp_path: Path):
    with pytest.raises(GlobWalkError):
        glob("missing/*.txt", base_directory=tmp_path, throw_on_error=True)


def test_braces_disabled_matches_literally(tmp_path: Path):
    _tree(tmp_path, "{a,b}.txt", "a.txt")
    assert glob("{a,b}.txt", base_directory=tmp_path, expand_braces=False) == ["{a,b}.txt"]
    assert glob("{a,b}.txt", base_directory=tmp_path) == ["a.txt"]


@pytest.mark.skipif(os.name == "nt", reason="backslash is a separator on Windows")
def test_escaped_magic_is_literal(tmp_path: Path):
    _tree(tmp_path, "a*b.txt", "axb.txt")
    assert glob("a\\*b.txt", base_directory=tmp_path) == ["a*b.txt"]
    assert glob("a*b.txt", base_directory=tmp_path) == ["a*b.txt", "axb.txt"]


def test_gitignore_option(tmp_path: Path):
    _tree(tmp_path, "a.txt", "build/out.txt", "src/gen/x.txt", "src/y.txt")
    _touch(tmp_path / ".gitignore", "build/\n")
    _touch(tmp_path / "src" / ".gitignore", "gen/\n")

    everything = glob("**/*.txt", base_directory=tmp_path)
    assert everything == ["a.txt", "build/out.txt", "src/y.txt", "src/gen/x.txt"]
    assert glob("**/*.txt", base_directory=tmp_path, gitignore=True) == ["a.txt", "src/y.txt"]


def test_matching_is_lazy(tmp_path: Path):
    for i in range(20):
        _touch(tmp_path / f"d{i:02d}" / "f.txt")
    first_two = list(itertools.islice(match("**/*.txt", base_directory=tmp_path), 2))
    assert first_two == ["d00/f.txt", "d01/f.txt"]


def test_globber_reuses_options(tmp_path: Path):
    _tree(tmp_path, "a.py", "b.txt")
    globber = Globber(GlobOptions(base_directory=tmp_path))
    assert globber.match("*.py") == ["a.py"]
    assert globber.match("*.txt") == ["b.txt"]


def test_options_argument_with_overrides(tmp_path: Path):
    _tree(tmp_path, ".hidden", "shown")
    options = GlobOptions(base_directory=tmp_path)
    assert glob("*", options) == ["shown"]
    assert glob("*", options, dot=True) == [".hidden", "shown"]
    assert options.dot is False


def test_single_ignore_string(tmp_path: Path):
    _tree(tmp_path, "a.log", "b.txt", "sub/c.txt")
    assert glob("**/*", base_directory=tmp_path, ignore="*.log") == ["b.txt", "sub/c.txt"]
