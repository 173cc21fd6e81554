"""Tests for .gitignore loading and per-directory chains."""

from __future__ import annotations

from pathlib import Path

from treeglob.walking.gitignore import (
    GitignoreChain,
    _read_ignore_file,  # pyright: ignore[reportPrivateUsage]
    load_gitignore,
)


def test_load_gitignore_missing(tmp_path: Path):
    assert load_gitignore(tmp_path) is None


def test_load_gitignore_comments_only(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("# nothing here\n\n")
    assert load_gitignore(tmp_path) is None


def test_read_ignore_file_non_utf8(tmp_path: Path):
    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_bytes(b"\x80\x81\x82\xff\xfe")
    assert _read_ignore_file(ignore_file) is None


def test_load_gitignore_patterns(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("# build output\n*.o\nbuild/\n")
    path_spec = load_gitignore(tmp_path)
    assert path_spec is not None
    assert path_spec.match_file("main.o")
    assert path_spec.match_file("build/")
    assert not path_spec.match_file("main.c")


def test_chain_applies_root_rules_at_any_depth(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.tmp\n")
    chain = GitignoreChain(tmp_path)
    assert chain.is_ignored("a/b/c.tmp")
    assert not chain.is_ignored("a/b/c.txt")


def test_chain_applies_nested_rules_to_their_subtree(tmp_path: Path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("generated/\n")
    chain = GitignoreChain(tmp_path)
    assert chain.is_ignored("sub/generated", is_dir=True)
    assert not chain.is_ignored("generated", is_dir=True)


def test_chain_without_gitignore_files(tmp_path: Path):
    chain = GitignoreChain(tmp_path)
    assert not chain.is_ignored("anything/at/all.txt")
    assert not chain.is_ignored("")
