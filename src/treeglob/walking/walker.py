"""
Directory walker driven by a split glob pattern.

The walk is a generator: a directory is only listed when the consumer asks
for results that could come from it, and each listing is read completely
before anything is yielded, so stopping early leaves no open handles.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from treeglob.errors import GlobWalkError
from treeglob.options import GlobOptions
from treeglob.patterns.segment import GLOBSTAR, SegmentMatcher, compile_segment
from treeglob.walking.gitignore import GitignoreChain
from treeglob.walking.ignore_filter import IgnoreFilter

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entry:
    """One directory entry, read fresh on every visit."""

    name: str
    path: str
    rel: str
    is_dir: bool
    is_symlink: bool


def _make_entry(dir_entry: os.DirEntry[str], dir_rel: str) -> Entry:
    try:
        is_dir = dir_entry.is_dir()
    except OSError:
        is_dir = False
    try:
        is_symlink = dir_entry.is_symlink()
    except OSError:
        is_symlink = False
    rel = f"{dir_rel}/{dir_entry.name}" if dir_rel else dir_entry.name
    return Entry(dir_entry.name, dir_entry.path, rel, is_dir, is_symlink)


class GlobWalker:
    """
    Walks the tree under `root`, yielding absolute paths of matching entries.

    `ignore` is consulted with paths relative to `root`; `gitignore`, if given,
    adds the rules of `.gitignore` files found along the way.
    """

    def __init__(
        self,
        root: str,
        options: GlobOptions,
        ignore: IgnoreFilter | None = None,
        gitignore: GitignoreChain | None = None,
    ) -> None:
        self.root: str = os.path.abspath(root or ".")
        self._options: GlobOptions = options
        self._ignore: IgnoreFilter = ignore if ignore is not None else IgnoreFilter()
        self._gitignore: GitignoreChain | None = gitignore

    def _identity(self, path: str) -> str:
        if self._options.follow_symlinks:
            return os.path.realpath(path)
        return path

    def _read_entries(self, dir_path: str, dir_rel: str) -> list[Entry] | None:
        try:
            with os.scandir(dir_path) as it:
                entries = [_make_entry(e, dir_rel) for e in it]
        except OSError as e:
            if self._options.throw_on_error:
                raise GlobWalkError(dir_path, e) from e
            log.debug("Skipping unreadable directory %s: %s", dir_path, e)
            return None
        entries.sort(key=lambda entry: entry.name)
        return entries

    def _is_excluded(self, rel: str, is_dir: bool) -> bool:
        if self._ignore.is_ignored(rel):
            return True
        return self._gitignore is not None and self._gitignore.is_ignored(rel, is_dir)

    def _can_descend(self, entry: Entry) -> bool:
        if not self._options.dot and entry.name.startswith("."):
            return False
        return self._options.follow_symlinks or not entry.is_symlink

    def walk(self, segments: Sequence[str], directory_only: bool = False) -> Iterator[str]:
        """
        Yield paths under the root matching `segments` in order.

        `**` segments span zero or more directory levels. With `directory_only`
        (pattern ended in `/`) only directories are yielded.
        """
        visited: set[tuple[str, int]] = set()
        yield from self._walk(self.root, "", tuple(segments), 0, directory_only, visited)

    def _walk(
        self,
        dir_path: str,
        dir_rel: str,
        segments: tuple[str, ...],
        index: int,
        directory_only: bool,
        visited: set[tuple[str, int]],
    ) -> Iterator[str]:
        key = (self._identity(dir_path), index)
        if key in visited:
            return
        visited.add(key)

        entries = self._read_entries(dir_path, dir_rel)
        if entries is None:
            return

        options = self._options
        if index == len(segments):
            if (directory_only or options.include_directories) and not self._is_excluded(dir_rel, True):
                yield dir_path
            return

        segment = segments[index]
        if segment == GLOBSTAR:
            yield from self._walk(dir_path, dir_rel, segments, index + 1, directory_only, visited)
            for entry in entries:
                if not entry.is_dir or not self._can_descend(entry):
                    continue
                if self._is_excluded(entry.rel, True):
                    continue
                yield from self._walk(entry.path, entry.rel, segments, index, directory_only, visited)
            return

        matcher = compile_segment(segment, options.case_sensitive, options.dot)
        is_last = index == len(segments) - 1
        for entry in entries:
            if not matcher.test(entry.name):
                continue
            if self._is_excluded(entry.rel, entry.is_dir):
                continue
            if is_last:
                if directory_only:
                    if entry.is_dir:
                        yield entry.path
                elif not entry.is_dir or options.include_directories:
                    yield entry.path
            elif entry.is_dir and (options.follow_symlinks or not entry.is_symlink):
                yield from self._walk(entry.path, entry.rel, segments, index + 1, directory_only, visited)

    def walk_basename(self, matcher: SegmentMatcher) -> Iterator[str]:
        """
        Yield every entry under the root whose name matches `matcher`.

        Files match on name alone; directories only with `include_directories`.
        Each directory's matches come before its subdirectories are entered.
        """
        options = self._options
        visited: set[str] = set()
        stack: list[tuple[str, str]] = [(self.root, "")]
        while stack:
            dir_path, dir_rel = stack.pop()
            identity = self._identity(dir_path)
            if identity in visited:
                continue
            visited.add(identity)

            entries = self._read_entries(dir_path, dir_rel)
            if entries is None:
                continue

            subdirs: list[Entry] = []
            for entry in entries:
                if self._is_excluded(entry.rel, entry.is_dir):
                    continue
                if entry.is_dir:
                    if self._can_descend(entry):
                        subdirs.append(entry)
                    if options.include_directories and matcher.test(entry.name):
                        yield entry.path
                elif matcher.test(entry.name):
                    yield entry.path
            stack.extend((entry.path, entry.rel) for entry in reversed(subdirs))
